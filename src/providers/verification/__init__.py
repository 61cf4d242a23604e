"""Crowd-verification vote stores.

SQLiteVerificationProvider keeps one vote per (place, user) in
data/verifications.db and tallies them on every stats request.
"""
