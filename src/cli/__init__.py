# =============================================================================
# src/cli/__init__.py — CLI Module Overview
# =============================================================================
#
# Command-line tools for operators who need to look at or seed the vote
# store without the web frontend/API:
#
#   VERIFY (verify.py)
#      stats / vote / me against the SQLite verification store, using the
#      same verified-badge policy as the API.
#
# Architecture Notes:
#   - argparse for argument parsing, like the rest of the project's tools.
#   - The CLI builds its own store and service instead of going through
#     main.py's DI container; it runs as a one-shot script.
# =============================================================================

"""CLI tools for pinaFinder.

- ``python -m src.cli`` — inspect and record verification votes.
"""
