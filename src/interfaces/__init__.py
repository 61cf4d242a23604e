"""Public interface definitions for every external collaborator.

Storage backends and third-party APIs are reached only through the
abstract base classes in this package.  Concrete adapters live in
``src/providers/`` and are wired up in ``src/main.py``; tests inject
fakes or mocks in their place.

CONCRETE PROVIDER MAP:
    Interface               →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    IVerificationProvider   →  SQLiteVerificationProvider
    IReviewProvider         →  SQLiteReviewProvider
    IPlacesProvider         →  GooglePlacesProvider
"""

from src.interfaces.places_provider import IPlacesProvider, PlaceResult
from src.interfaces.review_provider import IReviewProvider
from src.interfaces.verification_provider import IVerificationProvider

__all__ = [
    "IPlacesProvider",
    "IReviewProvider",
    "IVerificationProvider",
    "PlaceResult",
]
