"""Shop-specific extractor implementations.

Each module implements a class inheriting from BaseExtractor and is
registered against its ShopKind in kenyadeals.scrapers.factory.
"""

from .generic import GenericExtractor
from .jumia import JumiaExtractor
from .kilimall import KilimallExtractor

__all__ = [
    "GenericExtractor",
    "JumiaExtractor",
    "KilimallExtractor",
]
