"""Registry for creating extractor instances per shop kind."""

from decimal import Decimal
from typing import Dict, Optional, Type

import structlog

from kenyadeals.schemas.scrape import DEFAULT_PRICE_FLOOR, ShopKind
from kenyadeals.scrapers.adapters import GenericExtractor, JumiaExtractor, KilimallExtractor
from kenyadeals.scrapers.base import BaseExtractor
from kenyadeals.scrapers.utils.normalizer import CategoryClassifier


logger = structlog.get_logger(__name__)


class ExtractorRegistry:
    """Maps ShopKind to extractor classes, with a generic fallback.

    Extractor instances are cached per kind so the classifier and price
    floor are shared by every page of a run.
    """

    def __init__(
        self,
        classifier: Optional[CategoryClassifier] = None,
        price_floor: Decimal = DEFAULT_PRICE_FLOOR,
        fallback: Type[BaseExtractor] = GenericExtractor,
    ):
        self.classifier = classifier or CategoryClassifier()
        self.price_floor = price_floor
        self.fallback = fallback
        self._registry: Dict[ShopKind, Type[BaseExtractor]] = {}
        self._instances: Dict[ShopKind, BaseExtractor] = {}

    def register(self, kind: ShopKind, extractor_class: Type[BaseExtractor]) -> None:
        """Register an extractor class for a shop kind.

        Args:
            kind: ShopKind identifier
            extractor_class: Extractor class (must inherit from BaseExtractor)
        """
        if not issubclass(extractor_class, BaseExtractor):
            raise ValueError(f"Extractor class must inherit from BaseExtractor: {extractor_class}")

        self._registry[kind] = extractor_class
        self._instances.pop(kind, None)
        logger.debug("extractor_registered", kind=kind.value, extractor=extractor_class.__name__)

    def get(self, kind: ShopKind) -> BaseExtractor:
        """Return the extractor for ``kind``, falling back to the generic one."""
        if kind not in self._instances:
            extractor_class = self._registry.get(kind)
            if extractor_class is None:
                logger.info("extractor_fallback", kind=kind.value, fallback=self.fallback.__name__)
                extractor_class = self.fallback
            self._instances[kind] = extractor_class(
                classifier=self.classifier, price_floor=self.price_floor
            )
        return self._instances[kind]

    def has_extractor(self, kind: ShopKind) -> bool:
        return kind in self._registry


def create_registry(
    classifier: Optional[CategoryClassifier] = None,
    price_floor: Decimal = DEFAULT_PRICE_FLOOR,
) -> ExtractorRegistry:
    """Build a registry with every built-in extractor registered."""
    registry = ExtractorRegistry(classifier=classifier, price_floor=price_floor)
    for kind, extractor_class in (
        (ShopKind.JUMIA, JumiaExtractor),
        (ShopKind.KILIMALL, KilimallExtractor),
        (ShopKind.GENERIC, GenericExtractor),
    ):
        registry.register(kind, extractor_class)
    return registry
