"""Curated check catalogs describing each audit family."""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from pageaudit.constants import CATALOG_FAMILIES
from pageaudit.models import CheckDefinition

logger = logging.getLogger(__name__)

CATALOG_DIR = Path(__file__).parent / "catalogs"

REQUIRED_FIELDS = ("id", "name", "positive_text", "negative_text")


class CatalogError(ValueError):
    """Raised when a catalog is missing, malformed or has duplicate ids."""


@dataclass(frozen=True)
class CheckCatalog:
    """An ordered, immutable set of check definitions for one audit family."""

    family: str
    checks: tuple[CheckDefinition, ...]
    version: int = 1
    _by_id: Mapping[str, CheckDefinition] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self):
        by_id = {}
        for check in self.checks:
            if check.id in by_id:
                raise CatalogError(
                    f"Duplicate check id '{check.id}' in {self.family} catalog"
                )
            by_id[check.id] = check
        object.__setattr__(self, "_by_id", MappingProxyType(by_id))

    def __iter__(self) -> Iterator[CheckDefinition]:
        return iter(self.checks)

    def __len__(self) -> int:
        return len(self.checks)

    def __contains__(self, check_id: object) -> bool:
        try:
            return check_id in self._by_id
        except TypeError:  # unhashable
            return False

    def get(self, check_id: str) -> Optional[CheckDefinition]:
        try:
            return self._by_id.get(check_id)
        except TypeError:
            return None

    @property
    def lookup(self) -> Mapping[str, CheckDefinition]:
        """Read-only id to check mapping."""
        return self._by_id

    @property
    def ids(self) -> list[str]:
        return [check.id for check in self.checks]

    @classmethod
    def from_dict(cls, data: dict, family: Optional[str] = None) -> "CheckCatalog":
        """Build a catalog from its JSON representation.

        Raises:
            CatalogError: If a check lacks a required field or ids repeat
        """
        if not isinstance(data, dict) or not isinstance(data.get("checks"), list):
            raise CatalogError("Catalog must be an object with a 'checks' list")

        family = family or data.get("family")
        if not family:
            raise CatalogError("Catalog has no family name")

        checks = []
        for index, raw in enumerate(data["checks"]):
            missing = [f for f in REQUIRED_FIELDS if not isinstance(raw, dict) or not raw.get(f)]
            if missing:
                raise CatalogError(
                    f"Check #{index} in {family} catalog is missing: {', '.join(missing)}"
                )
            checks.append(CheckDefinition.from_dict(raw))

        return cls(family=family, checks=tuple(checks), version=data.get("version", 1))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CheckCatalog":
        file_path = Path(path)
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogError(f"Catalog file not found: {file_path}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in catalog {file_path}: {e}") from e

        family = data.get("family") if isinstance(data, dict) else None
        catalog = cls.from_dict(data, family=family or file_path.stem)
        logger.debug(f"Loaded {len(catalog)} checks for {catalog.family} from {file_path}")
        return catalog


@lru_cache(maxsize=None)
def load_catalog(family: str) -> CheckCatalog:
    """Load a bundled catalog by family name.

    Args:
        family: One of accessibility, performance or seo

    Returns:
        The bundled CheckCatalog

    Raises:
        CatalogError: If the family is unknown or its file is invalid
    """
    if family not in CATALOG_FAMILIES:
        raise CatalogError(
            f"Unknown catalog family: '{family}'. "
            f"Supported families: {', '.join(CATALOG_FAMILIES)}"
        )
    return CheckCatalog.from_file(CATALOG_DIR / f"{family}.json")
