"""
In-memory candidate catalog used by the reference dispatcher.

Items are loaded from a JSON file (a list of objects with at least an "id")
or built directly in code. Pages are filtered by year and ordered by one of
the configured sort keys, mimicking a remote discover endpoint.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Collection, Dict, Iterable, List, Optional, Union

from config.constants import DEFAULT_DISCOVER_PARAMS_CONFIG
from core.logging import get_logger
from discover.models import CandidateId


logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogItem:
    """Metadata for one candidate. The engine only ever sees the id."""
    id: CandidateId
    title: str = ""
    year: Optional[int] = None
    popularity: float = 0.0
    rating: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogItem":
        year = data.get("year")
        return cls(
            id=data["id"],
            title=str(data.get("title", "")),
            year=int(year) if year is not None else None,
            popularity=float(data.get("popularity", 0.0)),
            rating=float(data.get("rating", 0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "popularity": self.popularity,
            "rating": self.rating,
        }


_SORT_KEYS = {
    "popularity.desc": lambda item: item.popularity,
    "rating.desc": lambda item: item.rating,
    "year.desc": lambda item: item.year or 0,
}


class CandidateCatalog:
    """
    Read-only collection of catalog items indexed by id.

    Usage:
        catalog = CandidateCatalog([CatalogItem(id=1, year=2019), ...])
        ids = catalog.page(year=2019, sort_by="rating.desc", page=1, page_size=20)
    """

    def __init__(self, items: Iterable[CatalogItem] = ()):
        self._items: Dict[CandidateId, CatalogItem] = {}
        for item in items:
            if item.id in self._items:
                logger.warning("Duplicate catalog id ignored", candidate_id=item.id)
                continue
            self._items[item.id] = item

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._items

    def get(self, candidate_id: CandidateId) -> Optional[CatalogItem]:
        return self._items.get(candidate_id)

    def years(self) -> List[int]:
        return sorted({item.year for item in self._items.values() if item.year is not None})

    def page(
        self,
        year: Optional[int],
        sort_by: str,
        page: int,
        page_size: int,
        exclude: Collection[CandidateId] = (),
    ) -> List[CandidateId]:
        """
        Return one page of ids.

        Args:
            year: Only items from this year (None = any year)
            sort_by: One of the DiscoverParamsConfig.SORT_OPTIONS
            page: 1-based page number
            page_size: Items per page
            exclude: Ids dropped from the page (already decided). They still
                occupy their slot in the ordering, so page boundaries do not
                move as decisions accumulate.

        Raises:
            ValueError: If sort_by is not a known sort option
        """
        if sort_by not in _SORT_KEYS:
            raise ValueError(
                f"Unknown sort_by {sort_by!r}, expected one of "
                f"{DEFAULT_DISCOVER_PARAMS_CONFIG.SORT_OPTIONS}"
            )
        matching = self._matching(year)
        matching.sort(key=_SORT_KEYS[sort_by], reverse=True)

        start = (max(page, 1) - 1) * page_size
        return [
            item.id for item in matching[start:start + page_size]
            if item.id not in exclude
        ]

    def count(self, year: Optional[int]) -> int:
        """Number of items matching year (None = any year)."""
        return len(self._matching(year))

    def _matching(self, year: Optional[int]) -> List[CatalogItem]:
        return [
            item for item in self._items.values()
            if year is None or item.year == year
        ]


def load_catalog(path: Optional[Union[str, Path]]) -> CandidateCatalog:
    """
    Load a catalog from a JSON file.

    A missing path yields an empty catalog so the service can still start.
    """
    if path is None:
        logger.warning("No catalog path configured, starting with an empty catalog")
        return CandidateCatalog()

    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if isinstance(raw, dict):
        raw = raw.get("items", [])

    catalog = CandidateCatalog(CatalogItem.from_dict(entry) for entry in raw)
    logger.info("Catalog loaded", path=str(path), items=len(catalog), years=len(catalog.years()))
    return catalog
