import logging
from typing import Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# LIMIT/OFFSET are bound as signed 64-bit integers
MAX_ROW_INDEX = 2**63 - 1


class PageRequest(BaseModel):
    """Zero-based page request with an optional sort key.

    Out-of-range values are normalized instead of rejected: ``size`` is
    clamped to ``[1, max_size]`` and ``page`` to ``>= 0`` and to the last
    page whose rows are still addressable.
    """

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: Optional[str] = None
    ascending: bool = True
    max_size: int = MAX_PAGE_SIZE

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        max_size = max(1, int(data.get("max_size") or MAX_PAGE_SIZE))
        size = data.get("size")
        size = min(max(1, int(size if size is not None else DEFAULT_PAGE_SIZE)), max_size)
        page = max(0, int(data.get("page") or 0))
        data.update(
            page=min(page, (MAX_ROW_INDEX - size) // size),
            size=size,
            max_size=max_size,
        )
        return data

    @classmethod
    def of(
        cls,
        page: Optional[int] = 0,
        size: Optional[int] = None,
        sort: Optional[str] = None,
        ascending: bool = True,
        max_size: int = MAX_PAGE_SIZE,
        default_size: int = DEFAULT_PAGE_SIZE,
    ) -> "PageRequest":
        """Build a request from unchecked client input."""
        if size is None:
            size = default_size
        return cls(page=page, size=size, sort=sort, ascending=ascending, max_size=max_size)

    @property
    def offset(self) -> int:
        return self.page * self.size

    def sort_key(self, allowed: Iterable[str]) -> Optional[str]:
        """Return the requested sort key if it is allowlisted.

        Unknown keys fall back to the default order (``None``).
        """
        if not self.sort or not self.sort.strip():
            return None
        key = self.sort.strip().lower()
        if key in allowed:
            return key
        logger.warning(f"Unsupported sort key {self.sort!r}, using default order")
        return None


class Page(BaseModel, Generic[T]):
    """One slice of a result set plus the total number of matching items."""

    items: List[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size
