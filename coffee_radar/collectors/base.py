from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class FreshnessCheck:
    fresh: bool
    roast_date: Optional[date] = None
    reason: Optional[str] = None

    @property
    def determined(self) -> bool:
        return self.reason is None

    @classmethod
    def undetermined(cls, reason: str) -> FreshnessCheck:
        return cls(fresh=False, reason=reason)


@dataclass
class PageScan:
    page_number: int
    total_count: int
    available_count: int
    fresh_hrefs: list[Optional[str]]

    @property
    def has_unavailable(self) -> bool:
        return self.available_count < self.total_count


@dataclass
class CatalogScan:
    pages: list[PageScan] = field(default_factory=list)

    @property
    def hrefs(self) -> list[Optional[str]]:
        out: list[Optional[str]] = []
        for page in self.pages:
            out.extend(page.fresh_hrefs)
        return out

    @property
    def total_products(self) -> int:
        return sum(p.total_count for p in self.pages)

    @property
    def available_products(self) -> int:
        return sum(p.available_count for p in self.pages)

    @property
    def fresh_products(self) -> int:
        return sum(len(p.fresh_hrefs) for p in self.pages)
