"""Shared typed models for the tracker pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Records stay plain dicts: sources may attach arbitrary attributes and every
# field other than the natural key is passed through untouched.
Record = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Domain:
    """One tracked collection and the field that defines record identity."""

    name: str
    key_field: str
    filename: str
    marker: str


HARDWARE = Domain(
    name="hardware",
    key_field="name",
    filename="hardware.json",
    marker="dexterous hand hardware",
)
PAPERS = Domain(
    name="papers",
    key_field="title",
    filename="papers.json",
    marker="research papers",
)
DOMAINS: tuple[Domain, ...] = (HARDWARE, PAPERS)


@dataclass(slots=True)
class DomainResult:
    """Outcome of one domain's discover-merge-persist pass."""

    domain: str
    discovered: int = 0
    total: int = 0
    new: int = 0
    updated: int = 0
    recent: int = 0
    written: bool = False
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "discovered": self.discovered,
            "total": self.total,
            "new": self.new,
            "updated": self.updated,
            "recent": self.recent,
            "written": self.written,
            "error": self.error,
        }


@dataclass(slots=True)
class CycleReport:
    """Counts reported by a refresh cycle, keyed by domain name."""

    trigger: str
    results: dict[str, DomainResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when every domain's persistence write completed."""
        return bool(self.results) and all(r.written for r in self.results.values())

    def as_dict(self) -> dict[str, Any]:
        return {
            "trigger": self.trigger,
            "ok": self.ok,
            "domains": {name: r.as_dict() for name, r in self.results.items()},
        }
