"""Program metadata structures for LC-3 image loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class AddressRegion:
    """Represents a contiguous word range within the LC-3 address space."""

    start: int
    end: int
    comment: str = ""

    def length(self) -> int:
        return self.end - self.start + 1


@dataclass
class ProgramImage:
    """Holds metadata extracted from an object image alongside the memory writes."""

    name: str = ""
    origin: int = 0x3000
    regions: List[AddressRegion] = field(default_factory=list)

    def add_region(self, start: int, end: int, comment: str = "") -> None:
        self.regions.append(AddressRegion(start, end, comment))

    @property
    def word_count(self) -> int:
        return sum(region.length() for region in self.regions)
