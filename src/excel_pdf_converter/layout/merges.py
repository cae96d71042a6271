"""Per-cell merge membership index."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from excel_pdf_converter.grid import MergeRegion
from excel_pdf_converter.layout.references import encode_range
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Anchor:
    """The top-left cell of a merge region; the only cell that is drawn."""

    region: MergeRegion


@dataclass(frozen=True)
class Secondary:
    """A covered, non-anchor cell; occupies space but is never drawn."""

    region: MergeRegion


Membership = Anchor | Secondary


class MergeMap(Mapping[tuple[int, int], Membership]):
    """Read-only mapping from 1-based ``(row, col)`` to merge membership.

    Cells outside every merge region are absent.
    """

    def __init__(self, entries: dict[tuple[int, int], Membership]) -> None:
        self._entries = dict(entries)

    def __getitem__(self, key: tuple[int, int]) -> Membership:
        return self._entries[key]

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def membership(self, row: int, col: int) -> Membership | None:
        return self._entries.get((row, col))

    def is_secondary(self, row: int, col: int) -> bool:
        return isinstance(self._entries.get((row, col)), Secondary)

    def anchor_region(self, row: int, col: int) -> MergeRegion | None:
        """Region anchored at (row, col), or None if the cell is not an anchor."""
        entry = self._entries.get((row, col))
        if isinstance(entry, Anchor):
            return entry.region
        return None


def build_merge_map(regions: Iterable[MergeRegion]) -> MergeMap:
    """Expand merge regions into a per-cell membership index.

    Regions are expected not to overlap. When they do, the region that comes
    later in ``regions`` wins for every cell they share, and a warning is
    logged once per overlapping pair.
    """
    entries: dict[tuple[int, int], Membership] = {}
    reported: set[tuple[MergeRegion, MergeRegion]] = set()

    for region in regions:
        for row in range(region.top, region.bottom + 1):
            for col in range(region.left, region.right + 1):
                previous = entries.get((row, col))
                if previous is not None and previous.region != region:
                    pair = (previous.region, region)
                    if pair not in reported:
                        reported.add(pair)
                        logger.warning(
                            "Overlapping merge regions, later region wins",
                            earlier=encode_range(previous.region),
                            later=encode_range(region),
                        )
                if row == region.top and col == region.left:
                    entries[(row, col)] = Anchor(region)
                else:
                    entries[(row, col)] = Secondary(region)

    return MergeMap(entries)
