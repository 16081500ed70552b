"""
Chanting Domain Services

Business rules that span several tracks rather than a single session.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from nama_audio.domain.chanting.entities import Track
from nama_audio.domain.shared.constants import ChantConstants


@dataclass(frozen=True)
class TrackPartition:
    """Catalog tracks split by category."""

    repeating: list[Track] = field(default_factory=list)
    single: list[Track] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.repeating) + len(self.single)


class ChantingDomainService:
    """Domain service for catalog and counting rules."""

    @classmethod
    def partition(cls, tracks: Iterable[Track]) -> TrackPartition:
        """Split tracks into repeating and play-once groups, keeping catalog order."""
        repeating: list[Track] = []
        single: list[Track] = []
        for track in tracks:
            (repeating if track.is_repeating else single).append(track)
        return TrackPartition(repeating=repeating, single=single)

    @classmethod
    def max_loops_for(cls, is_repeating: bool) -> int:
        if is_repeating:
            return ChantConstants.REPEATING_MAX_LOOPS
        return ChantConstants.DEFAULT_MAX_LOOPS

    @classmethod
    def count_for_loops(cls, loops: int) -> int:
        return loops * ChantConstants.PER_LOOP_INCREMENT
