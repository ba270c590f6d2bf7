# backend/slotbook/services/slots/calculator.py
"""
Slot grid generation.

Expands open-hours windows ("09:00"-"17:00") into fixed-length candidate
slots. Works on wall-clock strings only; time zones are applied at the
rendering boundary (see timezones.py).

SlotGenerator memoizes per rule shape. One instance per top-level query,
never shared between requests.
"""

import logging

from .config import minutes_to_time_str, time_str_to_minutes
from .records import AvailabilityRule, CandidateSlot

logger = logging.getLogger(__name__)


def generate_time_slots(
    start_time: str,
    end_time: str,
    duration_minutes: int,
) -> list[CandidateSlot]:
    """
    Generate consecutive slots of duration_minutes inside [start_time, end_time).

    A window shorter than one duration gives an empty list. Slots are
    never clipped.
    """
    if duration_minutes <= 0:
        raise ValueError(f"duration_minutes must be > 0, got {duration_minutes}")

    start_min = time_str_to_minutes(start_time)
    end_min = time_str_to_minutes(end_time)

    slots: list[CandidateSlot] = []
    t = start_min
    while t + duration_minutes <= end_min:
        slots.append(CandidateSlot(
            start=minutes_to_time_str(t),
            end=minutes_to_time_str(t + duration_minutes),
        ))
        t += duration_minutes

    return slots


def dedupe_by_start(slots: list[CandidateSlot]) -> tuple[list[CandidateSlot], list[CandidateSlot]]:
    """
    Keep the first slot for every start time.

    Returns:
        (kept, discarded)
    """
    kept: dict[str, CandidateSlot] = {}
    discarded: list[CandidateSlot] = []

    for slot in slots:
        if slot.start in kept:
            discarded.append(slot)
        else:
            kept[slot.start] = slot

    return list(kept.values()), discarded


class SlotGenerator:
    """Per-query slot generator with a cache keyed by rule shape."""

    def __init__(self):
        self._cache: dict[str, list[CandidateSlot]] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def cache_key(rules: list[AvailabilityRule], duration_minutes: int) -> str:
        windows = sorted(f"{r.window}@{r.timezone}" for r in rules)
        return "|".join(windows) + f"|{duration_minutes}"

    def slots_for(
        self,
        rules: list[AvailabilityRule],
        duration_minutes: int,
    ) -> list[CandidateSlot]:
        """
        Slots of all rules combined, deduplicated by start and sorted.

        Overlapping rules never multiply capacity: one slot per start time.
        """
        if not rules:
            return []

        key = self.cache_key(rules, duration_minutes)
        cached = self._cache.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        all_slots: list[CandidateSlot] = []
        for rule in sorted(rules, key=lambda r: (r.start_time, r.end_time, r.timezone)):
            for slot in generate_time_slots(rule.start_time, rule.end_time, duration_minutes):
                all_slots.append(CandidateSlot(
                    start=slot.start,
                    end=slot.end,
                    source_timezone=rule.timezone,
                    window=rule.window,
                ))

        kept, discarded = dedupe_by_start(all_slots)
        self._report_overlaps(kept, discarded)

        slots = sorted(kept, key=lambda s: s.start)
        self._cache[key] = slots
        return slots

    @staticmethod
    def _report_overlaps(kept: list[CandidateSlot], discarded: list[CandidateSlot]) -> None:
        """Warn when dedup dropped a slot coming from a different window."""
        if not discarded:
            return

        winners = {s.start: s for s in kept}
        lossy = [
            s for s in discarded
            if (s.window, s.source_timezone)
            != (winners[s.start].window, winners[s.start].source_timezone)
        ]
        if lossy:
            overlapping = sorted({s.window for s in lossy} | {winners[s.start].window for s in lossy})
            logger.warning(
                "Overlapping availability windows %s: %d duplicate slot(s) dropped (%s)",
                ", ".join(overlapping),
                len(lossy),
                ", ".join(sorted({s.start for s in lossy})),
            )
