"""Deterministic dish-of-the-day selection."""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Protocol

from dish_of_the_day.domain.dishes import DishRecord, DishView, empty_dish_view
from dish_of_the_day.services.dishes import DishService
from dish_of_the_day.services.ratings import to_view

logger = logging.getLogger(__name__)

_WORD_BYTES = 4
_WORD_COUNT = 4


class Clock(Protocol):
    """Source of the current calendar day."""

    def today(self) -> str:
        """Return today's date as YYYY-MM-DD."""


def select_index(day: str, nonce: int, count: int) -> int:
    """Pick an index in range(count) from a day string and nonce.

    The SHA-256 digest of ``f"{day}{nonce}"`` is split into four big-endian
    32-bit words which are XOR-folded together; the folded value modulo
    ``count`` is the index.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    digest = hashlib.sha256(f"{day}{nonce}".encode()).digest()
    folded = 0
    for offset in range(0, _WORD_BYTES * _WORD_COUNT, _WORD_BYTES):
        folded ^= int.from_bytes(digest[offset : offset + _WORD_BYTES], "big")
    return folded % count


@dataclass
class SelectionState:
    """Cached selection; ``dish_name`` is None for the empty sentinel."""

    nonce: int = 0
    day: str | None = None
    dish_name: str | None = None


@dataclass
class DailySelector:
    """Picks and caches the dish of the day."""

    dishes: DishService
    clock: Clock
    state: SelectionState = field(default_factory=SelectionState)

    @property
    def nonce(self) -> int:
        """Current nonce."""
        return self.state.nonce

    @property
    def selected_day(self) -> str | None:
        """Day the cached selection was computed for, if any."""
        return self.state.day

    def get_today(self, requesting_user_id: str | None = None) -> DishView:
        """Return today's dish, recomputing when the cache is stale."""
        records = self.dishes.list_records()
        today = self.clock.today()
        record = self._cached_record(records, today)
        if record is None and not self._is_fresh_empty(records, today):
            record = self._recompute(records, today)
        if record is None:
            return empty_dish_view()
        return to_view(record, requesting_user_id)

    def skip(self) -> DishView:
        """Advance the nonce and eagerly pick a new dish of the day."""
        self.state.nonce += 1
        logger.info("Skipping dish of the day", extra={"nonce": self.state.nonce})
        records = self.dishes.list_records()
        record = self._recompute(records, self.clock.today())
        if record is None:
            return empty_dish_view()
        return to_view(record)

    def _cached_record(
        self, records: list[DishRecord], today: str
    ) -> DishRecord | None:
        if self.state.day != today or self.state.dish_name is None:
            return None
        return next(
            (record for record in records if record.name == self.state.dish_name),
            None,
        )

    def _is_fresh_empty(self, records: list[DishRecord], today: str) -> bool:
        return not records and self.state.day == today

    def _recompute(self, records: list[DishRecord], today: str) -> DishRecord | None:
        self.state.day = today
        if not records:
            self.state.dish_name = None
            logger.info("No dishes to select from", extra={"day": today})
            return None
        record = records[select_index(today, self.state.nonce, len(records))]
        self.state.dish_name = record.name
        logger.info(
            "Selected dish of the day",
            extra={"day": today, "nonce": self.state.nonce, "dish": record.name},
        )
        return record
