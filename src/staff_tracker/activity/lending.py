from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol, Sequence

from ..common.datekey import now_local
from .model import LendingRecord


class LendingRepository(Protocol):
    """Read side of lent items. The feed only needs ``get_all``."""

    def get_all(self) -> Sequence[LendingRecord]:
        raise NotImplementedError


class StubLendingRepository(LendingRepository):
    """Placeholder loans until lending is a persisted entity of the API.

    Values are computed relative to ``now`` on every call.
    """

    def __init__(self, now_fn: Optional[Callable[[], datetime]] = None):
        self._now_fn = now_fn or now_local

    def get_all(self) -> Sequence[LendingRecord]:
        now = self._now_fn()
        today = now.date()
        return [
            LendingRecord(
                employee_id=1,
                item="Ladder",
                lent_on=today,
                return_date=today + timedelta(days=7),
                timestamp=now - timedelta(hours=2),
            ),
            LendingRecord(
                employee_id=3,
                item="Power Drill",
                lent_on=today,
                return_date=today + timedelta(days=3),
                timestamp=now - timedelta(hours=5),
            ),
        ]
