from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional

# Zero-argument time source returning milliseconds since the epoch.
Clock = Callable[[], int]

UNASSIGNED_ID = 0

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# One day inside datetime.min/max so a local-time shift cannot overflow.
_MIN_MS = (datetime(1, 1, 2, tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)
_MAX_MS = (datetime(9999, 12, 30, tzinfo=timezone.utc) - _EPOCH) // timedelta(milliseconds=1)


def system_clock() -> int:
    """Return the current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def _created_datetime(created: int, tz: Optional[tzinfo]) -> datetime:
    """Datetime for `created` in `tz` (local time when None), clamped to the calendar range."""
    ms = min(max(created, _MIN_MS), _MAX_MS)
    return (_EPOCH + timedelta(milliseconds=ms)).astimezone(tz)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Task:
    """
    One to-do item as an immutable value.

    Fields:
    - name: Text of the task (required)
    - important: Priority flag
    - completed: Done flag
    - created: Creation time in milliseconds since the epoch; set once
    - id: Primary key; 0 until the storage layer assigns one on insert

    Equality covers the five stored fields only. "Updates" produce a new value
    with the same id (see with_changes).
    """

    name: str
    important: bool = False
    completed: bool = False
    created: int = field(default_factory=system_clock)
    id: int = UNASSIGNED_ID

    @classmethod
    def new(
        cls,
        name: str,
        important: bool = False,
        completed: bool = False,
        *,
        clock: Clock = system_clock,
    ) -> Task:
        """Build an unsaved task whose creation time is read from `clock`."""
        return cls(name=name, important=important, completed=completed, created=clock())

    @property
    def is_persisted(self) -> bool:
        return self.id != UNASSIGNED_ID

    @property
    def created_date_formatted(self) -> str:
        """
        Locale-aware date/time rendering of `created`, recomputed on every read.

        Uses the local timezone and the process LC_TIME locale (the app sets it
        from the environment at startup), so the same stored value can render
        differently on differently configured hosts. Values beyond the calendar
        range render as the nearest representable date.
        """
        return _created_datetime(self.created, None).strftime("%c")

    def format_created(self, tz: Optional[tzinfo] = None, fmt: str = "%c") -> str:
        """Render `created` in an explicit timezone and format."""
        return _created_datetime(self.created, tz).strftime(fmt)

    def with_changes(self, **changes) -> Task:
        """
        Return a copy with the given fields replaced.

        The id and creation time identify the stored row and cannot be changed
        this way.
        """
        for locked in ("id", "created"):
            if locked in changes and changes[locked] != getattr(self, locked):
                raise ValueError(f"{locked} cannot be changed on an existing task")
        return replace(self, **changes)
