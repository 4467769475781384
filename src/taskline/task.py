"""Task model for Taskline: todos, deadlines and events.

A task is a single dataclass carrying a ``kind`` discriminant plus the
payload that kind needs. Behaviour that differs per kind (display, time
keys, date matching) switches over ``kind``.

Time fields are either a :class:`StructuredTime` (the text parsed as a date or
date-time) or a :class:`RawTime` (free text kept verbatim).
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import InvalidEventRangeError, TaskValidationError
from .utils.datetime import (
    Moment,
    calendar_date,
    end_of,
    format_moment,
    parse_moment,
    start_of,
)


class TaskKind(Enum):
    """Task variants, valued by their one-letter symbol."""
    TODO = "T"
    DEADLINE = "D"
    EVENT = "E"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["TaskKind"]:
        """Look up a kind by symbol, returning None for unknown symbols."""
        try:
            return cls(symbol)
        except ValueError:
            return None


@dataclass(frozen=True)
class StructuredTime:
    """Time text that parsed as a date or a date-time."""
    raw: str
    value: Moment

    def display(self) -> str:
        return format_moment(self.value)

    def moment(self) -> Optional[datetime]:
        """Return the instant this time starts at (midnight for dates)."""
        return start_of(self.value)

    def on_date(self, target: date) -> bool:
        return calendar_date(self.value) == target

    def key(self) -> Tuple[str, Moment]:
        return ("moment", self.value)


@dataclass(frozen=True)
class RawTime:
    """Time text that matched no known format; kept as typed."""
    raw: str

    def display(self) -> str:
        return self.raw

    def moment(self) -> Optional[datetime]:
        return None

    def on_date(self, target: date) -> bool:
        return False

    def key(self) -> Tuple[str, str]:
        return ("raw", self.raw.strip().lower())


TimeValue = Union[StructuredTime, RawTime]


def parse_time(text: str) -> TimeValue:
    """Build a time value from user or file text.

    Tries ``yyyy-MM-dd HHmm`` then ``yyyy-MM-dd``; anything else is kept
    verbatim (trimmed) as a :class:`RawTime`.
    """
    raw = text.strip()
    value = parse_moment(raw)
    if value is None:
        return RawTime(raw)
    return StructuredTime(raw, value)


def _coerce_time(value: Union[TimeValue, str, None]) -> Optional[TimeValue]:
    if isinstance(value, str):
        return parse_time(value)
    return value


@dataclass
class Task:
    """A single entry in the task list."""

    kind: TaskKind
    description: str
    done: bool = False

    # Deadline payload
    by: Optional[TimeValue] = None

    # Event payload
    start: Optional[TimeValue] = None
    end: Optional[TimeValue] = None

    def __post_init__(self):
        """Normalise fields and enforce the per-kind invariants."""
        self.description = (self.description or "").strip()
        self.by = _coerce_time(self.by)
        self.start = _coerce_time(self.start)
        self.end = _coerce_time(self.end)

        if not self.description:
            raise TaskValidationError("The description of a task cannot be empty.")

        if self.kind is TaskKind.TODO:
            if self.by or self.start or self.end:
                raise TaskValidationError("A todo does not take a time.")
        elif self.kind is TaskKind.DEADLINE:
            if self.start or self.end:
                raise TaskValidationError("A deadline only takes a '/by' time.")
            self._require_time(self.by, "deadline time")
        elif self.kind is TaskKind.EVENT:
            if self.by:
                raise TaskValidationError("An event takes '/from' and '/to', not '/by'.")
            self._require_time(self.start, "event start")
            self._require_time(self.end, "event end")
            self._validate_event_range()
        else:
            raise TaskValidationError(f"Unknown task kind: {self.kind!r}")

    @staticmethod
    def _require_time(value: Optional[TimeValue], name: str) -> None:
        if value is None or not value.raw:
            raise TaskValidationError(f"The {name} cannot be empty.")

    def _validate_event_range(self) -> None:
        # Raw endpoints cannot be compared; only structured pairs are checked.
        if isinstance(self.start, StructuredTime) and isinstance(self.end, StructuredTime):
            if end_of(self.end.value) <= start_of(self.start.value):
                raise InvalidEventRangeError(self.start.display(), self.end.display())

    # -------------------- constructors --------------------

    @classmethod
    def todo(cls, description: str, done: bool = False) -> "Task":
        return cls(TaskKind.TODO, description, done)

    @classmethod
    def deadline(cls, description: str, by: Union[TimeValue, str], done: bool = False) -> "Task":
        return cls(TaskKind.DEADLINE, description, done, by=by)

    @classmethod
    def event(cls, description: str, start: Union[TimeValue, str],
              end: Union[TimeValue, str], done: bool = False) -> "Task":
        return cls(TaskKind.EVENT, description, done, start=start, end=end)

    # -------------------- state --------------------

    @property
    def status_icon(self) -> str:
        return "X" if self.done else " "

    def mark_done(self) -> None:
        """Mark the task as done. Marking a done task again is a no-op."""
        self.done = True

    def mark_not_done(self) -> None:
        """Mark the task as not done."""
        self.done = False

    # -------------------- time queries --------------------

    def time_fields(self) -> Tuple[TimeValue, ...]:
        """Return the time values this kind carries, in display order."""
        if self.kind is TaskKind.DEADLINE:
            return (self.by,)
        if self.kind is TaskKind.EVENT:
            return (self.start, self.end)
        return ()

    def occurs_on(self, target: date) -> bool:
        """Check whether the task falls on a calendar date.

        A deadline matches on its due date; an event matches on its start
        date or its end date. Todos and unparsed times never match.
        """
        return any(value.on_date(target) for value in self.time_fields())

    def earliest_moment(self) -> Optional[datetime]:
        """Return the due moment of a deadline or the start of an event."""
        if self.kind is TaskKind.DEADLINE:
            return self.by.moment()
        if self.kind is TaskKind.EVENT:
            return self.start.moment()
        return None

    # -------------------- duplicates --------------------

    def duplicate_key(self) -> tuple:
        """Key under which two tasks count as the same task."""
        return (
            self.kind,
            self.description.strip().lower(),
            tuple(value.key() for value in self.time_fields()),
        )

    def is_duplicate_of(self, other: "Task") -> bool:
        return self.duplicate_key() == other.duplicate_key()

    # -------------------- display --------------------

    def __str__(self) -> str:
        head = f"[{self.kind.symbol}][{self.status_icon}] {self.description}"
        if self.kind is TaskKind.DEADLINE:
            return f"{head} (by: {self.by.display()})"
        if self.kind is TaskKind.EVENT:
            return f"{head} (from: {self.start.display()} to: {self.end.display()})"
        return head
