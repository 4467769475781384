"""Error taxonomy for Taskline.

Every error below is recoverable: it aborts the current command only and is
reported to the user as plain text by the engine.
"""

from typing import List, Optional


class TasklineError(Exception):
    """Base class for user-facing Taskline errors."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        self.message = message
        self.suggestions = suggestions or []
        super().__init__(message)


# -------------------- parsing --------------------

class ParseError(TasklineError):
    """Raised when an input line cannot be turned into a command."""


class UnknownCommandError(ParseError):
    """The command keyword is not recognised."""

    def __init__(self, word: str = "", suggestions: Optional[List[str]] = None):
        self.word = word
        super().__init__("I'm sorry, but I don't know what that means :-(", suggestions)


class EmptyCommandError(UnknownCommandError):
    """The input line is blank."""

    def __init__(self):
        self.word = ""
        ParseError.__init__(self, "Empty command.")


class EmptyDescriptionError(ParseError):
    """A ``todo`` was given without a description."""

    def __init__(self, suggestions: Optional[List[str]] = None):
        super().__init__("The description of a todo cannot be empty.", suggestions)


class EmptyFieldError(ParseError):
    """A required text field is empty."""

    def __init__(self, field_name: str, suggestions: Optional[List[str]] = None):
        self.field_name = field_name
        super().__init__(f"The {field_name} cannot be empty.", suggestions)


class MissingFlagError(ParseError):
    """A required ``/flag`` is absent."""

    def __init__(self, flag: str, suggestions: Optional[List[str]] = None):
        self.flag = flag
        super().__init__(f"Missing '{flag}'.", suggestions)


class DuplicateFlagError(ParseError):
    """A ``/flag`` appears more than once."""

    def __init__(self, flag: str, suggestions: Optional[List[str]] = None):
        self.flag = flag
        super().__init__(f"'{flag}' may only appear once.", suggestions)


class MisorderedFlagsError(ParseError):
    """Two flags appear in the wrong order."""

    def __init__(self, first: str, second: str, suggestions: Optional[List[str]] = None):
        self.first = first
        self.second = second
        super().__init__(f"'{first}' must come before '{second}'.", suggestions)


class InvalidIndexError(ParseError):
    """A task index is not a base-10 integer."""

    def __init__(self, raw: str, suggestions: Optional[List[str]] = None):
        self.raw = raw
        if raw:
            message = f"'{raw}' is not a valid task number."
        else:
            message = "Please provide a task number."
        super().__init__(message, suggestions)


class InvalidDateError(ParseError):
    """A date argument is not a valid ``yyyy-MM-dd`` date."""

    def __init__(self, raw: str, suggestions: Optional[List[str]] = None):
        self.raw = raw
        super().__init__(
            "Please provide a valid date in yyyy-MM-dd format.", suggestions
        )


class ReservedCharacterError(ParseError):
    """A free-text field contains the storage field separator."""

    def __init__(self, field_name: str, char: str = "|"):
        self.field_name = field_name
        self.char = char
        super().__init__(f"The {field_name} cannot contain '{char}'.")


class LineBreakError(ParseError):
    """A free-text field spans more than one line."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"The {field_name} must fit on a single line.")


# -------------------- task store --------------------

class IndexOutOfRangeError(TasklineError):
    """A 1-based task index is outside ``1..size``."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        if size == 0:
            message = f"There is no task {index}: your list is empty."
        else:
            message = f"Task number {index} is out of range. Valid range: 1..{size}."
        super().__init__(message)


class DuplicateTaskError(TasklineError):
    """An identical task is already in the list."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"This task is already in your list (task {index}).")


# -------------------- task model --------------------

class TaskValidationError(TasklineError, ValueError):
    """A task violates a model invariant."""


class InvalidEventRangeError(TaskValidationError):
    """An event's end is not after its start."""

    def __init__(self, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__(f"The event must end after it starts ({start} -> {end}).")


# -------------------- persistence --------------------

class StorageError(TasklineError):
    """Reading or writing the task file failed."""
