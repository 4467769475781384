"""Command parser for Taskline.

Turns one raw input line into a validated :class:`Command`. The parser does
no I/O and never looks at the task list; index bounds are checked by the
engine when the command is applied.
"""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from fuzzywuzzy import fuzz, process

from .errors import (
    DuplicateFlagError,
    EmptyCommandError,
    EmptyDescriptionError,
    EmptyFieldError,
    InvalidDateError,
    InvalidIndexError,
    LineBreakError,
    MisorderedFlagsError,
    MissingFlagError,
    ReservedCharacterError,
    UnknownCommandError,
)
from .utils.datetime import parse_date


class CommandType(Enum):
    """Command keywords understood by the parser."""
    BYE = "bye"
    LIST = "list"
    MARK = "mark"
    UNMARK = "unmark"
    DELETE = "delete"
    TODO = "todo"
    DEADLINE = "deadline"
    EVENT = "event"
    ON = "on"
    FIND = "find"
    SORT = "sort"


USAGE: Dict[CommandType, str] = {
    CommandType.BYE: "bye",
    CommandType.LIST: "list",
    CommandType.MARK: "mark <task number>",
    CommandType.UNMARK: "unmark <task number>",
    CommandType.DELETE: "delete <task number>",
    CommandType.TODO: "todo <description>",
    CommandType.DEADLINE: "deadline <description> /by <when>",
    CommandType.EVENT: "event <description> /from <start> /to <end>",
    CommandType.ON: "on <yyyy-MM-dd>",
    CommandType.FIND: "find <keyword>",
    CommandType.SORT: "sort [by name | by status | by time]",
}

KEYWORDS: List[str] = [command.value for command in CommandType]

RESERVED_CHAR = "|"
# Every character str.splitlines treats as a line boundary.
LINE_BREAKS = frozenset("\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")
INDEX_RE = re.compile(r"^[+-]?[0-9]+$")


def _flag_pattern(flag: str) -> "re.Pattern[str]":
    # A flag is a whitespace-delimited token, so "/bypass" is not "/by".
    return re.compile(r"(?<!\S)" + re.escape(flag) + r"(?!\S)", re.IGNORECASE)


FLAG_BY = "/by"
FLAG_FROM = "/from"
FLAG_TO = "/to"

FLAG_PATTERNS = {flag: _flag_pattern(flag) for flag in (FLAG_BY, FLAG_FROM, FLAG_TO)}


@dataclass
class Command:
    """A parsed, validated command with its command-specific payload."""
    type: CommandType
    index: Optional[int] = None
    description: Optional[str] = None
    by: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    target_date: Optional[date] = None
    keyword: Optional[str] = None
    mode: Optional[str] = None


def _usage(command: CommandType) -> List[str]:
    return [f"Usage: {USAGE[command]}"]


class CommandParser:
    """Parses raw input lines into commands."""

    def __init__(self):
        self._handlers = {
            CommandType.BYE: self._parse_bare,
            CommandType.LIST: self._parse_bare,
            CommandType.MARK: self._parse_index,
            CommandType.UNMARK: self._parse_index,
            CommandType.DELETE: self._parse_index,
            CommandType.TODO: self._parse_todo,
            CommandType.DEADLINE: self._parse_deadline,
            CommandType.EVENT: self._parse_event,
            CommandType.ON: self._parse_on,
            CommandType.FIND: self._parse_find,
            CommandType.SORT: self._parse_sort,
        }

    def parse(self, line: str) -> Command:
        """Parse one input line.

        Args:
            line: Raw user input

        Returns:
            The parsed command

        Raises:
            ParseError: If the line is empty, unknown or malformed
        """
        text = line.strip()
        if not text:
            raise EmptyCommandError()

        word, args = self._split_keyword(text)
        try:
            command_type = CommandType(word.lower())
        except ValueError:
            raise UnknownCommandError(word, self.suggest_keyword(word)) from None

        return self._handlers[command_type](command_type, args)

    @staticmethod
    def _split_keyword(text: str) -> Tuple[str, str]:
        parts = text.split(None, 1)
        args = parts[1].strip() if len(parts) > 1 else ""
        return parts[0], args

    def suggest_keyword(self, word: str) -> List[str]:
        """Suggest the closest known keyword for a mistyped one."""
        if not word:
            return []
        match = process.extractOne(word.lower(), KEYWORDS, scorer=fuzz.ratio, score_cutoff=70)
        if match is None:
            return []
        return [f"Did you mean '{match[0]}'?"]

    # -------------------- per-command parsing --------------------

    def _parse_bare(self, command_type: CommandType, args: str) -> Command:
        if args:
            raise UnknownCommandError(
                f"{command_type.value} {args}", _usage(command_type)
            )
        return Command(command_type)

    def _parse_index(self, command_type: CommandType, args: str) -> Command:
        if not INDEX_RE.match(args):
            raise InvalidIndexError(args, _usage(command_type))
        return Command(command_type, index=int(args))

    def _parse_todo(self, command_type: CommandType, args: str) -> Command:
        if not args:
            raise EmptyDescriptionError(_usage(command_type))
        self._check_reserved(args, "description")
        return Command(command_type, description=args)

    def _parse_deadline(self, command_type: CommandType, body: str) -> Command:
        usage = _usage(command_type)
        match = self._single_flag(body, FLAG_BY, usage)

        description = body[:match.start()].strip()
        by = body[match.end():].strip()
        if not description:
            raise EmptyFieldError("description", usage)
        if not by:
            raise EmptyFieldError("deadline time", usage)
        self._check_reserved(description, "description")
        self._check_reserved(by, "deadline time")
        return Command(command_type, description=description, by=by)

    def _parse_event(self, command_type: CommandType, body: str) -> Command:
        usage = _usage(command_type)
        from_match = self._single_flag(body, FLAG_FROM, usage)
        to_match = self._single_flag(body, FLAG_TO, usage)
        if from_match.start() > to_match.start():
            raise MisorderedFlagsError(FLAG_FROM, FLAG_TO, usage)

        description = body[:from_match.start()].strip()
        start = body[from_match.end():to_match.start()].strip()
        end = body[to_match.end():].strip()
        for value, name in ((description, "description"),
                            (start, "event start"),
                            (end, "event end")):
            if not value:
                raise EmptyFieldError(name, usage)
            self._check_reserved(value, name)
        return Command(command_type, description=description, start=start, end=end)

    def _parse_on(self, command_type: CommandType, args: str) -> Command:
        target = parse_date(args)
        if target is None:
            raise InvalidDateError(args, _usage(command_type))
        return Command(command_type, target_date=target)

    def _parse_find(self, command_type: CommandType, args: str) -> Command:
        if not args:
            raise EmptyFieldError("keyword", _usage(command_type))
        return Command(command_type, keyword=args)

    def _parse_sort(self, command_type: CommandType, args: str) -> Command:
        return Command(command_type, mode=" ".join(args.lower().split()))

    # -------------------- helpers --------------------

    @staticmethod
    def _single_flag(body: str, flag: str, usage: List[str]) -> "re.Match[str]":
        """Return the only occurrence of a flag in the body."""
        matches = list(FLAG_PATTERNS[flag].finditer(body))
        if not matches:
            raise MissingFlagError(flag, usage)
        if len(matches) > 1:
            raise DuplicateFlagError(flag, usage)
        return matches[0]

    @staticmethod
    def _check_reserved(value: str, field_name: str) -> None:
        if RESERVED_CHAR in value:
            raise ReservedCharacterError(field_name, RESERVED_CHAR)
        if any(char in LINE_BREAKS for char in value):
            raise LineBreakError(field_name)


_default_parser = CommandParser()


def parse(line: str) -> Command:
    """Parse one input line with the shared parser instance."""
    return _default_parser.parse(line)
