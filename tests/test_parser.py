"""Tests for the command parser."""

from datetime import date

import pytest

from taskline.errors import (
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
from taskline.parser import CommandParser, CommandType, parse


class TestBasicCommands:
    """Test keyword recognition."""

    def setup_method(self):
        self.parser = CommandParser()

    @pytest.mark.parametrize("line, expected", [
        ("bye", CommandType.BYE),
        ("LIST", CommandType.LIST),
        ("  list  ", CommandType.LIST),
    ])
    def test_bare_commands(self, line, expected):
        """Keywords are case-insensitive and surrounding spaces are ignored."""
        assert self.parser.parse(line).type is expected

    def test_unknown_command(self):
        """Unrecognised keywords fail."""
        with pytest.raises(UnknownCommandError):
            self.parser.parse("blah")

    def test_unknown_command_suggests_keyword(self):
        """A close typo gets a suggestion."""
        with pytest.raises(UnknownCommandError) as exc_info:
            self.parser.parse("dedline submit /by 2019-12-02")
        assert exc_info.value.suggestions == ["Did you mean 'deadline'?"]

    def test_empty_line(self):
        """Blank input is an empty command."""
        with pytest.raises(EmptyCommandError):
            self.parser.parse("   ")

    def test_list_with_arguments_is_unknown(self):
        with pytest.raises(UnknownCommandError):
            self.parser.parse("list everything")

    def test_keyword_must_be_whole_word(self):
        """'todoread' is not 'todo read'."""
        with pytest.raises(UnknownCommandError):
            self.parser.parse("todoread book")

    def test_module_level_parse(self):
        assert parse("todo read book").description == "read book"


class TestIndexCommands:
    """Test mark/unmark/delete argument handling."""

    def setup_method(self):
        self.parser = CommandParser()

    @pytest.mark.parametrize("keyword, expected", [
        ("mark", CommandType.MARK),
        ("unmark", CommandType.UNMARK),
        ("delete", CommandType.DELETE),
    ])
    def test_integer_index(self, keyword, expected):
        command = self.parser.parse(f"{keyword}    2")
        assert command.type is expected
        assert command.index == 2

    def test_index_not_bounds_checked(self):
        """The parser accepts any integer; the engine checks bounds."""
        assert self.parser.parse("mark 99").index == 99

    @pytest.mark.parametrize("line", ["mark", "mark two", "delete 1.5", "unmark 1 2"])
    def test_invalid_index(self, line):
        with pytest.raises(InvalidIndexError):
            self.parser.parse(line)


class TestTodo:
    """Test todo parsing."""

    def setup_method(self):
        self.parser = CommandParser()

    def test_description(self):
        command = self.parser.parse("todo   read  book ")
        assert command.type is CommandType.TODO
        assert command.description == "read  book"

    @pytest.mark.parametrize("line", ["todo", "todo    "])
    def test_empty_description(self, line):
        with pytest.raises(EmptyDescriptionError):
            self.parser.parse(line)

    def test_separator_rejected(self):
        """The storage separator cannot appear in descriptions."""
        with pytest.raises(ReservedCharacterError):
            self.parser.parse("todo this | that")

    @pytest.mark.parametrize("line", [
        "todo buy milk\nand eggs",
        "todo buy milk\rand eggs",
        "todo buy milk\u2028and eggs",
    ])
    def test_line_breaks_rejected(self, line):
        """A task must be stored on a single line."""
        with pytest.raises(LineBreakError) as exc_info:
            self.parser.parse(line)
        assert exc_info.value.message == "The description must fit on a single line."

    def test_trailing_newline_is_stripped(self):
        assert self.parser.parse("todo read book\n").description == "read book"


class TestDeadline:
    """Test deadline parsing."""

    def setup_method(self):
        self.parser = CommandParser()

    def test_deadline_with_datetime(self):
        command = self.parser.parse("deadline submit report /by 2019-12-02 1800")
        assert command.type is CommandType.DEADLINE
        assert command.description == "submit report"
        assert command.by == "2019-12-02 1800"
        assert command.start is None
        assert command.end is None

    def test_flag_is_case_insensitive(self):
        command = self.parser.parse("DEADLINE return book /BY Sunday")
        assert command.description == "return book"
        assert command.by == "Sunday"

    def test_empty_description(self):
        with pytest.raises(EmptyFieldError) as exc_info:
            self.parser.parse("deadline /by 2019-12-02")
        assert exc_info.value.field_name == "description"

    def test_empty_time(self):
        with pytest.raises(EmptyFieldError):
            self.parser.parse("deadline submit report /by   ")

    def test_missing_flag(self):
        with pytest.raises(MissingFlagError) as exc_info:
            self.parser.parse("deadline submit report 2019-12-02")
        assert exc_info.value.flag == "/by"

    def test_flag_inside_word_does_not_count(self):
        with pytest.raises(MissingFlagError):
            self.parser.parse("deadline fix /bypass valve")

    def test_duplicate_flag(self):
        with pytest.raises(DuplicateFlagError):
            self.parser.parse("deadline submit /by Monday /by Tuesday")


class TestEvent:
    """Test event parsing."""

    def setup_method(self):
        self.parser = CommandParser()

    def test_event_with_from_to(self):
        command = self.parser.parse("event meeting /from 2019-12-02 1800 /to 2019-12-02 2000")
        assert command.type is CommandType.EVENT
        assert command.description == "meeting"
        assert command.start == "2019-12-02 1800"
        assert command.end == "2019-12-02 2000"

    @pytest.mark.parametrize("line, flag", [
        ("event meeting /to 2019-12-02", "/from"),
        ("event meeting /from 2019-12-02", "/to"),
    ])
    def test_missing_flags(self, line, flag):
        with pytest.raises(MissingFlagError) as exc_info:
            self.parser.parse(line)
        assert exc_info.value.flag == flag

    def test_duplicate_flag(self):
        with pytest.raises(DuplicateFlagError):
            self.parser.parse("event meeting /from a /from b /to c")

    def test_misordered_flags(self):
        with pytest.raises(MisorderedFlagsError):
            self.parser.parse("event meeting /to 2019-12-02 2000 /from 2019-12-02 1800")

    @pytest.mark.parametrize("line", [
        "event /from a /to b",
        "event meeting /from /to b",
        "event meeting /from a /to",
    ])
    def test_empty_fields(self, line):
        with pytest.raises(EmptyFieldError):
            self.parser.parse(line)

    def test_line_break_in_event_end_rejected(self):
        with pytest.raises(LineBreakError) as exc_info:
            self.parser.parse("event meeting /from 2pm /to 4pm\nextra")
        assert exc_info.value.field_name == "event end"


class TestQueries:
    """Test on/find/sort parsing."""

    def setup_method(self):
        self.parser = CommandParser()

    def test_on_date(self):
        command = self.parser.parse("on 2019-12-02")
        assert command.type is CommandType.ON
        assert command.target_date == date(2019, 12, 2)

    @pytest.mark.parametrize("line", ["on", "on tomorrow", "on 2019-13-01", "on 2019-12-2"])
    def test_on_invalid_date(self, line):
        with pytest.raises(InvalidDateError):
            self.parser.parse(line)

    def test_find(self):
        command = self.parser.parse("find Book")
        assert command.type is CommandType.FIND
        assert command.keyword == "Book"

    def test_find_requires_keyword(self):
        with pytest.raises(EmptyFieldError):
            self.parser.parse("find   ")

    def test_sort_mode_is_normalised(self):
        command = self.parser.parse("sort  By   NAME")
        assert command.type is CommandType.SORT
        assert command.mode == "by name"

    def test_sort_accepts_unknown_and_missing_modes(self):
        assert self.parser.parse("sort sideways").mode == "sideways"
        assert self.parser.parse("sort").mode == ""
