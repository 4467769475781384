"""Taskline - a line-oriented task list with deadlines and events."""

__version__ = "0.1.0"

from .task import Task, TaskKind, StructuredTime, RawTime, parse_time
from .parser import Command, CommandType, CommandParser, parse
from .storage import Storage, TaskLineFormat, encode, decode
from .task_list import TaskList
from .engine import Engine, Reply

__all__ = [
    "Task",
    "TaskKind",
    "StructuredTime",
    "RawTime",
    "parse_time",
    "Command",
    "CommandType",
    "CommandParser",
    "parse",
    "Storage",
    "TaskLineFormat",
    "encode",
    "decode",
    "TaskList",
    "Engine",
    "Reply",
    "__version__",
]
