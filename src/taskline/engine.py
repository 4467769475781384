"""Engine for Taskline.

The engine owns the task list. Each call to :meth:`Engine.handle` takes one
line of input through parse, apply, persist and reply, and returns the
reply text. Shells (console, GUI) only read input and show replies.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import ConfigModel
from .errors import StorageError, TasklineError
from .parser import Command, CommandParser, CommandType
from .storage import Storage
from .task import Task
from .task_list import TaskList
from .utils.datetime import format_date

logger = logging.getLogger(__name__)


LOGO = (
    " _____         _    _ _            \n"
    "|_   _|_ _ ___| | _| (_)_ __   ___ \n"
    "  | |/ _` / __| |/ / | | '_ \\ / _ \\\n"
    "  | | (_| \\__ \\   <| | | | | |  __/\n"
    "  |_|\\__,_|___/_|\\_\\_|_|_| |_|\\___|\n"
)

BYE_MESSAGE = "Bye. Hope to see you again soon!"
EMPTY_LIST_MESSAGE = "No tasks in your list."
NO_MATCHES_MESSAGE = "No matching tasks found."
NO_TASKS_ON_DATE_MESSAGE = "No tasks on this date."


# -------------------- sort policy --------------------

SORT_BY_NAME = "by name"
SORT_BY_STATUS = "by status"
SORT_BY_TIME = "by time"


def _time_sort_key(task: Task) -> Tuple[int, datetime]:
    # Tasks without a structured moment go after all tasks with one.
    moment = task.earliest_moment()
    if moment is None:
        return (1, datetime.min)
    return (0, moment)


SORT_KEYS: Dict[str, Callable[[Task], object]] = {
    SORT_BY_NAME: lambda task: task.description.lower(),
    SORT_BY_STATUS: lambda task: task.done,
    SORT_BY_TIME: _time_sort_key,
}


def is_sort_mode(mode: Optional[str]) -> bool:
    return mode in SORT_KEYS


def sort_tasks(tasks: Iterable[Task], mode: Optional[str]) -> List[Task]:
    """Sort tasks stably by a sort mode.

    Args:
        tasks: Tasks in their current order
        mode: ``by name``, ``by status`` or ``by time``

    Returns:
        A new sorted list; an unknown mode keeps the current order
    """
    key = SORT_KEYS.get(mode or "")
    if key is None:
        return list(tasks)
    return sorted(tasks, key=key)


# -------------------- replies --------------------

@dataclass
class Reply:
    """Reply to one line of input."""
    text: str
    is_exit: bool = False
    is_error: bool = False


def format_numbered(entries: Sequence[Tuple[int, Task]]) -> str:
    """Format ``(index, task)`` pairs as ``1.[T][ ] ...`` lines."""
    return "\n".join(f"{position}.{task}" for position, task in entries)


def format_error(error: TasklineError) -> str:
    return "\n".join([f"Error: {error.message}", *error.suggestions])


class Engine:
    """Applies commands to the task list and formats the replies."""

    def __init__(self, storage: Optional[Storage] = None, tasks: Optional[TaskList] = None,
                 reject_duplicates: bool = True, parser: Optional[CommandParser] = None):
        self.storage = storage
        self.parser = parser or CommandParser()
        self.persistence_enabled = storage is not None
        if tasks is None:
            tasks = TaskList(self._load(), reject_duplicates=reject_duplicates)
        self.tasks = tasks

        self._handlers: Dict[CommandType, Callable[[Command], Reply]] = {
            CommandType.BYE: self._bye,
            CommandType.LIST: self._list,
            CommandType.MARK: self._mark,
            CommandType.UNMARK: self._unmark,
            CommandType.DELETE: self._delete,
            CommandType.TODO: self._add_todo,
            CommandType.DEADLINE: self._add_deadline,
            CommandType.EVENT: self._add_event,
            CommandType.ON: self._on,
            CommandType.FIND: self._find,
            CommandType.SORT: self._sort,
        }

    @classmethod
    def from_config(cls, config: ConfigModel,
                    data_file: Optional[Union[str, Path]] = None) -> "Engine":
        """Build an engine backed by the configured task file.

        Args:
            config: Loaded configuration
            data_file: Task file to use instead of ``config.data_path``
        """
        storage = Storage(data_file or config.data_path)
        return cls(storage, reject_duplicates=config.reject_duplicates)

    # -------------------- entry points --------------------

    def handle(self, line: str) -> str:
        """Process one line of input and return the reply text."""
        return self.respond(line).text

    def respond(self, line: str) -> Reply:
        """Process one line of input.

        Errors never escape: they become an ``Error: ...`` reply and leave
        the task list and the task file as they were.
        """
        try:
            command = self.parser.parse(line)
            logger.debug("Handling %s command", command.type.value)
            return self._handlers[command.type](command)
        except TasklineError as e:
            logger.debug("Command %r failed: %s", line, e.message)
            return Reply(format_error(e), is_error=True)

    def get_greeting(self) -> str:
        """Return the start-up banner with the current task count."""
        count = self.tasks.size()
        noun = "task" if count == 1 else "tasks"
        return (
            f"{LOGO}\n"
            f"Hello! I'm Taskline.\n"
            f"You have {count} {noun} in your list.\n"
            f"Try: todo, deadline, event, list, find. Type 'bye' to exit."
        )

    # -------------------- persistence --------------------

    def _load(self) -> List[Task]:
        if self.storage is None:
            return []
        try:
            tasks = self.storage.load()
        except StorageError as e:
            # Never overwrite a file that could not be read.
            logger.warning("%s; starting with an empty list in memory only", e.message)
            self.persistence_enabled = False
            return []
        logger.info("Loaded %d task(s) from %s", len(tasks), self.storage.path)
        return tasks

    def _persist(self) -> str:
        """Write the list to storage; return a warning suffix on failure."""
        if not self.persistence_enabled:
            return ""
        try:
            self.storage.save(self.tasks.all())
        except StorageError as e:
            logger.warning("%s; continuing in memory only", e.message)
            self.persistence_enabled = False
            return f"\nWarning: could not save tasks ({e.message}). Continuing in memory only."
        return ""

    # -------------------- handlers --------------------

    def _bye(self, command: Command) -> Reply:
        return Reply(BYE_MESSAGE, is_exit=True)

    def _list(self, command: Command) -> Reply:
        return Reply(self._listing("Here are the tasks in your list:"))

    def _listing(self, header: str) -> str:
        if not self.tasks.size():
            return EMPTY_LIST_MESSAGE
        entries = list(enumerate(self.tasks, start=1))
        return f"{header}\n{format_numbered(entries)}"

    def _mark(self, command: Command) -> Reply:
        task = self.tasks.mark(command.index)
        text = f"Nice! I've marked this task as done:\n{task}"
        return Reply(text + self._persist())

    def _unmark(self, command: Command) -> Reply:
        task = self.tasks.unmark(command.index)
        text = f"OK, I've marked this task as not done yet:\n{task}"
        return Reply(text + self._persist())

    def _delete(self, command: Command) -> Reply:
        task = self.tasks.remove(command.index)
        text = (
            f"Noted. I've removed this task:\n{task}\n"
            f"Now you have {self.tasks.size()} tasks in the list."
        )
        return Reply(text + self._persist())

    def _add(self, task: Task) -> Reply:
        self.tasks.add(task)
        text = (
            f"Got it. I've added this task:\n{task}\n"
            f"Now you have {self.tasks.size()} tasks in the list."
        )
        return Reply(text + self._persist())

    def _add_todo(self, command: Command) -> Reply:
        return self._add(Task.todo(command.description))

    def _add_deadline(self, command: Command) -> Reply:
        return self._add(Task.deadline(command.description, command.by))

    def _add_event(self, command: Command) -> Reply:
        return self._add(Task.event(command.description, command.start, command.end))

    def _on(self, command: Command) -> Reply:
        target: date = command.target_date
        entries = [
            (position, task)
            for position, task in enumerate(self.tasks, start=1)
            if task.occurs_on(target)
        ]
        if not entries:
            return Reply(NO_TASKS_ON_DATE_MESSAGE)
        return Reply(f"Here are the tasks on {format_date(target)}:\n{format_numbered(entries)}")

    def _find(self, command: Command) -> Reply:
        if not self.tasks.size():
            return Reply(EMPTY_LIST_MESSAGE)
        entries = self.tasks.find(command.keyword)
        if not entries:
            return Reply(NO_MATCHES_MESSAGE)
        return Reply(f"Here are the matching tasks in your list:\n{format_numbered(entries)}")

    def _sort(self, command: Command) -> Reply:
        mode = command.mode or ""
        if not is_sort_mode(mode):
            if mode:
                notice = f"Unknown sort mode '{mode}', order unchanged."
            else:
                notice = "No sort mode given, order unchanged."
            notice += f" Use: {', '.join(SORT_KEYS)}."
            return Reply(f"{notice}\n{self._listing('Here are the tasks in your list:')}")

        self.tasks.reorder(sort_tasks(self.tasks, mode))
        listing = self._listing(f"Here are the tasks in your list, sorted {mode}:")
        return Reply(listing + self._persist())
