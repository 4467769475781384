"""Storage layer for Taskline using a pipe-delimited text file.

One task per line::

    T | 0 | read book
    D | 1 | return book | 2019-12-02 1800
    E | 0 | project meeting | 2019-12-02 1400 | 2019-12-02 1600

The done flag is ``1`` or ``0``. Time fields are stored as the text the user
typed, so a round trip keeps them exactly.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .errors import StorageError, TaskValidationError
from .task import Task, TaskKind

logger = logging.getLogger(__name__)


FIELD_SEPARATOR = "|"
DONE_FLAGS = {"1": True, "0": False}

# Field count per task kind, including tag and done flag.
FIELD_COUNTS = {
    TaskKind.TODO: 3,
    TaskKind.DEADLINE: 4,
    TaskKind.EVENT: 5,
}


class TaskLineFormat:
    """Handles conversion between Task objects and file lines."""

    @staticmethod
    def to_line(task: Task) -> str:
        """Convert a task to its file line."""
        flag = "1" if task.done else "0"
        fields = [task.kind.symbol, flag, task.description]

        if task.kind is TaskKind.TODO:
            pass
        elif task.kind is TaskKind.DEADLINE:
            fields.append(task.by.raw)
        elif task.kind is TaskKind.EVENT:
            fields.extend([task.start.raw, task.end.raw])
        else:
            raise ValueError(f"Cannot encode task kind {task.kind!r}")

        return f" {FIELD_SEPARATOR} ".join(fields)

    @staticmethod
    def from_line(line: str) -> Optional[Task]:
        """Parse a file line back to a Task.

        Returns:
            The decoded task, or None if the line is blank or corrupt
        """
        line = line.strip()
        if not line:
            return None

        fields = [part.strip() for part in line.split(FIELD_SEPARATOR)]
        kind = TaskKind.from_symbol(fields[0])
        if kind is None:
            logger.debug("Skipping line with unknown task type: %r", line)
            return None

        if len(fields) != FIELD_COUNTS[kind]:
            logger.debug("Skipping line with %d fields: %r", len(fields), line)
            return None

        done = DONE_FLAGS.get(fields[1])
        if done is None:
            logger.debug("Skipping line with invalid done flag: %r", line)
            return None

        description = fields[2]
        try:
            if kind is TaskKind.TODO:
                return Task.todo(description, done=done)
            if kind is TaskKind.DEADLINE:
                return Task.deadline(description, fields[3], done=done)
            return Task.event(description, fields[3], fields[4], done=done)
        except TaskValidationError as e:
            logger.debug("Skipping invalid task line %r: %s", line, e)
            return None


def encode(tasks: Iterable[Task]) -> List[str]:
    """Encode tasks into file lines, one line per task."""
    return [TaskLineFormat.to_line(task) for task in tasks]


def decode(lines: Iterable[str]) -> List[Task]:
    """Decode file lines into tasks, skipping lines that do not decode."""
    tasks = []
    for line in lines:
        task = TaskLineFormat.from_line(line)
        if task is not None:
            tasks.append(task)
    return tasks


class Storage:
    """File-based storage for the task list."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> List[Task]:
        """Load tasks from the task file.

        A missing file yields an empty list. Each line is decoded on its own,
        so a line with invalid UTF-8 is skipped like any other corrupt line.

        Raises:
            StorageError: If the file exists but cannot be read
        """
        if not self.path.exists():
            logger.info("No task file at %s, starting with an empty list", self.path)
            return []

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e

        lines = []
        for number, raw_line in enumerate(raw.splitlines(), start=1):
            try:
                lines.append(raw_line.decode("utf-8-sig" if number == 1 else "utf-8"))
            except UnicodeDecodeError:
                logger.debug("Skipping undecodable line %d in %s", number, self.path)

        tasks = decode(lines)
        skipped = sum(1 for line in lines if line.strip()) - len(tasks)
        if skipped:
            logger.info("Skipped %d unreadable line(s) in %s", skipped, self.path)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        """Overwrite the task file with the given tasks.

        The content is written to a temporary file next to the target and
        moved into place, so readers never see a half-written file.

        Raises:
            StorageError: If the file cannot be written
        """
        content = "".join(line + "\n" for line in encode(tasks))
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_name)

        logger.debug("Saved %d task(s) to %s", len(tasks), self.path)
