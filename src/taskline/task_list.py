"""Ordered, 1-based task list."""

from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import DuplicateTaskError, IndexOutOfRangeError
from .task import Task


class TaskList:
    """Ordered collection of tasks addressed by 1-based indices.

    Insertion order is preserved. Indices shown to users always run from
    1 to ``size()``; storage is a plain 0-based list underneath.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None, reject_duplicates: bool = True):
        self._tasks: List[Task] = list(tasks or [])
        self.reject_duplicates = reject_duplicates

    def size(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def all(self) -> Tuple[Task, ...]:
        """Return a snapshot of the tasks in order."""
        return tuple(self._tasks)

    def _offset(self, index: int) -> int:
        if not 1 <= index <= len(self._tasks):
            raise IndexOutOfRangeError(index, len(self._tasks))
        return index - 1

    def get(self, index: int) -> Task:
        """Return the task at a 1-based index."""
        return self._tasks[self._offset(index)]

    def find_duplicate(self, task: Task) -> Optional[int]:
        """Return the 1-based index of a task that duplicates the given one."""
        for position, existing in enumerate(self._tasks, start=1):
            if existing.is_duplicate_of(task):
                return position
        return None

    def add(self, task: Task) -> None:
        """Append a task to the end of the list.

        Raises:
            DuplicateTaskError: If duplicates are rejected and one exists
        """
        if self.reject_duplicates:
            position = self.find_duplicate(task)
            if position is not None:
                raise DuplicateTaskError(position)
        self._tasks.append(task)

    def remove(self, index: int) -> Task:
        """Remove and return the task at a 1-based index."""
        return self._tasks.pop(self._offset(index))

    def mark(self, index: int) -> Task:
        task = self.get(index)
        task.mark_done()
        return task

    def unmark(self, index: int) -> Task:
        task = self.get(index)
        task.mark_not_done()
        return task

    def find(self, keyword: str) -> List[Tuple[int, Task]]:
        """Find tasks whose description contains the keyword, ignoring case.

        Returns:
            ``(index, task)`` pairs in list order
        """
        if not keyword or not keyword.strip():
            raise ValueError("keyword must not be empty")
        needle = keyword.lower()
        return [
            (position, task)
            for position, task in enumerate(self._tasks, start=1)
            if needle in task.description.lower()
        ]

    def reorder(self, tasks: Iterable[Task]) -> None:
        """Replace the order of the list with a permutation of its tasks."""
        reordered = list(tasks)
        if sorted(map(id, reordered)) != sorted(map(id, self._tasks)):
            raise ValueError("reorder must keep exactly the same tasks")
        self._tasks = reordered
