"""Todo service - business logic for todo list operations.

This service layer sits between callers (commands, library users) and the
todo repository. It trims input, stamps timestamps from its clock, and keeps
the ``marked_at``/``completed_at`` fields consistent with their flags.
"""

from __future__ import annotations

from blokit.models import Todo, TodoCreate, TodoView
from blokit.repositories import TodoQuery, TodoRepository
from blokit.utils.dates import Clock, now_utc
from blokit.utils.logger import get_logger
from blokit.utils.observable import LiveValue

logger = get_logger(__name__)

_VIEW_QUERIES = {
    TodoView.INCOMPLETE: TodoQuery.INCOMPLETE,
    TodoView.MARKED: TodoQuery.MARKED,
    TodoView.ALL: TodoQuery.ALL,
}


class TodoService:
    """Service for todo list business logic."""

    def __init__(self, todo_repository: TodoRepository, clock: Clock = now_utc):
        """Initialize the todo service.

        Args:
            todo_repository: TodoRepository implementation for data access
            clock: Source of "now" for created/marked/completed timestamps
        """
        self.repository = todo_repository
        self._clock = clock

    async def create_todo(self, text: str) -> Todo | None:
        """Create a todo from user text.

        Blank text (after trimming) is skipped rather than rejected.

        Returns:
            The stored Todo, or None when nothing was created
        """
        content = text.strip()
        if not content:
            logger.debug("skipped todo with empty content")
            return None

        todo = await self.repository.insert(
            TodoCreate(content=content, created_at=self._clock())
        )
        logger.info("created todo %s", todo.id)
        return todo

    async def get_todo(self, todo_id: int) -> Todo:
        return await self.repository.get(todo_id)

    async def complete_todo(self, todo_id: int) -> Todo:
        """Mark a todo as completed.

        Raises:
            NotFoundError: If the todo does not exist
        """
        todo = await self.repository.get(todo_id)
        updated = todo.model_copy(
            update={"completed": True, "completed_at": self._clock()}
        )
        await self.repository.update(updated)
        logger.info("completed todo %s", todo_id)
        return updated

    async def undo_complete_todo(self, todo_id: int) -> Todo:
        """Revert a completion.

        Callers are expected to offer this shortly after ``complete_todo``;
        the service itself does not enforce a deadline.
        """
        todo = await self.repository.get(todo_id)
        updated = todo.model_copy(update={"completed": False, "completed_at": None})
        await self.repository.update(updated)
        logger.info("reopened todo %s", todo_id)
        return updated

    async def toggle_marked(self, todo_id: int) -> Todo:
        """Flip the marked flag, stamping or clearing ``marked_at``."""
        todo = await self.repository.get(todo_id)
        marked = not todo.marked
        updated = todo.model_copy(
            update={
                "marked": marked,
                "marked_at": self._clock() if marked else None,
            }
        )
        await self.repository.update(updated)
        logger.info("%s todo %s", "marked" if marked else "unmarked", todo_id)
        return updated

    def list_incomplete(self) -> LiveValue[list[Todo]]:
        """Incomplete todos, oldest first, kept live."""
        return self.repository.subscribe(TodoQuery.INCOMPLETE)

    def list_marked(self) -> LiveValue[list[Todo]]:
        """Incomplete marked todos, most recently marked first, kept live."""
        return self.repository.subscribe(TodoQuery.MARKED)

    def list_all(self) -> LiveValue[list[Todo]]:
        """Every todo including completed ones, oldest first, kept live."""
        return self.repository.subscribe(TodoQuery.ALL)

    def list_view(self, view: TodoView | str) -> LiveValue[list[Todo]]:
        return self.repository.subscribe(_VIEW_QUERIES[TodoView(view)])
