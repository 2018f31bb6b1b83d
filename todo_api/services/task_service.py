import logging

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from todo_api.core.config import get_settings
from todo_api.core.exceptions import DuplicateTaskError, TaskNotFoundError
from todo_api.database import get_db
from todo_api.models import Task, TaskUpdate, get_utc_now
from todo_api.repositories.task_repository import TaskRepository
from todo_api.services.transaction import transactional

logger = logging.getLogger(__name__)


class TaskService:
    """
    Business rules for tasks on top of a TaskRepository.

    Each public method is one transaction. Failures are raised as
    TaskNotFoundError / DuplicateTaskError and translated to HTTP responses
    by the exception handlers.
    """

    def __init__(self, repository: TaskRepository, recent_limit: int = 10):
        self.repository = repository
        self.recent_limit = recent_limit

    @transactional(read_only=True)
    async def list_all(self) -> list[Task]:
        return await self.repository.find_all()

    @transactional(read_only=True)
    async def list_by_completion(self, completed: bool) -> list[Task]:
        return await self.repository.find_by_completed(completed)

    @transactional(read_only=True)
    async def list_filtered(
        self, completed: bool | None = None, title: str | None = None
    ) -> list[Task]:
        """Filter by completion status and/or title substring; both optional."""
        if completed is not None and title:
            return await self.repository.find_by_completed_and_title_containing(
                completed, title
            )
        if completed is not None:
            return await self.repository.find_by_completed(completed)
        if title:
            return await self.repository.find_by_title_containing(title)
        return await self.repository.find_all()

    @transactional(read_only=True)
    async def list_recent(self) -> list[Task]:
        return await self.repository.find_recent(self.recent_limit)

    @transactional(read_only=True)
    async def get(self, task_id: int) -> Task | None:
        return await self.repository.find_by_id(task_id)

    @transactional(read_only=True)
    async def search_by_title(self, title: str) -> list[Task]:
        return await self.repository.find_by_title_containing(title)

    @transactional(read_only=True)
    async def search_by_keyword(self, keyword: str) -> list[Task]:
        return await self.repository.search_by_keyword(keyword)

    @transactional()
    async def create(self, candidate: Task) -> Task:
        # new tasks always start pending
        candidate.completed = False

        task = await self.repository.insert_if_title_absent(candidate)
        if task is None:
            logger.warning("Rejected duplicate task title %r", candidate.title)
            raise DuplicateTaskError(candidate.title)

        logger.info("Created task %s", task.id)
        return task

    # Title uniqueness is only enforced at creation; an update may reuse
    # another task's title.
    @transactional()
    async def update(self, task_id: int, task_data: TaskUpdate) -> Task:
        task = await self.repository.find_by_id(task_id, for_update=True)
        if task is None:
            logger.warning("Update of missing task %s", task_id)
            raise TaskNotFoundError(task_id)

        task.title = task_data.title
        task.description = task_data.description
        task.completed = task_data.completed
        task.updated_at = get_utc_now()

        task = await self.repository.save(task)
        logger.info("Updated task %s", task_id)
        return task

    @transactional()
    async def toggle_completion(self, task_id: int) -> Task:
        task = await self.repository.find_by_id(task_id, for_update=True)
        if task is None:
            logger.warning("Toggle of missing task %s", task_id)
            raise TaskNotFoundError(task_id)

        task.completed = not task.completed
        task.updated_at = get_utc_now()

        task = await self.repository.save(task)
        logger.info("Task %s marked %s", task_id, "completed" if task.completed else "pending")
        return task

    @transactional()
    async def delete(self, task_id: int) -> None:
        if not await self.repository.delete_by_id(task_id):
            logger.warning("Delete of missing task %s", task_id)
            raise TaskNotFoundError(task_id)

        logger.info("Deleted task %s", task_id)

    @transactional(read_only=True)
    async def count_completed(self) -> int:
        return await self.repository.count_by_completed(True)

    @transactional(read_only=True)
    async def count_pending(self) -> int:
        return await self.repository.count_by_completed(False)


# Dependency for getting a TaskService bound to the request's session
def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(
        TaskRepository(db), recent_limit=get_settings().recent_tasks_limit
    )
