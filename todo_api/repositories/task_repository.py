from sqlalchemy import delete, func, insert, literal, or_
from sqlalchemy import select as sa_select
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from todo_api.models import Task, get_utc_now


class TaskRepository:
    """
    Data access for the tasks table.

    The repository never commits: transaction boundaries belong to the
    service layer. Writes are flushed so generated values (id, timestamps)
    are visible to the caller before commit.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> list[Task]:
        result = await self.session.exec(select(Task).order_by(Task.id))
        return list(result.all())

    async def find_by_id(self, task_id: int, for_update: bool = False) -> Task | None:
        # a locking read always goes to the database, bypassing the identity map
        return await self.session.get(
            Task, task_id, with_for_update=True if for_update else None
        )

    async def find_by_completed(self, completed: bool) -> list[Task]:
        query = select(Task).where(Task.completed == completed).order_by(Task.id)
        result = await self.session.exec(query)
        return list(result.all())

    async def find_by_title_containing(self, title: str) -> list[Task]:
        query = (
            select(Task)
            .where(Task.title.icontains(title, autoescape=True))
            .order_by(Task.id)
        )
        result = await self.session.exec(query)
        return list(result.all())

    async def find_by_completed_and_title_containing(
        self, completed: bool, title: str
    ) -> list[Task]:
        query = (
            select(Task)
            .where(Task.completed == completed)
            .where(Task.title.icontains(title, autoescape=True))
            .order_by(Task.id)
        )
        result = await self.session.exec(query)
        return list(result.all())

    async def search_by_keyword(self, keyword: str) -> list[Task]:
        """Case-insensitive match on title or description (NULL never matches)."""
        query = (
            select(Task)
            .where(
                or_(
                    Task.title.icontains(keyword, autoescape=True),
                    Task.description.icontains(keyword, autoescape=True),
                )
            )
            .order_by(Task.id)
        )
        result = await self.session.exec(query)
        return list(result.all())

    async def find_recent(self, limit: int = 10) -> list[Task]:
        query = (
            select(Task).order_by(Task.created_at.desc(), Task.id.desc()).limit(limit)
        )
        result = await self.session.exec(query)
        return list(result.all())

    async def exists_by_title(self, title: str) -> bool:
        result = await self.session.exec(
            select(Task.id).where(Task.title == title).limit(1)
        )
        return result.first() is not None

    async def exists_by_id(self, task_id: int) -> bool:
        result = await self.session.exec(
            select(Task.id).where(Task.id == task_id).limit(1)
        )
        return result.first() is not None

    async def count_by_completed(self, completed: bool) -> int:
        result = await self.session.exec(
            select(func.count()).select_from(Task).where(Task.completed == completed)
        )
        return result.one()

    async def save(self, task: Task) -> Task:
        """Insert a new task or flush changes to a loaded one."""
        self.session.add(task)
        await self.session.flush()
        await self.session.refresh(task)
        return task

    async def insert_if_title_absent(self, task: Task) -> Task | None:
        """
        Insert ``task`` unless a row with the same title already exists.

        The existence test and the insert are a single INSERT ... SELECT
        statement. Returns the persisted task, or None when the title is
        taken.
        """
        table = Task.__table__
        now = get_utc_now()
        values = {
            "title": task.title,
            "description": task.description,
            "completed": task.completed,
            "created_at": now,
            "updated_at": now,
        }
        title_taken = (
            sa_select(table.c.id).where(table.c.title == task.title).correlate(None)
        ).exists()
        rows = sa_select(
            *(literal(value, table.c[name].type) for name, value in values.items())
        ).where(~title_taken)
        statement = (
            insert(table).from_select(list(values), rows).returning(table.c.id)
        )

        result = await self.session.exec(statement)
        task_id = result.scalar_one_or_none()
        if task_id is None:
            return None
        return await self.session.get(Task, task_id)

    async def delete_by_id(self, task_id: int) -> bool:
        """Delete the row in one statement; False when nothing matched.

        The ORM-enabled DELETE also evicts the row from the identity map.
        """
        result = await self.session.exec(delete(Task).where(Task.id == task_id))
        return result.rowcount > 0
