# tests/test_task_service.py

from __future__ import annotations

from datetime import timedelta

import pytest

from todo_api.core.exceptions import DuplicateTaskError, TaskNotFoundError
from todo_api.models import Task, TaskUpdate
from todo_api.services.task_service import TaskService


async def create(service: TaskService, title: str, description: str | None = None):
    return await service.create(Task(title=title, description=description))


async def test_create_forces_pending_and_sets_timestamps(service):
    task = await service.create(
        Task(title="Learn FastAPI", description="Complete tutorial", completed=True)
    )

    assert task.id is not None
    assert task.completed is False
    assert task.created_at is not None
    assert task.created_at == task.updated_at


async def test_create_duplicate_title_raises_and_persists_nothing(service):
    await create(service, "Learn FastAPI")

    with pytest.raises(DuplicateTaskError, match="Learn FastAPI"):
        await create(service, "Learn FastAPI")

    assert len(await service.list_all()) == 1


async def test_create_title_comparison_is_case_sensitive(service):
    await create(service, "Learn FastAPI")

    task = await create(service, "learn fastapi")

    assert task.id is not None
    assert len(await service.list_all()) == 2


async def test_get_returns_none_when_missing(service):
    assert await service.get(999) is None


async def test_list_by_completion(service):
    first = await create(service, "First task")
    await create(service, "Second task")
    await service.toggle_completion(first.id)

    completed = await service.list_by_completion(True)
    pending = await service.list_by_completion(False)

    assert [t.id for t in completed] == [first.id]
    assert [t.title for t in pending] == ["Second task"]


async def test_list_filtered_routes_by_filters(service):
    read = await create(service, "Read docs")
    await create(service, "Read book")
    await create(service, "Write docs")
    await service.toggle_completion(read.id)

    assert len(await service.list_filtered()) == 3
    assert [t.title for t in await service.list_filtered(completed=True)] == ["Read docs"]
    assert {t.title for t in await service.list_filtered(title="read")} == {
        "Read docs",
        "Read book",
    }
    assert [t.title for t in await service.list_filtered(False, "read")] == ["Read book"]


async def test_list_recent_respects_limit(repository):
    service = TaskService(repository, recent_limit=2)
    for i in range(4):
        await create(service, f"Recent task {i}")

    recent = await service.list_recent()

    assert [t.title for t in recent] == ["Recent task 3", "Recent task 2"]


async def test_search_by_title_and_keyword(service):
    await create(service, "Learn FastAPI", "Complete tutorial")
    await create(service, "Write unit tests", "Test all layers")

    assert [t.title for t in await service.search_by_title("fastapi")] == ["Learn FastAPI"]
    assert [t.title for t in await service.search_by_keyword("tutorial")] == ["Learn FastAPI"]
    assert [t.title for t in await service.search_by_keyword("TUTORIAL")] == ["Learn FastAPI"]


async def test_update_replaces_all_fields(service, session):
    task = await create(service, "Learn FastAPI", "Complete tutorial")
    # push the stored timestamps into the past so the refresh is observable
    task.updated_at = task.created_at = task.created_at - timedelta(seconds=5)
    await session.commit()
    created_at, previous_updated_at = task.created_at, task.updated_at

    updated = await service.update(
        task.id, TaskUpdate(title="Learn SQLModel", description=None, completed=True)
    )

    assert updated.id == task.id
    assert updated.title == "Learn SQLModel"
    assert updated.description is None
    assert updated.completed is True
    assert updated.created_at == created_at
    assert updated.updated_at > previous_updated_at


async def test_update_missing_task_raises(service):
    with pytest.raises(TaskNotFoundError, match="999"):
        await service.update(
            999, TaskUpdate(title="Anything", description=None, completed=False)
        )

    assert await service.list_all() == []


async def test_update_does_not_recheck_title_uniqueness(service):
    await create(service, "First task")
    second = await create(service, "Second task")

    updated = await service.update(
        second.id, TaskUpdate(title="First task", completed=False)
    )

    assert updated.title == "First task"
    assert [t.title for t in await service.list_all()] == ["First task", "First task"]


async def test_toggle_twice_restores_original(service):
    task = await create(service, "Learn FastAPI")

    assert (await service.toggle_completion(task.id)).completed is True
    assert (await service.toggle_completion(task.id)).completed is False


async def test_toggle_missing_task_raises(service):
    with pytest.raises(TaskNotFoundError):
        await service.toggle_completion(42)


async def test_delete_removes_task(service):
    task = await create(service, "Learn FastAPI")

    await service.delete(task.id)

    assert await service.get(task.id) is None


async def test_delete_missing_task_raises(service):
    with pytest.raises(TaskNotFoundError, match="Task with id 7 not found"):
        await service.delete(7)


async def test_counts_add_up_to_total(service):
    for title in ("One task", "Two task", "Three task"):
        await create(service, title)
    tasks = await service.list_all()
    await service.toggle_completion(tasks[0].id)

    completed = await service.count_completed()
    pending = await service.count_pending()

    assert (completed, pending) == (1, 2)
    assert completed + pending == len(await service.list_all())


async def test_read_only_operation_rejects_pending_changes(service):
    task = await create(service, "Learn FastAPI")
    task.title = "Changed outside a transaction"

    with pytest.raises(RuntimeError, match="read-only"):
        await service.count_pending()

    # the rollback discarded the change; reloading shows the stored title
    assert [t.title for t in await service.list_all()] == ["Learn FastAPI"]
