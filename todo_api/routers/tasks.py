from fastapi import APIRouter, Depends, Query, Response, status

from todo_api.core.exceptions import TaskNotFoundError
from todo_api.models import TaskCreate, TaskResponse, TaskStats, TaskUpdate
from todo_api.services.task_service import TaskService, get_task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
async def get_tasks(
    completed: bool | None = None,
    title: str | None = Query(default=None, description="Title substring"),
    service: TaskService = Depends(get_task_service),
):
    """List tasks, optionally filtered by completion status and title"""
    return await service.list_filtered(completed, title)


@router.get("/search", response_model=list[TaskResponse])
async def search_tasks(
    keyword: str = Query(min_length=1),
    service: TaskService = Depends(get_task_service),
):
    """Case-insensitive search across title and description"""
    return await service.search_by_keyword(keyword)


@router.get("/stats", response_model=TaskStats)
async def get_stats(service: TaskService = Depends(get_task_service)):
    completed = await service.count_completed()
    pending = await service.count_pending()
    return TaskStats(completed=completed, pending=pending, total=completed + pending)


@router.get("/recent", response_model=list[TaskResponse])
async def get_recent_tasks(service: TaskService = Depends(get_task_service)):
    """Most recently created tasks, newest first"""
    return await service.list_recent()


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Get a specific task by ID"""
    task = await service.get(task_id)
    if not task:
        raise TaskNotFoundError(task_id)
    return task


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate, service: TaskService = Depends(get_task_service)
):
    """Create a new task"""
    return await service.create(task_data.to_task())


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_data: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Replace title, description and completion status of a task"""
    return await service.update(task_id, task_data)


@router.patch("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Flip a task between completed and pending"""
    return await service.toggle_completion(task_id)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    """Delete a task"""
    await service.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
