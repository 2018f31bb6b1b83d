class TaskError(Exception):
    """Base class for failures raised by the task service."""


class TaskNotFoundError(TaskError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")


class DuplicateTaskError(TaskError):
    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Task with title '{title}' already exists")
