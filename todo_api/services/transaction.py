from functools import wraps
from typing import Callable


def transactional(read_only: bool = False):
    """
    Decorator for async service methods. Runs the method in one transaction
    on ``self.repository.session``.

    Writers commit everything the method flushed, or roll back if it raises.
    Readers commit nothing: a read-only method that leaves pending changes in
    the session is an error and is rolled back.
    Example:
      @transactional(read_only=True)
      async def get(self, task_id): ...
    """

    def decorator(fn: Callable):
        @wraps(fn)
        async def wrapper(self, *args, **kwargs):
            session = self.repository.session
            try:
                result = await fn(self, *args, **kwargs)
                if read_only and (session.new or session.dirty or session.deleted):
                    raise RuntimeError(
                        f"{fn.__qualname__} modified the session inside a read-only transaction"
                    )
            except Exception:
                await session.rollback()
                raise

            await session.commit()
            return result

        return wrapper

    return decorator
