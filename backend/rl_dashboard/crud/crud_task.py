from typing import Optional
from datetime import datetime, timezone

from rl_dashboard.core.task_store import InMemoryTaskStore
from rl_dashboard.models.task import RLTask, Submitter, TaskStatus
from rl_dashboard.schemas.task import TaskCreate, TaskUpdate

def create_task(task_store: InMemoryTaskStore, task_create: TaskCreate, submitter: Submitter) -> RLTask:
    """
    在任务仓库中创建新的训练任务。
    状态固定为 pending，创建时间和更新时间都取当前时间。
    """
    now = datetime.now(timezone.utc)
    task = RLTask(
        **task_create.model_dump(),
        id=task_store.next_id(),
        status=TaskStatus.pending,
        created_at=now,
        updated_at=now,
        submitter=submitter,
    )
    return task_store.append(task)

def get_task_by_id(task_store: InMemoryTaskStore, task_id: str) -> Optional[RLTask]:
    """
    根据任务 ID 获取训练任务，不存在时返回 None。
    """
    return task_store.find_by_id(task_id)

def get_tasks(task_store: InMemoryTaskStore) -> list[RLTask]:
    """
    获取所有训练任务，最新提交的在最前面。
    """
    return task_store.list()

def update_task(task_store: InMemoryTaskStore, task_id: str, task_update: TaskUpdate) -> Optional[RLTask]:
    """
    更新指定 ID 的训练任务。创建时间不允许修改。
    """
    task = task_store.find_by_id(task_id)
    if not task:
        return None
    changes = task_update.model_dump(exclude_none=True)
    changes["updated_at"] = datetime.now(timezone.utc)
    updated_task = task.model_copy(update=changes)
    return task_store.replace(updated_task)
