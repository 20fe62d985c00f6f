from datetime import datetime, timezone
from typing import Any, Dict
from enum import Enum

from sqlmodel import Field, SQLModel

class TaskStatus(str, Enum):
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


class Submitter(SQLModel):
    name: str
    avatar_url: str = Field(default="")


class RLTaskBase(SQLModel):
    name: str = Field(min_length=1)
    algorithm: str
    environment: str
    parameters: Dict[str, Any] = Field(default_factory=dict)

class RLTask(RLTaskBase):
    """
    一次已提交的强化学习训练任务。
    保存在内存任务仓库中，不做持久化。
    """
    id: str
    status: TaskStatus = Field(default=TaskStatus.pending)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    submitter: Submitter
