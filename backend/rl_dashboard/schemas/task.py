from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
from pydantic import field_validator
from rl_dashboard.models.task import RLTaskBase, Submitter, TaskStatus
from rl_dashboard.core.config_codec import ConfigFormat

# Create：提交任务时传来的数据 (也是将来真实后端需要接受的格式)
class TaskCreate(RLTaskBase):

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Task name is required")
        return value

# Public：get时公开给前端的数据
class TaskPublic(SQLModel):
    id: str
    name: str
    status: TaskStatus
    algorithm: str
    environment: str
    parameters: dict
    created_at: datetime
    updated_at: datetime
    submitter: Submitter

# Update：外部协作方(训练基础设施)回写状态时传来的数据
class TaskUpdate(SQLModel):
    status: Optional[TaskStatus] = Field(default=None)

class TaskSubmitted(SQLModel):
    task_id: str

class TaskDetailPublic(TaskPublic):
    duration_minutes: int

class TaskConfigPublic(SQLModel):
    task_id: str
    format: ConfigFormat
    text: str
