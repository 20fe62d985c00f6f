from sqlmodel import SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum

class MetricPoint(SQLModel):
    time: int # 分钟
    value: float

class LogLevel(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"

class LogEntry(SQLModel):
    timestamp: datetime
    level: LogLevel
    message: str

class ResourceMetrics(SQLModel):
    cpu_usage: float
    memory_usage: float
    gpu_usage: Optional[float] = None

class TaskMetricsPublic(SQLModel):
    task_id: str
    reward: list[MetricPoint]

class TaskLogsPublic(SQLModel):
    task_id: str
    logs: list[LogEntry]

class TaskResourcesPublic(SQLModel):
    task_id: str
    cpu: list[MetricPoint]
    memory: list[MetricPoint]
    gpu: list[MetricPoint]
    latest: ResourceMetrics
