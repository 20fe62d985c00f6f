"""
任务详情页的数据：配置文本、运行时长，以及模拟的训练曲线、日志和资源占用。

指标和日志都是模拟数据，真实的采集由训练基础设施负责。
模拟曲线以任务 id 作为随机种子，同一任务多次请求得到相同的曲线。
"""
import random
from datetime import datetime, timezone
from typing import Optional

from rl_dashboard.core import config_codec
from rl_dashboard.core.config import settings
from rl_dashboard.core.config_codec import ConfigFormat
from rl_dashboard.models.task import RLTask, TaskStatus
from rl_dashboard.schemas.task_monitor import (
    LogEntry, LogLevel, MetricPoint, ResourceMetrics,
    TaskLogsPublic, TaskMetricsPublic, TaskResourcesPublic
)

SAMPLE_INTERVAL_MINUTES = 5

# (基准值, 波动范围)
REWARD_PROFILE = (100.0, 50.0)
CPU_PROFILE = (45.0, 20.0)
MEMORY_PROFILE = (2.4, 1.0) # GB
GPU_PROFILE = (78.0, 15.0)

MOCK_LOGS = [
    ("2024-03-15T10:00:00+00:00", LogLevel.info, "Training started"),
    ("2024-03-15T10:01:00+00:00", LogLevel.info, "Episode 1 completed: reward=100"),
    ("2024-03-15T10:02:00+00:00", LogLevel.warning, "Learning rate adjusted to 0.0002"),
    ("2024-03-15T10:03:00+00:00", LogLevel.info, "Episode 2 completed: reward=150"),
    ("2024-03-15T10:04:00+00:00", LogLevel.error, "Memory usage exceeded 90%"),
]


def render_task_config(task: RLTask, config_format: ConfigFormat) -> str:
    """
    以 JSON 或 YAML 展示任务配置。
    """
    config = {
        "algorithm": task.algorithm,
        "environment": task.environment,
        "parameters": task.parameters,
    }
    return config_codec.serialize(config, config_format)


def task_duration_minutes(task: RLTask, now: Optional[datetime] = None) -> int:
    """
    已完成的任务算到最后更新时间，其余的算到当前时间。
    """
    if task.status == TaskStatus.completed:
        end = task.updated_at
    else:
        end = now or datetime.now(timezone.utc)
    return max(0, int((end - task.created_at).total_seconds() // 60))


def generate_time_series(length: int, base_value: float, variance: float, rng: random.Random) -> list[MetricPoint]:
    return [
        MetricPoint(
            time=i * SAMPLE_INTERVAL_MINUTES,
            value=base_value + rng.random() * variance - variance / 2,
        )
        for i in range(length)
    ]


def _rng_for(task: RLTask, channel: str) -> random.Random:
    return random.Random(f"{task.id}:{channel}")


def get_task_metrics(task: RLTask, length: Optional[int] = None) -> TaskMetricsPublic:
    if length is None:
        length = settings.MOCK_SERIES_LENGTH
    return TaskMetricsPublic(
        task_id=task.id,
        reward=generate_time_series(length, *REWARD_PROFILE, rng=_rng_for(task, "reward")),
    )


def get_task_logs(task: RLTask) -> TaskLogsPublic:
    return TaskLogsPublic(
        task_id=task.id,
        logs=[
            LogEntry(timestamp=datetime.fromisoformat(timestamp), level=level, message=message)
            for timestamp, level, message in MOCK_LOGS
        ],
    )


def get_task_resources(task: RLTask, length: Optional[int] = None) -> TaskResourcesPublic:
    if length is None:
        length = settings.MOCK_SERIES_LENGTH
    cpu = generate_time_series(length, *CPU_PROFILE, rng=_rng_for(task, "cpu"))
    memory = generate_time_series(length, *MEMORY_PROFILE, rng=_rng_for(task, "memory"))
    gpu = generate_time_series(length, *GPU_PROFILE, rng=_rng_for(task, "gpu"))
    latest = ResourceMetrics(
        cpu_usage=cpu[-1].value if cpu else 0.0,
        memory_usage=memory[-1].value if memory else 0.0,
        gpu_usage=gpu[-1].value if gpu else None,
    )
    return TaskResourcesPublic(task_id=task.id, cpu=cpu, memory=memory, gpu=gpu, latest=latest)
