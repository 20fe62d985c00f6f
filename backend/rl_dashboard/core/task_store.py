import itertools
import logging
from datetime import datetime
from typing import Iterable, Optional

from rl_dashboard.models.task import RLTask, Submitter, TaskStatus

logger = logging.getLogger(__name__)

class InMemoryTaskStore:
    """
    内存中的任务仓库，按提交时间倒序保存任务（最新的在最前面）。

    - 没有持久化，进程重启后数据丢失
    - id 由仓库内部的单调计数器分配，不会重复使用
    - 将来替换成真正的后端 API 客户端时，只需要提供相同的方法
    """

    def __init__(self, tasks: Iterable[RLTask] = ()):
        self._tasks: list[RLTask] = []
        self._counter = itertools.count(1)
        self._last_id = 0
        for task in tasks:
            self.append(task)

    def __len__(self) -> int:
        return len(self._tasks)

    def next_id(self) -> str:
        task_id = next(self._counter)
        while task_id <= self._last_id:
            task_id = next(self._counter)
        self._last_id = task_id
        return str(task_id)

    def append(self, task: RLTask) -> RLTask:
        """
        插入到序列最前面。
        唯一性由调用方通过 next_id() 保证，这里不再检查。
        """
        self._tasks.insert(0, task)
        # 外部传入的数字 id 也要推进计数器，避免之后分配到重复 id
        if task.id.isdecimal():
            self._last_id = max(self._last_id, int(task.id))
        return task

    def find_by_id(self, task_id: str) -> Optional[RLTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def list(self) -> list[RLTask]:
        return list(self._tasks)

    def replace(self, task: RLTask) -> Optional[RLTask]:
        """用同 id 的新记录替换旧记录，位置不变。"""
        for index, existing in enumerate(self._tasks):
            if existing.id == task.id:
                self._tasks[index] = task
                return task
        return None


def _parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))

def build_mock_tasks() -> list[RLTask]:
    """
    两条历史示例任务，按时间先后排列。
    """
    return [
        RLTask(
            id="1",
            name="CartPole Training",
            status=TaskStatus.completed,
            algorithm="PPO",
            environment="CartPole-v1",
            parameters={"learningRate": 0.0003, "batchSize": 64, "episodes": 1000},
            created_at=_parse_time("2024-03-15T08:00:00Z"),
            updated_at=_parse_time("2024-03-15T09:00:00Z"),
            submitter=Submitter(
                name="John Doe",
                avatar_url="https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=32&h=32&fit=crop&crop=face",
            ),
        ),
        RLTask(
            id="2",
            name="LunarLander Training",
            status=TaskStatus.running,
            algorithm="DQN",
            environment="LunarLander-v2",
            parameters={"learningRate": 0.0001, "batchSize": 128, "episodes": 2000},
            created_at=_parse_time("2024-03-15T10:00:00Z"),
            updated_at=_parse_time("2024-03-15T10:00:00Z"),
            submitter=Submitter(
                name="Jane Smith",
                avatar_url="https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=32&h=32&fit=crop&crop=face",
            ),
        ),
    ]

def create_task_store(seed_mock_tasks: bool = True) -> InMemoryTaskStore:
    store = InMemoryTaskStore(build_mock_tasks() if seed_mock_tasks else ())
    logger.info(f"Task store ready with {len(store)} task(s)")
    return store
