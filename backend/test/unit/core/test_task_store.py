import pytest
from datetime import datetime, timezone

from rl_dashboard.core.task_store import InMemoryTaskStore, build_mock_tasks, create_task_store
from rl_dashboard.models.task import RLTask, Submitter, TaskStatus

# --- 辅助函数 ---

def make_task(task_id: str, name: str = "task") -> RLTask:
    now = datetime.now(timezone.utc)
    return RLTask(
        id=task_id,
        name=name,
        algorithm="PPO",
        environment="CartPole-v1",
        parameters={"learningRate": 0.0003},
        created_at=now,
        updated_at=now,
        submitter=Submitter(name="tester", avatar_url=""),
    )

# --- Pytest Fixtures ---

@pytest.fixture
def empty_store():
    return InMemoryTaskStore()

@pytest.fixture
def seeded_store():
    return create_task_store(seed_mock_tasks=True)

# --- 测试用例 ---

class TestInMemoryTaskStore:

    def test_append_puts_newest_first(self, empty_store):
        empty_store.append(make_task(empty_store.next_id(), "first"))
        empty_store.append(make_task(empty_store.next_id(), "second"))
        assert [task.name for task in empty_store.list()] == ["second", "first"]

    def test_find_by_id_returns_task(self, empty_store):
        task = empty_store.append(make_task("7"))
        assert empty_store.find_by_id("7") is task

    def test_find_by_id_missing_returns_none(self, empty_store):
        """不存在的 id 是正常情况，返回 None 而不是抛异常"""
        assert empty_store.find_by_id("does-not-exist") is None

    def test_list_is_a_snapshot(self, empty_store):
        empty_store.append(make_task(empty_store.next_id()))
        snapshot = empty_store.list()
        snapshot.clear()
        assert len(empty_store) == 1

    def test_next_id_is_monotonic(self, empty_store):
        ids = [int(empty_store.next_id()) for _ in range(5)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 5

    def test_next_id_skips_ids_already_in_store(self):
        store = InMemoryTaskStore([make_task("1"), make_task("2")])
        assert store.next_id() == "3"

    @pytest.mark.parametrize("task_id", ["²", "abc", "1a"])
    def test_non_decimal_ids_do_not_advance_counter(self, task_id):
        store = InMemoryTaskStore([make_task(task_id)])
        assert store.find_by_id(task_id) is not None
        assert store.next_id() == "1"

    def test_replace_keeps_position(self, empty_store):
        empty_store.append(make_task("1", "old"))
        empty_store.append(make_task("2"))
        updated = empty_store.find_by_id("1").model_copy(update={"status": TaskStatus.running})
        assert empty_store.replace(updated) is updated
        assert [task.id for task in empty_store.list()] == ["2", "1"]
        assert empty_store.find_by_id("1").status == TaskStatus.running

    def test_replace_missing_returns_none(self, empty_store):
        assert empty_store.replace(make_task("42")) is None
        assert len(empty_store) == 0


class TestMockTasks:

    def test_seeded_store_lists_most_recent_first(self, seeded_store):
        tasks = seeded_store.list()
        assert [task.id for task in tasks] == ["2", "1"]
        assert tasks[0].name == "LunarLander Training"
        assert tasks[1].status == TaskStatus.completed

    def test_seeded_store_continues_ids(self, seeded_store):
        assert seeded_store.next_id() == "3"

    def test_unseeded_store_is_empty(self):
        assert len(create_task_store(seed_mock_tasks=False)) == 0

    def test_mock_tasks_have_utc_timestamps(self):
        for task in build_mock_tasks():
            assert task.created_at.tzinfo is not None
            assert task.updated_at >= task.created_at
