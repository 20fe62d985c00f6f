import json
import pytest
import yaml
from fastapi import status
from fastapi.testclient import TestClient

from rl_dashboard.main import app
from rl_dashboard.core.config import settings
from rl_dashboard.core.deps import get_task_store
from rl_dashboard.core.session import get_current_submitter
from rl_dashboard.core.task_store import create_task_store
from rl_dashboard.models.task import Submitter, TaskStatus
from rl_dashboard.service.task import TaskService

# IMPORTANT: 导入实际的 get_task_service 函数
from rl_dashboard.api.endpoints.task import get_task_service

TASKS_URL = f"{settings.API_PREFIX}/tasks"

# --- Pytest Fixtures ---

@pytest.fixture
def task_store():
    """每个测试使用一个全新的任务仓库（带两条示例任务）"""
    return create_task_store(seed_mock_tasks=True)

@pytest.fixture(autouse=True)
def override_dependencies(task_store):
    """覆盖任务仓库和当前用户依赖项，测试结束后清除。"""
    app.dependency_overrides[get_task_store] = lambda: task_store
    app.dependency_overrides[get_current_submitter] = lambda: Submitter(name="testuser", avatar_url="")
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def client():
    """
    此客户端用于在测试期间向 FastAPI 应用程序发出请求。
    不进入 lifespan，应用状态完全由上面的依赖覆盖提供。
    """
    return TestClient(app)

# --- 测试用例 ---

class TestTaskList:

    def test_get_tasks(self, client):
        response = client.get(f"{TASKS_URL}/")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [task["id"] for task in data] == ["2", "1"]
        assert data[0]["status"] == "running"
        assert data[1]["submitter"]["name"] == "John Doe"

    def test_create_task(self, client):
        payload = {
            "name": "Pendulum Run",
            "algorithm": "SAC",
            "environment": "Pendulum-v1",
            "parameters": {"learningRate": 0.001, "network": {"hidden_sizes": [256, 256]}},
        }
        response = client.post(f"{TASKS_URL}/", json=payload)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["id"] == "3"
        assert data["status"] == "pending"
        assert data["submitter"]["name"] == "testuser"
        assert data["parameters"]["network"]["hidden_sizes"] == [256, 256]

        listed = client.get(f"{TASKS_URL}/").json()
        assert listed[0]["id"] == "3"

    @pytest.mark.parametrize("payload", [
        {"name": "   ", "algorithm": "PPO", "environment": "CartPole-v1"},
        {"name": "Run", "environment": "CartPole-v1"},
        {"name": "Run", "algorithm": "PPO", "environment": "CartPole-v1", "parameters": [1, 2]},
    ])
    def test_create_task_invalid_body(self, client, task_store, payload):
        response = client.post(f"{TASKS_URL}/", json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert len(task_store) == 2

    def test_get_tasks_uses_service(self, client, mocker):
        """路由只调用 service 层"""
        mock_service = mocker.MagicMock(spec=TaskService)
        mock_service.get_tasks.return_value = []
        app.dependency_overrides[get_task_service] = lambda: mock_service

        response = client.get(f"{TASKS_URL}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []
        mock_service.get_tasks.assert_called_once_with()


class TestTaskDetail:

    def test_get_task(self, client):
        response = client.get(f"{TASKS_URL}/1")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "CartPole Training"

    @pytest.mark.parametrize("suffix", ["", "/detail", "/config", "/metrics", "/logs", "/resources"])
    def test_unknown_task_returns_404(self, client, suffix):
        response = client.get(f"{TASKS_URL}/missing{suffix}")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "Task not found"}

    def test_get_task_detail_duration(self, client):
        response = client.get(f"{TASKS_URL}/1/detail")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["duration_minutes"] == 60
        assert data["algorithm"] == "PPO"

    def test_get_task_config_json_by_default(self, client):
        response = client.get(f"{TASKS_URL}/2/config")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["format"] == "json"
        assert json.loads(data["text"])["algorithm"] == "DQN"

    def test_get_task_config_yaml(self, client):
        response = client.get(f"{TASKS_URL}/2/config", params={"format": "yaml"})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["format"] == "yaml"
        assert yaml.safe_load(data["text"])["environment"] == "LunarLander-v2"

    def test_get_task_config_unknown_format(self, client):
        response = client.get(f"{TASKS_URL}/2/config", params={"format": "toml"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_get_metrics_logs_resources(self, client):
        metrics = client.get(f"{TASKS_URL}/1/metrics").json()
        assert len(metrics["reward"]) == settings.MOCK_SERIES_LENGTH
        assert metrics["reward"][1]["time"] == 5
        # 同一任务的模拟曲线保持不变
        assert client.get(f"{TASKS_URL}/1/metrics").json() == metrics

        logs = client.get(f"{TASKS_URL}/1/logs").json()
        assert logs["logs"][2]["level"] == "warning"

        resources = client.get(f"{TASKS_URL}/1/resources").json()
        assert resources["latest"]["cpu_usage"] == resources["cpu"][-1]["value"]


class TestUpdateTaskStatus:

    def test_update_status(self, client, task_store):
        response = client.patch(f"{TASKS_URL}/2/status", json={"status": "completed"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "completed"
        assert task_store.find_by_id("2").status == TaskStatus.completed

    def test_update_status_not_found(self, client):
        response = client.patch(f"{TASKS_URL}/404/status", json={"status": "failed"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_status_invalid_value(self, client):
        response = client.patch(f"{TASKS_URL}/2/status", json={"status": "paused"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_read_root(client):
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert "RL Task Dashboard" in response.json()["message"]

def test_lifespan_initializes_app_state():
    """进入 lifespan 后应用自带任务仓库，不依赖测试中的覆盖"""
    app.dependency_overrides.clear()
    with TestClient(app) as lifespan_client:
        assert len(app.state.task_store) == (2 if settings.SEED_MOCK_TASKS else 0)
        response = lifespan_client.post(f"{settings.API_PREFIX}/task_forms/")
        assert response.status_code == status.HTTP_201_CREATED
        assert len(app.state.task_forms) == 1
