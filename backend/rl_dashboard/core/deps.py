from fastapi import FastAPI, Request

from rl_dashboard.core.config import settings
from rl_dashboard.core.task_store import InMemoryTaskStore, create_task_store
from rl_dashboard.service.task_form import TaskFormRegistry

def init_app_state(app: FastAPI) -> None:
    """
    创建任务仓库和表单草稿表，挂到 app.state 上。
    这个函数在应用启动时（main.py 的 lifespan）调用一次。
    """
    app.state.task_store = create_task_store(seed_mock_tasks=settings.SEED_MOCK_TASKS)
    app.state.task_forms = TaskFormRegistry()

async def get_task_store(request: Request) -> InMemoryTaskStore:
    """
    依赖项：当前应用的任务仓库。
    换成真实后端时，在这里返回对应的 API 客户端。
    """
    return request.app.state.task_store

async def get_form_registry(request: Request) -> TaskFormRegistry:
    """
    依赖项：当前应用中正在编辑的表单草稿。
    """
    return request.app.state.task_forms
