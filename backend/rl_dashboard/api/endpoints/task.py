from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Annotated

from rl_dashboard.core.config_codec import ConfigFormat
from rl_dashboard.core.deps import get_task_store
from rl_dashboard.core.session import get_current_submitter
from rl_dashboard.core.task_store import InMemoryTaskStore
from rl_dashboard.models.task import RLTask, Submitter
from rl_dashboard.schemas.task import (
    TaskConfigPublic, TaskCreate, TaskDetailPublic, TaskPublic, TaskUpdate
)
from rl_dashboard.schemas.task_monitor import TaskLogsPublic, TaskMetricsPublic, TaskResourcesPublic
from rl_dashboard.service import task_monitor
from rl_dashboard.service.task import TaskService

# 创建路由实例
router = APIRouter()

# 依赖注入 TaskService
async def get_task_service(task_store: Annotated[InMemoryTaskStore, Depends(get_task_store)]) -> TaskService:
    return TaskService(task_store)

def _get_task_or_404(task_service: TaskService, task_id: str) -> RLTask:
    task = task_service.get_task_by_id(task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task

@router.get("/", response_model=list[TaskPublic], summary="获取任务历史")
async def get_tasks(
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> list[TaskPublic]:
    """
    **获取所有训练任务**

    按提交时间倒序返回，最新的任务在最前面。

    **响应:**
    - `200 OK`: 成功获取任务列表。
    """
    return task_service.get_tasks()

@router.post("/", response_model=TaskPublic, status_code=status.HTTP_201_CREATED, summary="创建训练任务")
async def create_task(
    task_create: TaskCreate,
    submitter: Annotated[Submitter, Depends(get_current_submitter)],
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskPublic:
    """
    **直接创建训练任务**

    请求体格式为 `{name, algorithm, environment, parameters}`，返回带有新 id 的任务。

    **响应:**
    - `201 Created`: 成功创建训练任务。
    - `422 Unprocessable Entity`: 请求体不符合要求。
    """
    return task_service.create_task(task_create, submitter)

@router.get("/{task_id}", response_model=TaskPublic, summary="获取训练任务详情")
async def get_task(
    task_id: str,
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskPublic:
    """
    **获取指定训练任务**

    **响应:**
    - `200 OK`: 成功获取训练任务。
    - `404 Not Found`: 任务不存在，前端应跳转回任务列表。
    """
    return _get_task_or_404(task_service, task_id)

@router.patch("/{task_id}/status", response_model=TaskPublic, summary="更新训练任务状态")
async def update_task_status(
    task_id: str,
    task_update: TaskUpdate,
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskPublic:
    """
    **更新训练任务状态**

    供训练基础设施回写状态使用，同时刷新更新时间。

    **响应:**
    - `200 OK`: 更新成功。
    - `404 Not Found`: 任务不存在。
    """
    updated_task = task_service.update_task_status(task_id, task_update)
    if not updated_task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return updated_task

@router.get("/{task_id}/detail", response_model=TaskDetailPublic, summary="获取任务详情页数据")
async def get_task_detail(
    task_id: str,
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskDetailPublic:
    task = _get_task_or_404(task_service, task_id)
    return TaskDetailPublic(
        **task.model_dump(),
        duration_minutes=task_monitor.task_duration_minutes(task),
    )

@router.get("/{task_id}/config", response_model=TaskConfigPublic, summary="以 JSON/YAML 查看任务配置")
async def get_task_config(
    task_id: str,
    task_service: Annotated[TaskService, Depends(get_task_service)],
    config_format: Annotated[ConfigFormat, Query(alias="format")] = ConfigFormat.json
) -> TaskConfigPublic:
    task = _get_task_or_404(task_service, task_id)
    return TaskConfigPublic(
        task_id=task.id,
        format=config_format,
        text=task_monitor.render_task_config(task, config_format),
    )

@router.get("/{task_id}/metrics", response_model=TaskMetricsPublic, summary="训练奖励曲线 (模拟数据)")
async def get_task_metrics(
    task_id: str,
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskMetricsPublic:
    return task_monitor.get_task_metrics(_get_task_or_404(task_service, task_id))

@router.get("/{task_id}/logs", response_model=TaskLogsPublic, summary="训练日志 (模拟数据)")
async def get_task_logs(
    task_id: str,
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskLogsPublic:
    return task_monitor.get_task_logs(_get_task_or_404(task_service, task_id))

@router.get("/{task_id}/resources", response_model=TaskResourcesPublic, summary="资源占用 (模拟数据)")
async def get_task_resources(
    task_id: str,
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskResourcesPublic:
    return task_monitor.get_task_resources(_get_task_or_404(task_service, task_id))
