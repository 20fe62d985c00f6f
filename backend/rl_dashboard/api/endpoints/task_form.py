import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import Annotated

from rl_dashboard.api.endpoints.task import get_task_service
from rl_dashboard.core.config_codec import ConfigParseError
from rl_dashboard.core.deps import get_form_registry
from rl_dashboard.core.errors import TaskValidationError
from rl_dashboard.core.session import get_current_submitter
from rl_dashboard.models.task import Submitter
from rl_dashboard.models.task_form import ALGORITHM_OPTIONS, ENVIRONMENT_OPTIONS
from rl_dashboard.schemas.task import TaskSubmitted
from rl_dashboard.schemas.task_form import (
    AdvancedTextUpdate, TaskFormFieldsUpdate, TaskFormOptions, TaskFormPublic
)
from rl_dashboard.service.task import TaskService
from rl_dashboard.service.task_form import TaskFormController, TaskFormRegistry

logger = logging.getLogger(__name__)

# 创建路由实例
router = APIRouter()

async def get_task_form(
    form_id: str,
    registry: Annotated[TaskFormRegistry, Depends(get_form_registry)]
) -> TaskFormController:
    form = registry.get(form_id)
    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    return form

@router.get("/options", response_model=TaskFormOptions, summary="简单模式的候选项")
async def get_form_options() -> TaskFormOptions:
    return TaskFormOptions(algorithms=ALGORITHM_OPTIONS, environments=ENVIRONMENT_OPTIONS)

@router.post("/", response_model=TaskFormPublic, status_code=status.HTTP_201_CREATED, summary="新建表单草稿")
async def create_form(
    registry: Annotated[TaskFormRegistry, Depends(get_form_registry)]
) -> TaskFormPublic:
    """
    **新建提交表单**

    初始为简单模式、JSON 格式，字段为默认值。
    """
    return registry.create().snapshot()

@router.get("/{form_id}", response_model=TaskFormPublic, summary="获取表单状态")
async def get_form(
    form: Annotated[TaskFormController, Depends(get_task_form)]
) -> TaskFormPublic:
    return form.snapshot()

@router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT, summary="丢弃表单草稿")
async def discard_form(
    form_id: str,
    registry: Annotated[TaskFormRegistry, Depends(get_form_registry)]
) -> Response:
    """
    **丢弃表单草稿**

    用户离开提交页面时调用，草稿不会被保存。
    """
    if not registry.discard(form_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.patch("/{form_id}/fields", response_model=TaskFormPublic, summary="修改任务名称和简单模式字段")
async def update_form_fields(
    fields_update: TaskFormFieldsUpdate,
    form: Annotated[TaskFormController, Depends(get_task_form)]
) -> TaskFormPublic:
    return form.update_fields(fields_update)

@router.put("/{form_id}/advanced_text", response_model=TaskFormPublic, summary="修改高级模式配置文本")
async def update_advanced_text(
    text_update: AdvancedTextUpdate,
    form: Annotated[TaskFormController, Depends(get_task_form)]
) -> TaskFormPublic:
    return form.set_advanced_text(text_update.text)

@router.post("/{form_id}/toggle_mode", response_model=TaskFormPublic, summary="切换简单/高级模式")
async def toggle_mode(
    form: Annotated[TaskFormController, Depends(get_task_form)]
) -> TaskFormPublic:
    """
    **切换简单/高级模式**

    简单 -> 高级时把当前字段转换成配置文本；高级 -> 简单时字段保持原值。
    """
    return form.toggle_mode()

@router.post("/{form_id}/toggle_format", response_model=TaskFormPublic, summary="切换 JSON/YAML")
async def toggle_format(
    form: Annotated[TaskFormController, Depends(get_task_form)]
) -> TaskFormPublic:
    """
    **切换配置格式**

    **响应:**
    - `200 OK`: 切换成功，文本已转换为新格式。
    - `400 Bad Request`: 当前文本无法解析，文本和格式保持不变。
    """
    try:
        return form.toggle_format()
    except ConfigParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

@router.post("/{form_id}/load_example", response_model=TaskFormPublic, summary="加载示例配置")
async def load_example(
    form: Annotated[TaskFormController, Depends(get_task_form)]
) -> TaskFormPublic:
    return form.load_example()

@router.post("/{form_id}/submit", response_model=TaskSubmitted, status_code=status.HTTP_201_CREATED, summary="提交训练任务")
async def submit_form(
    form: Annotated[TaskFormController, Depends(get_task_form)],
    registry: Annotated[TaskFormRegistry, Depends(get_form_registry)],
    submitter: Annotated[Submitter, Depends(get_current_submitter)],
    task_service: Annotated[TaskService, Depends(get_task_service)]
) -> TaskSubmitted:
    """
    **提交训练任务**

    成功后返回新任务的 id（前端据此跳转到详情页），表单草稿随之丢弃。

    **响应:**
    - `201 Created`: 提交成功。
    - `400 Bad Request`: 高级模式配置无法解析，任务未创建。
    - `404 Not Found`: 表单不存在。
    - `422 Unprocessable Entity`: 任务名称为空或配置缺少必填字段，任务未创建。
    """
    try:
        task = task_service.submit_form(form, submitter)
    except ConfigParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except TaskValidationError as e:
        logger.info(f"Form {form.form_id}: submission rejected, {e.message}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    registry.discard(form.form_id)
    return TaskSubmitted(task_id=task.id)
