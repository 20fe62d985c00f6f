import logging
from typing import Optional

from rl_dashboard.core.task_store import InMemoryTaskStore
from rl_dashboard.crud import crud_task
from rl_dashboard.models.task import RLTask, Submitter
from rl_dashboard.schemas.task import TaskCreate, TaskUpdate
from rl_dashboard.service.task_form import TaskFormController

logger = logging.getLogger(__name__)

class TaskService:
    def __init__(self, task_store: InMemoryTaskStore):
        self.task_store = task_store

    def create_task(self, task_create: TaskCreate, submitter: Submitter) -> RLTask:
        """
        创建训练任务的业务逻辑。
        - 调用 CRUD 层写入任务仓库
        - 返回新任务（带有分配好的 id）
        """
        task = crud_task.create_task(
            task_store=self.task_store,
            task_create=task_create,
            submitter=submitter
        )
        logger.info(f"Task {task.id} ({task.name!r}) submitted by {submitter.name}: {task.algorithm} on {task.environment}")
        return task

    def submit_form(self, form: TaskFormController, submitter: Submitter) -> RLTask:
        """
        提交表单草稿。
        - 先让表单组装并校验提交数据（名称、配置解析）
        - 校验全部通过后才写入任务仓库，失败时仓库保持不变

        Raises:
            TaskValidationError / ConfigParseError: 由表单抛出，原样向上传递。
        """
        task_create = form.build_submission()
        return self.create_task(task_create, submitter)

    def get_tasks(self) -> list[RLTask]:
        """
        获取所有训练任务，最新的在最前面。
        """
        return crud_task.get_tasks(self.task_store)

    def get_task_by_id(self, task_id: str) -> Optional[RLTask]:
        """
        获取指定 ID 的训练任务。
        任务不存在(例如过期的书签)是正常情况，返回 None。
        """
        task = crud_task.get_task_by_id(self.task_store, task_id)
        if not task:
            logger.debug(f"Task {task_id} not found")
            return None
        return task

    def update_task_status(self, task_id: str, task_update: TaskUpdate) -> Optional[RLTask]:
        """
        外部协作方回写任务状态。
        """
        updated_task = crud_task.update_task(
            task_store=self.task_store,
            task_id=task_id,
            task_update=task_update
        )
        if not updated_task:
            logger.info(f"Task {task_id} not found, status update ignored")
            return None
        logger.info(f"Task {task_id} status -> {updated_task.status.value}")
        return updated_task
