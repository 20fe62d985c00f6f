"""
任务提交表单的状态控制。

前端的每个操作（改字段、切换模式、切换格式、提交）对应这里的一个同步命令，
命令直接修改 TaskFormState。简单模式 -> 高级模式时把当前字段快照成配置文本；
高级模式 -> 简单模式不会把文本同步回字段，简单字段保持上次的值。
"""
import logging
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import ValidationError

from rl_dashboard.core import config_codec
from rl_dashboard.core.config_codec import ConfigParseError
from rl_dashboard.core.errors import TaskValidationError
from rl_dashboard.models.task_form import FormMode, TaskFormState
from rl_dashboard.schemas.task import TaskCreate
from rl_dashboard.schemas.task_form import TaskFormFieldsUpdate, TaskFormPublic

logger = logging.getLogger(__name__)

class TaskFormController:
    def __init__(self, form_id: str, state: Optional[TaskFormState] = None):
        self.form_id = form_id
        self.state = state if state is not None else TaskFormState()

    def snapshot(self) -> TaskFormPublic:
        return TaskFormPublic(form_id=self.form_id, **self.state.model_dump())

    def simple_config(self) -> Dict[str, Any]:
        """
        把简单模式的字段组装成结构化配置。
        """
        fields = self.state.simple_fields
        return {
            "algorithm": fields.algorithm,
            "environment": fields.environment,
            "parameters": {
                "learningRate": fields.learning_rate,
                "batchSize": fields.batch_size,
                "episodes": fields.episodes,
            },
        }

    def update_fields(self, fields_update: TaskFormFieldsUpdate) -> TaskFormPublic:
        changes = fields_update.model_dump(exclude_none=True)
        name = changes.pop("name", None)
        if name is not None:
            self.state.name = name
        if changes:
            self.state.simple_fields = self.state.simple_fields.model_copy(update=changes)
        return self.snapshot()

    def set_advanced_text(self, text: str) -> TaskFormPublic:
        self.state.advanced_text = text
        self.state.parse_error = None
        return self.snapshot()

    def toggle_mode(self) -> TaskFormPublic:
        if self.state.mode == FormMode.simple:
            self.state.advanced_text = config_codec.serialize(self.simple_config(), self.state.config_format)
            self.state.mode = FormMode.advanced
        else:
            self.state.mode = FormMode.simple
        self.state.parse_error = None
        return self.snapshot()

    def toggle_format(self) -> TaskFormPublic:
        """
        切换 JSON / YAML。

        Raises:
            ConfigParseError: 当前文本无法解析，此时文本和格式都保持不变。
        """
        current_format = self.state.config_format
        new_format = config_codec.other_format(current_format)
        try:
            new_text = config_codec.convert(self.state.advanced_text, current_format, new_format)
        except ConfigParseError as e:
            self.state.parse_error = e.message
            logger.warning(f"Form {self.form_id}: cannot switch to {new_format.value}, {current_format.value} text does not parse")
            raise
        self.state.config_format = new_format
        self.state.advanced_text = new_text
        self.state.parse_error = None
        return self.snapshot()

    def load_example(self) -> TaskFormPublic:
        self.state.advanced_text = config_codec.serialize(
            config_codec.DEFAULT_EXAMPLE_CONFIG, self.state.config_format
        )
        self.state.parse_error = None
        return self.snapshot()

    def build_submission(self) -> TaskCreate:
        """
        组装提交用的任务数据。
        - 先检查任务名称，名称为空时不会去解析配置
        - 简单模式直接使用字段
        - 高级模式解析文本，解析出的顶层字段与表单中的任务名称合并，名称以表单为准

        Raises:
            TaskValidationError: 名称为空或配置结构不符合要求。
            ConfigParseError: 高级模式文本无法解析。
        """
        name = self.state.name.strip()
        if not name:
            raise TaskValidationError("Task name is required")

        if self.state.mode == FormMode.simple:
            config = self.simple_config()
        else:
            try:
                config = config_codec.parse(self.state.advanced_text, self.state.config_format)
            except ConfigParseError as e:
                self.state.parse_error = e.message
                logger.warning(f"Form {self.form_id}: submission blocked, advanced configuration does not parse")
                raise
            self.state.parse_error = None

        try:
            return TaskCreate.model_validate({**config, "name": name})
        except ValidationError as e:
            raise TaskValidationError(_describe_validation_error(e)) from e


def _describe_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        messages.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(messages)


class TaskFormRegistry:
    """
    正在编辑中的表单草稿。
    提交成功或用户离开页面后草稿被丢弃。
    """

    def __init__(self):
        self._forms: Dict[str, TaskFormController] = {}

    def __len__(self) -> int:
        return len(self._forms)

    def create(self) -> TaskFormController:
        form_id = uuid4().hex
        controller = TaskFormController(form_id)
        self._forms[form_id] = controller
        logger.info(f"Form {form_id} created")
        return controller

    def get(self, form_id: str) -> Optional[TaskFormController]:
        return self._forms.get(form_id)

    def discard(self, form_id: str) -> bool:
        removed = self._forms.pop(form_id, None)
        if removed is not None:
            logger.info(f"Form {form_id} discarded")
        return removed is not None
