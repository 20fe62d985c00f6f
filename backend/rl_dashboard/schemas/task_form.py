from sqlmodel import SQLModel, Field
from typing import Optional
from rl_dashboard.models.task_form import FormMode, SimpleTaskFields
from rl_dashboard.core.config_codec import ConfigFormat

# Public：返回给前端的表单状态
class TaskFormPublic(SQLModel):
    form_id: str
    mode: FormMode
    config_format: ConfigFormat
    name: str
    simple_fields: SimpleTaskFields
    advanced_text: str
    parse_error: Optional[str] = None

# Update：前端修改字段时传来的数据，未给出的字段保持不变
class TaskFormFieldsUpdate(SQLModel):
    name: Optional[str] = Field(default=None)
    algorithm: Optional[str] = Field(default=None)
    environment: Optional[str] = Field(default=None)
    learning_rate: Optional[float] = Field(default=None)
    batch_size: Optional[int] = Field(default=None, ge=1)
    episodes: Optional[int] = Field(default=None, ge=1)

class AdvancedTextUpdate(SQLModel):
    text: str

class TaskFormOptions(SQLModel):
    algorithms: list[str]
    environments: list[str]
