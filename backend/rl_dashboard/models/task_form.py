from typing import Optional
from enum import Enum

from sqlmodel import Field, SQLModel

from rl_dashboard.core.config_codec import ConfigFormat

class FormMode(str, Enum):
    simple = "simple"
    advanced = "advanced"

# 简单模式下的候选项，只是建议，不做限制
ALGORITHM_OPTIONS = ["PPO", "DQN", "SAC"]
ENVIRONMENT_OPTIONS = ["CartPole-v1", "LunarLander-v2", "Pendulum-v1"]

class SimpleTaskFields(SQLModel):
    algorithm: str = Field(default="PPO")
    environment: str = Field(default="CartPole-v1")
    learning_rate: float = Field(default=0.0003)
    batch_size: int = Field(default=64)
    episodes: int = Field(default=1000)

class TaskFormState(SQLModel):
    """
    提交表单的草稿状态，只在表单交互期间存在。
    同一时刻只有一种表示是权威的：简单模式看 simple_fields，高级模式看 advanced_text。
    """
    mode: FormMode = Field(default=FormMode.simple)
    config_format: ConfigFormat = Field(default=ConfigFormat.json)
    name: str = Field(default="")
    simple_fields: SimpleTaskFields = Field(default_factory=SimpleTaskFields)
    advanced_text: str = Field(default="")
    parse_error: Optional[str] = Field(default=None)
