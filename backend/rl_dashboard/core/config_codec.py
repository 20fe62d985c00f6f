"""
任务配置的 JSON / YAML 编解码。

表单的高级模式和任务详情页都通过这里在“结构化配置对象”和“文本”之间转换。
解析失败时统一抛出 ConfigParseError，调用方据此给出提示，不会收到其他异常。
"""
import json
import re
from enum import Enum
from typing import Any, Dict

import yaml

class ConfigFormat(str, Enum):
    json = "json"
    yaml = "yaml"


class ConfigParseError(ValueError):
    """配置文本无法解析，解析结果不是一个映射，或者含有 JSON 无法表示的值。"""

    def __init__(self, message: str, config_format: ConfigFormat):
        super().__init__(message)
        self.message = message
        self.config_format = config_format


# 内置示例配置，高级模式下“加载示例”以及空文本转换时使用
DEFAULT_EXAMPLE_CONFIG: Dict[str, Any] = {
    "algorithm": "PPO",
    "environment": "CartPole-v1",
    "parameters": {
        "learningRate": 0.0003,
        "batchSize": 64,
        "episodes": 1000,
        "network": {
            "type": "mlp",
            "hidden_sizes": [64, 64],
            "activation": "tanh",
        },
        "optimizer": {
            "type": "adam",
            "epsilon": 1e-5,
            "learning_rate_schedule": "linear",
        },
        "ppo_specific": {
            "clip_range": 0.2,
            "vf_coef": 0.5,
            "ent_coef": 0.01,
        },
    },
}

PARSE_ERROR_MESSAGE = "Invalid format. Please check your syntax."


class _ConfigLoader(yaml.SafeLoader):
    pass


class _ConfigDumper(yaml.SafeDumper):
    pass

# 日期保持为字符串，保证解析结果总能再序列化成 JSON
_ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# YAML 1.1 的默认规则会把 1e-5 这类不带小数点的科学计数法读成字符串。
# 读写两边注册同一条规则，写出 "1e5" 这样的字符串时才会加引号
_FLOAT_PATTERN = re.compile(
    r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+]?[0-9]+)?
    |[-+]?(?:[0-9][0-9_]*)(?:[eE][-+]?[0-9]+)
    |\.[0-9_]+(?:[eE][-+]?[0-9]+)?
    |[-+]?[0-9][0-9_]*(?::[0-5]?[0-9])+\.[0-9_]*
    |[-+]?\.(?:inf|Inf|INF)
    |\.(?:nan|NaN|NAN))$""",
    re.X,
)

for _resolver_cls in (_ConfigLoader, _ConfigDumper):
    _resolver_cls.add_implicit_resolver("tag:yaml.org,2002:float", _FLOAT_PATTERN, list("-+0123456789."))


def serialize(config: Dict[str, Any], config_format: ConfigFormat) -> str:
    """
    将配置对象序列化为格式化后的文本。
    键的顺序保持不变。
    """
    if config_format == ConfigFormat.yaml:
        return yaml.dump(
            config,
            Dumper=_ConfigDumper,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
    return json.dumps(config, indent=2, ensure_ascii=False)


def parse(text: str, config_format: ConfigFormat) -> Dict[str, Any]:
    """
    解析配置文本。

    Raises:
        ConfigParseError: 语法错误，顶层不是映射，或者含有无法表示成 JSON 的值。
    """
    try:
        if config_format == ConfigFormat.yaml:
            data = yaml.load(text, Loader=_ConfigLoader)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(PARSE_ERROR_MESSAGE, config_format) from e

    if not isinstance(data, dict):
        raise ConfigParseError(
            f"{PARSE_ERROR_MESSAGE} The {config_format.value.upper()} document must describe an object.",
            config_format,
        )

    # 例如 YAML 的 !!binary、!!set、自引用锚点，以及 NaN / inf
    try:
        json.dumps(data, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise ConfigParseError(
            f"{PARSE_ERROR_MESSAGE} The {config_format.value.upper()} document contains values that cannot be represented as JSON.",
            config_format,
        ) from e
    return data


def convert(text: str, from_format: ConfigFormat, to_format: ConfigFormat) -> str:
    """
    在两种格式之间转换配置文本。
    空文本不算错误，直接返回内置示例配置。
    """
    if not text.strip():
        return serialize(DEFAULT_EXAMPLE_CONFIG, to_format)
    return serialize(parse(text, from_format), to_format)


def other_format(config_format: ConfigFormat) -> ConfigFormat:
    return ConfigFormat.yaml if config_format == ConfigFormat.json else ConfigFormat.json
