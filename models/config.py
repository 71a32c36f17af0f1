"""监测阈值配置"""

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonitorConfig:
    """眼睛 / 嘴巴 / 头部判定阈值，可在创建 Session 时覆盖"""
    ear_closed: float = 0.18
    ear_partial: float = 0.22
    mar_yawn: float = 0.6
    mar_alert: float = 0.8
    yaw_left: float = 0.4
    yaw_right: float = 2.5
    consec_frames: int = 15
    epsilon: float = 0.001

    def __post_init__(self):
        if not self.ear_closed < self.ear_partial:
            raise ValueError(
                f"ear_closed ({self.ear_closed}) 必须小于 ear_partial ({self.ear_partial})"
            )
        if not self.mar_yawn < self.mar_alert:
            raise ValueError(
                f"mar_yawn ({self.mar_yawn}) 必须小于 mar_alert ({self.mar_alert})"
            )
        if not self.yaw_left < self.yaw_right:
            raise ValueError(
                f"yaw_left ({self.yaw_left}) 必须小于 yaw_right ({self.yaw_right})"
            )
        if self.consec_frames < 1:
            raise ValueError(f"consec_frames 必须 >= 1，实际为 {self.consec_frames}")
        if self.epsilon <= 0:
            raise ValueError(f"epsilon 必须为正数，实际为 {self.epsilon}")

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_CONFIG = MonitorConfig()


def load_config(config_path: Optional[str] = None) -> MonitorConfig:
    """
    从 JSON 配置文件加载阈值参数，缺失字段使用默认值。

    文件不存在或格式错误时记录警告并返回默认配置；未知字段忽略，
    值为 null 的字段保持默认值。取值或类型非法时抛出 ValueError。
    """
    if config_path is None:
        return DEFAULT_CONFIG

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning("配置文件不存在 %s，使用默认阈值", config_path)
        return DEFAULT_CONFIG
    except json.JSONDecodeError:
        logger.warning("配置文件格式错误 %s，使用默认阈值", config_path)
        return DEFAULT_CONFIG

    if not isinstance(data, dict):
        logger.warning("配置文件顶层应为对象 %s，使用默认阈值", config_path)
        return DEFAULT_CONFIG

    overrides = {}
    for field in fields(MonitorConfig):
        value = data.get(field.name)
        if value is not None:
            overrides[field.name] = value

    for name, value in overrides.items():
        expected = int if name == "consec_frames" else (int, float)
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValueError(f"配置项 {name} 类型错误: {value!r}")

    ignored = sorted(set(data) - {field.name for field in fields(MonitorConfig)})
    if ignored:
        logger.debug("忽略未知配置项: %s", ", ".join(ignored))

    return replace(DEFAULT_CONFIG, **overrides)
