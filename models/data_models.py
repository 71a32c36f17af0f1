"""核心数据模型定义"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

import numpy as np

# MediaPipe FaceMesh 关键点数量
NUM_LANDMARKS = 468


class MalformedFrameError(ValueError):
    """关键点帧不符合输入约定（点数错误、坐标非法等）"""


class LandmarkFrame:
    """单帧人脸关键点，固定 468 个归一化 3D 点 (x, y, z)"""

    __slots__ = ("_points",)

    def __init__(self, points):
        try:
            array = np.array(points, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise MalformedFrameError(f"无法解析关键点坐标: {e}") from e

        if array.shape != (NUM_LANDMARKS, 3):
            raise MalformedFrameError(
                f"关键点形状应为 ({NUM_LANDMARKS}, 3)，实际为 {array.shape}"
            )
        if not np.all(np.isfinite(array)):
            raise MalformedFrameError("关键点坐标包含 NaN 或无穷值")

        array.flags.writeable = False
        self._points = array

    @classmethod
    def from_landmarks(cls, landmarks: Iterable) -> "LandmarkFrame":
        """从带 x/y/z 属性的对象序列（如 MediaPipe NormalizedLandmark）构建"""
        return cls([(lm.x, lm.y, lm.z) for lm in landmarks])

    @property
    def points(self) -> np.ndarray:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._points[index]


@dataclass(frozen=True)
class FeatureSet:
    """单帧几何特征"""
    ear: float
    mar: float
    yaw_ratio: float


class EyeStatus(str, Enum):
    OPEN = "OPEN"
    PARTIALLY_CLOSED = "PARTIALLY_CLOSED"
    CLOSED = "CLOSED"


class YawnStatus(str, Enum):
    NORMAL = "NORMAL"
    YAWNING = "YAWNING"


class HeadStatus(str, Enum):
    FORWARD = "FORWARD"
    TURNED = "TURNED"


class DriverStatus(str, Enum):
    SAFE = "SAFE"
    DROWSY = "DROWSY"


class AlertKind(str, Enum):
    """告警类型，值为展示给驾驶员的提示文字"""
    EYES_CLOSED = "EYES CLOSED"
    EYES_PARTIALLY_CLOSED = "EYES PARTIALLY CLOSED"
    YAWNING = "YAWNING DETECTED"
    EXCESSIVE_YAWNING = "EXCESSIVE YAWNING"
    HEAD_NOT_FORWARD = "HEAD NOT FORWARD"

    @property
    def message(self) -> str:
        return self.value


ALERT_SEPARATOR = " | "


def format_alerts(kinds: Iterable[AlertKind]) -> str:
    """将告警类型拼接为一行提示文字"""
    return ALERT_SEPARATOR.join(kind.message for kind in kinds)


@dataclass(frozen=True)
class EyeCounters:
    """闭眼 / 半闭眼连续帧计数，二者不会同时大于 0"""
    closed: int = 0
    partial: int = 0


@dataclass(frozen=True)
class YawnCounter:
    count: int = 0


@dataclass(frozen=True)
class HeadCounter:
    count: int = 0


@dataclass(frozen=True)
class SignalResult:
    """单个信号分类器在一帧内的输出"""
    label: Enum
    counters: object
    activated: Tuple[AlertKind, ...] = ()
    deactivated: Tuple[AlertKind, ...] = ()


@dataclass(frozen=True)
class FrameResult:
    """每个处理帧交给渲染 / 提醒模块的结果"""
    ear: float
    mar: float
    yaw_ratio: float
    eye_status: EyeStatus
    yawn_status: YawnStatus
    head_status: HeadStatus
    driver_status: DriverStatus
    active_alerts: Tuple[AlertKind, ...]
    activated: Tuple[AlertKind, ...] = ()
    deactivated: Tuple[AlertKind, ...] = ()

    @property
    def alert_message(self) -> str:
        return format_alerts(self.active_alerts)

    def to_dict(self) -> dict:
        """转换为可 JSON 序列化的字典"""
        return {
            "ear": self.ear,
            "mar": self.mar,
            "yaw_ratio": self.yaw_ratio,
            "eye_status": self.eye_status.value,
            "yawn_status": self.yawn_status.value,
            "head_status": self.head_status.value,
            "driver_status": self.driver_status.value,
            "active_alerts": [kind.value for kind in self.active_alerts],
        }

