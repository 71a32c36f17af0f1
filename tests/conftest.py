import sys
import os

# Add project root to sys.path so tests can import from all modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np  # noqa: E402
import pytest  # noqa: E402
from hypothesis import settings  # noqa: E402

from models.data_models import NUM_LANDMARKS, LandmarkFrame  # noqa: E402

# CI profile: more examples for thorough testing
settings.register_profile("ci", max_examples=200)
# Dev profile: fewer examples for faster iteration
settings.register_profile("dev", max_examples=100)
# Default to dev profile
settings.load_profile("dev")

_EYE_WIDTH = 0.1
_MOUTH_WIDTH = 0.2
_CHEEK_OFFSET = 0.25


def build_points(ear=0.3, mar=0.3, yaw_ratio=1.0):
    """构造一个 (468, 3) 坐标数组，使其特征值约等于给定的 EAR / MAR / 偏航比"""
    points = np.zeros((NUM_LANDMARKS, 3), dtype=np.float64)

    # 左右眼：水平宽度固定，两条竖直线长度均为 ear * 宽度
    for (v1, v2, h), origin_x in (
        (((160, 144), (158, 153), (33, 133)), 0.3),
        (((385, 380), (387, 373), (362, 263)), 0.6),
    ):
        points[h[0]] = (origin_x, 0.4, 0.0)
        points[h[1]] = (origin_x + _EYE_WIDTH, 0.4, 0.0)
        for (top, bottom), dx in ((v1, 0.03), (v2, 0.07)):
            points[top] = (origin_x + dx, 0.4, 0.0)
            points[bottom] = (origin_x + dx, 0.4 + ear * _EYE_WIDTH, 0.0)

    # 嘴巴
    points[78] = (0.4, 0.7, 0.0)
    points[308] = (0.4 + _MOUTH_WIDTH, 0.7, 0.0)
    points[13] = (0.5, 0.7, 0.0)
    points[14] = (0.5, 0.7 + mar * _MOUTH_WIDTH, 0.0)

    # 鼻尖与两侧脸颊
    points[1] = (0.5, 0.5, 0.0)
    points[454] = (0.5 + _CHEEK_OFFSET, 0.5, 0.0)
    points[234] = (0.5 - _CHEEK_OFFSET * yaw_ratio, 0.5, 0.0)

    return points


def build_frame(ear=0.3, mar=0.3, yaw_ratio=1.0):
    return LandmarkFrame(build_points(ear, mar, yaw_ratio))


@pytest.fixture
def frame_factory():
    return build_frame


@pytest.fixture
def points_factory():
    return build_points
