"""几何特征提取模块，根据关键点计算 EAR、MAR 和头部偏航比"""

import math

from models.data_models import FeatureSet, LandmarkFrame, MalformedFrameError

# 关键点索引常量 (MediaPipe FaceMesh)
# 每只眼睛: (内侧竖直对, 外侧竖直对, 水平眼角对)
LEFT_EYE_INDICES = ((160, 144), (158, 153), (33, 133))
RIGHT_EYE_INDICES = ((385, 380), (387, 373), (362, 263))

MOUTH_INDICES = {
    "upper_inner": 13,
    "lower_inner": 14,
    "left": 78,
    "right": 308,
}

HEAD_INDICES = {
    "nose_tip": 1,
    "left_cheek": 234,
    "right_cheek": 454,
}

DEFAULT_EPSILON = 0.001


def euclidean_distance(p, q) -> float:
    """两点间的 3D 欧氏距离"""
    return math.dist(p, q)


def _single_eye_ratio(frame: LandmarkFrame, indices) -> float:
    (v1_a, v1_b), (v2_a, v2_b), (h_a, h_b) = indices

    vertical_1 = euclidean_distance(frame[v1_a], frame[v1_b])
    vertical_2 = euclidean_distance(frame[v2_a], frame[v2_b])
    horizontal = euclidean_distance(frame[h_a], frame[h_b])

    if horizontal == 0.0:
        raise MalformedFrameError(f"眼角关键点 {h_a} 与 {h_b} 重合，无法计算 EAR")

    return (vertical_1 + vertical_2) / (2.0 * horizontal)


def eye_aspect_ratio(frame: LandmarkFrame) -> float:
    """
    计算双眼平均 EAR 值。

    公式: EAR = (|V1| + |V2|) / (2 * |H|)，左右眼分别计算后取平均。
    数值越小表示眼睛越闭合。
    """
    left = _single_eye_ratio(frame, LEFT_EYE_INDICES)
    right = _single_eye_ratio(frame, RIGHT_EYE_INDICES)
    return (left + right) / 2.0


def mouth_aspect_ratio(frame: LandmarkFrame) -> float:
    """
    计算 MAR 值：内唇上下距离 / 嘴角左右距离。

    数值越大表示嘴张得越开。
    """
    horizontal = euclidean_distance(
        frame[MOUTH_INDICES["left"]], frame[MOUTH_INDICES["right"]]
    )
    if horizontal == 0.0:
        raise MalformedFrameError("嘴角关键点重合，无法计算 MAR")

    vertical = euclidean_distance(
        frame[MOUTH_INDICES["upper_inner"]], frame[MOUTH_INDICES["lower_inner"]]
    )
    return vertical / horizontal


def head_yaw_ratio(frame: LandmarkFrame, epsilon: float = DEFAULT_EPSILON) -> float:
    """
    计算头部偏航比：鼻尖到左脸颊的水平距离 / 鼻尖到右脸颊的水平距离。

    约 1.0 表示正对摄像头。右侧距离接近 0 时用 epsilon 代替，避免除零。
    """
    nose_x = frame[HEAD_INDICES["nose_tip"]][0]
    left_dist = abs(nose_x - frame[HEAD_INDICES["left_cheek"]][0])
    right_dist = abs(frame[HEAD_INDICES["right_cheek"]][0] - nose_x)
    return float(left_dist / max(right_dist, epsilon))


def extract_features(frame: LandmarkFrame, epsilon: float = DEFAULT_EPSILON) -> FeatureSet:
    """一次性计算单帧的全部特征"""
    return FeatureSet(
        ear=eye_aspect_ratio(frame),
        mar=mouth_aspect_ratio(frame),
        yaw_ratio=head_yaw_ratio(frame, epsilon),
    )
