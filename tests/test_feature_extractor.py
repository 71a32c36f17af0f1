"""特征提取单元测试"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import build_points

from detectors.feature_extractor import (
    euclidean_distance,
    extract_features,
    eye_aspect_ratio,
    head_yaw_ratio,
    mouth_aspect_ratio,
)
from models.data_models import FeatureSet, LandmarkFrame, MalformedFrameError


class TestEuclideanDistance:
    def test_uses_all_three_axes(self):
        assert euclidean_distance((0.0, 0.0, 0.0), (1.0, 2.0, 2.0)) == pytest.approx(3.0)

    def test_depth_only_difference(self):
        """仅 z 方向不同，距离不为 0（不是 2D 投影）"""
        assert euclidean_distance((0.5, 0.5, 0.0), (0.5, 0.5, 0.1)) == pytest.approx(0.1)


class TestEyeAspectRatio:
    @pytest.mark.parametrize("ear", [0.05, 0.1, 0.2, 0.3, 0.45])
    def test_matches_constructed_value(self, frame_factory, ear):
        assert eye_aspect_ratio(frame_factory(ear=ear)) == pytest.approx(ear)

    def test_mean_of_both_eyes(self, points_factory):
        points = points_factory(ear=0.3)
        # 右眼两条竖直线拉长到 0.5 * 宽度
        points[380] = (points[385][0], 0.4 + 0.05, 0.0)
        points[373] = (points[387][0], 0.4 + 0.05, 0.0)
        assert eye_aspect_ratio(LandmarkFrame(points)) == pytest.approx((0.3 + 0.5) / 2)

    def test_depth_contributes_to_vertical(self, points_factory):
        points = points_factory(ear=0.0)
        points[144] = (points[160][0], points[160][1], 0.03)
        points[153] = (points[158][0], points[158][1], 0.03)
        # 左眼 EAR = 0.06 / 0.2 = 0.3，右眼为 0
        assert eye_aspect_ratio(LandmarkFrame(points)) == pytest.approx(0.15)

    def test_zero_width_raises(self, points_factory):
        points = points_factory()
        points[133] = points[33]
        with pytest.raises(MalformedFrameError):
            eye_aspect_ratio(LandmarkFrame(points))


class TestMouthAspectRatio:
    @pytest.mark.parametrize("mar", [0.0, 0.3, 0.65, 0.85, 1.2])
    def test_matches_constructed_value(self, frame_factory, mar):
        assert mouth_aspect_ratio(frame_factory(mar=mar)) == pytest.approx(mar)

    def test_zero_width_raises(self, points_factory):
        points = points_factory()
        points[308] = points[78]
        with pytest.raises(MalformedFrameError):
            mouth_aspect_ratio(LandmarkFrame(points))


class TestHeadYawRatio:
    def test_symmetric_cheeks_exactly_one(self, frame_factory):
        assert head_yaw_ratio(frame_factory(yaw_ratio=1.0)) == 1.0

    @pytest.mark.parametrize("ratio", [0.2, 0.5, 1.5, 3.0])
    def test_matches_constructed_value(self, frame_factory, ratio):
        assert head_yaw_ratio(frame_factory(yaw_ratio=ratio)) == pytest.approx(ratio)

    def test_nose_on_right_cheek_uses_epsilon(self, points_factory):
        points = points_factory()
        points[454] = points[1]
        # 左侧距离 0.25，右侧距离 0 -> 0.25 / 0.001
        assert head_yaw_ratio(LandmarkFrame(points)) == pytest.approx(250.0)

    def test_custom_epsilon(self, points_factory):
        points = points_factory()
        points[454] = points[1]
        assert head_yaw_ratio(LandmarkFrame(points), epsilon=0.01) == pytest.approx(25.0)

    def test_ignores_y_and_z(self, points_factory):
        points = points_factory()
        points[234] = (points[234][0], 0.9, 0.3)
        assert head_yaw_ratio(LandmarkFrame(points)) == 1.0

    @given(offset=st.floats(min_value=0.0, max_value=0.5, allow_nan=False))
    def test_always_finite_and_non_negative(self, offset):
        points = build_points()
        points[454] = (0.5 + offset, 0.5, 0.0)
        ratio = head_yaw_ratio(LandmarkFrame(points))
        assert math.isfinite(ratio)
        assert ratio >= 0.0


class TestExtractFeatures:
    def test_returns_feature_set(self, frame_factory):
        features = extract_features(frame_factory(ear=0.25, mar=0.7, yaw_ratio=2.0))
        assert isinstance(features, FeatureSet)
        assert features.ear == pytest.approx(0.25)
        assert features.mar == pytest.approx(0.7)
        assert features.yaw_ratio == pytest.approx(2.0)
