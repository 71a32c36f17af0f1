"""监测会话：组合特征提取、去抖判定和告警汇总"""

import logging
from typing import Optional

from detectors.feature_extractor import extract_features
from evaluators.alert_aggregator import AlertAggregator
from evaluators.hysteresis import EyeClassifier, HeadClassifier, MouthClassifier
from models.config import DEFAULT_CONFIG, MonitorConfig
from models.data_models import FrameResult, LandmarkFrame

logger = logging.getLogger(__name__)


class Session:
    """
    单个被监测对象的一次监测会话，持有全部计数器和告警集合。

    每收到一帧关键点调用一次 process_frame()；非线程安全，调用方需保证
    同一时刻只有一个处理循环。
    """

    def __init__(self, config: MonitorConfig = DEFAULT_CONFIG):
        self.config = config
        self.eye_classifier = EyeClassifier(config)
        self.mouth_classifier = MouthClassifier(config)
        self.head_classifier = HeadClassifier(config)
        self.aggregator = AlertAggregator()
        self.frames_processed = 0
        self.frames_skipped = 0

    def process_frame(self, frame: Optional[LandmarkFrame]) -> Optional[FrameResult]:
        """
        处理一帧关键点。

        Args:
            frame: 检测到人脸时的关键点帧；未检测到人脸时为 None

        Returns:
            FrameResult；frame 为 None 时不做任何处理（计数器保持不变）并返回 None

        Raises:
            MalformedFrameError: 关键点帧不符合输入约定
        """
        if frame is None:
            self.frames_skipped += 1
            logger.debug("未检测到人脸，跳过本帧，计数器保持不变")
            return None

        features = extract_features(frame, self.config.epsilon)
        logger.debug(
            "EAR=%.3f MAR=%.3f yaw_ratio=%.2f",
            features.ear, features.mar, features.yaw_ratio,
        )

        eye = self.eye_classifier.update(features.ear)
        mouth = self.mouth_classifier.update(features.mar)
        head = self.head_classifier.update(features.yaw_ratio)

        self.aggregator.apply_all((eye, mouth, head))

        self.frames_processed += 1

        return FrameResult(
            ear=features.ear,
            mar=features.mar,
            yaw_ratio=features.yaw_ratio,
            eye_status=eye.label,
            yawn_status=mouth.label,
            head_status=head.label,
            driver_status=self.aggregator.driver_status,
            active_alerts=self.aggregator.active_alerts,
            activated=eye.activated + mouth.activated + head.activated,
            deactivated=eye.deactivated + mouth.deactivated + head.deactivated,
        )

    def reset(self):
        """停止监测：全部计数器清零、告警集合清空，可重复调用"""
        self.eye_classifier.reset()
        self.mouth_classifier.reset()
        self.head_classifier.reset()
        self.aggregator.clear()
        self.frames_processed = 0
        self.frames_skipped = 0

    @property
    def driver_status(self):
        return self.aggregator.driver_status

    @property
    def active_alerts(self):
        return self.aggregator.active_alerts

    @property
    def counters(self) -> dict:
        """当前各计数器取值"""
        eye = self.eye_classifier.state
        return {
            "eye_closed": eye.closed,
            "eye_partial": eye.partial,
            "yawn": self.mouth_classifier.state.count,
            "head_turned": self.head_classifier.state.count,
        }
