"""连续帧去抖判定模块

每个信号（眼睛、嘴巴、头部）由一组互斥的连续帧计数器驱动：条件持续
满足 consec_frames 帧后才进入告警状态，条件一旦不满足立即清零并恢复。
判定规则写成纯函数 (特征值, 旧计数状态) -> (新计数状态, 标签)，
分类器对象只负责保存状态并计算告警的激活 / 解除边沿。
"""

from typing import Tuple

from models.config import DEFAULT_CONFIG, MonitorConfig
from models.data_models import (
    AlertKind,
    EyeCounters,
    EyeStatus,
    HeadCounter,
    HeadStatus,
    SignalResult,
    YawnCounter,
    YawnStatus,
)


def advance_counter(count: int, condition: bool) -> int:
    """条件满足时计数加一，否则清零"""
    return count + 1 if condition else 0


def classify_eyes(
    ear: float, state: EyeCounters, config: MonitorConfig = DEFAULT_CONFIG
) -> Tuple[EyeCounters, EyeStatus]:
    """闭眼 > 半闭眼 > 睁眼，按优先级依次判定"""
    if ear < config.ear_closed:
        closed = advance_counter(state.closed, True)
        status = EyeStatus.CLOSED if closed >= config.consec_frames else EyeStatus.OPEN
        return EyeCounters(closed=closed, partial=0), status

    if ear < config.ear_partial:
        partial = advance_counter(state.partial, True)
        if partial >= config.consec_frames:
            status = EyeStatus.PARTIALLY_CLOSED
        else:
            status = EyeStatus.OPEN
        return EyeCounters(closed=0, partial=partial), status

    return EyeCounters(), EyeStatus.OPEN


def classify_mouth(
    mar: float, state: YawnCounter, config: MonitorConfig = DEFAULT_CONFIG
) -> Tuple[YawnCounter, YawnStatus]:
    count = advance_counter(state.count, mar > config.mar_yawn)
    status = YawnStatus.YAWNING if count >= config.consec_frames else YawnStatus.NORMAL
    return YawnCounter(count=count), status


def classify_head(
    yaw_ratio: float, state: HeadCounter, config: MonitorConfig = DEFAULT_CONFIG
) -> Tuple[HeadCounter, HeadStatus]:
    turned = yaw_ratio < config.yaw_left or yaw_ratio > config.yaw_right
    count = advance_counter(state.count, turned)
    status = HeadStatus.TURNED if count >= config.consec_frames else HeadStatus.FORWARD
    return HeadCounter(count=count), status


def _merge(raised, kinds):
    return raised + tuple(kind for kind in kinds if kind not in raised)


class SignalClassifier:
    """保存单个信号的计数状态，并输出本信号所属告警的激活 / 解除边沿"""

    owned_kinds: Tuple[AlertKind, ...] = ()

    def __init__(self, config: MonitorConfig = DEFAULT_CONFIG):
        self.config = config
        self._state = self._initial_state()
        self._raised: Tuple[AlertKind, ...] = ()

    @property
    def state(self):
        return self._state

    @property
    def raised(self) -> Tuple[AlertKind, ...]:
        """当前由本分类器激活的告警"""
        return self._raised

    def update(self, value: float) -> SignalResult:
        """处理一帧特征值"""
        new_state, label = self._classify(value, self._state)
        wanted = self._alerts_for(label, value)

        activated = tuple(kind for kind in wanted if kind not in self._raised)
        deactivated = tuple(kind for kind in self._raised if kind not in wanted)

        self._state = new_state
        self._raised = wanted

        return SignalResult(
            label=label,
            counters=new_state,
            activated=activated,
            deactivated=deactivated,
        )

    def reset(self):
        """计数清零，遗忘已激活的告警"""
        self._state = self._initial_state()
        self._raised = ()

    def _initial_state(self):
        raise NotImplementedError

    def _classify(self, value, state):
        raise NotImplementedError

    def _alerts_for(self, label, value) -> Tuple[AlertKind, ...]:
        raise NotImplementedError


class EyeClassifier(SignalClassifier):
    owned_kinds = (AlertKind.EYES_CLOSED, AlertKind.EYES_PARTIALLY_CLOSED)

    _ALERTS = {
        EyeStatus.OPEN: (),
        EyeStatus.PARTIALLY_CLOSED: (AlertKind.EYES_PARTIALLY_CLOSED,),
        EyeStatus.CLOSED: (AlertKind.EYES_CLOSED,),
    }

    def _initial_state(self):
        return EyeCounters()

    def _classify(self, value, state):
        return classify_eyes(value, state, self.config)

    def _alerts_for(self, label, value):
        # 已激活的眼部告警只在睁眼时解除，闭眼与半闭眼之间切换时保留
        if value >= self.config.ear_partial:
            return ()
        return _merge(self._raised, self._ALERTS[label])


class MouthClassifier(SignalClassifier):
    owned_kinds = (AlertKind.YAWNING, AlertKind.EXCESSIVE_YAWNING)

    def _initial_state(self):
        return YawnCounter()

    def _classify(self, value, state):
        return classify_mouth(value, state, self.config)

    def _alerts_for(self, label, value):
        if label is not YawnStatus.YAWNING:
            return ()
        # 严重程度取当前帧的 MAR，不单独计数；已激活的告警保留到嘴巴闭合
        if value > self.config.mar_alert:
            return _merge(self._raised, (AlertKind.EXCESSIVE_YAWNING,))
        return _merge(self._raised, (AlertKind.YAWNING,))


class HeadClassifier(SignalClassifier):
    owned_kinds = (AlertKind.HEAD_NOT_FORWARD,)

    def _initial_state(self):
        return HeadCounter()

    def _classify(self, value, state):
        return classify_head(value, state, self.config)

    def _alerts_for(self, label, value):
        if label is HeadStatus.TURNED:
            return (AlertKind.HEAD_NOT_FORWARD,)
        return ()
