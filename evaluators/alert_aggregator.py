"""告警汇总模块"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from models.data_models import AlertKind, DriverStatus, SignalResult, format_alerts

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class AlertAggregator:
    """
    维护当前激活的告警集合，推导驾驶员综合状态。

    集合由空变为非空、由非空变为空时通知监听者（声音 / 界面等外部模块
    据此开始或停止循环提醒），本类自身不做任何 I/O。
    """

    def __init__(self):
        # dict 作为有序集合，保留激活顺序
        self._active = {}
        self._on_started: List[Listener] = []
        self._on_cleared: List[Listener] = []

    def add_listener(
        self,
        on_started: Optional[Listener] = None,
        on_cleared: Optional[Listener] = None,
    ):
        """注册告警开始 / 全部解除的回调"""
        if on_started is not None:
            self._on_started.append(on_started)
        if on_cleared is not None:
            self._on_cleared.append(on_cleared)

    def activate(self, kind: AlertKind) -> bool:
        """激活告警，已激活时无操作。返回集合是否发生变化。"""
        if kind in self._active:
            return False
        was_empty = not self._active
        self._active[kind] = None
        logger.info("告警激活: %s", kind.message)
        if was_empty:
            self._notify(self._on_started)
        return True

    def deactivate(self, kind: AlertKind) -> bool:
        """解除告警，未激活时无操作。返回集合是否发生变化。"""
        if kind not in self._active:
            return False
        del self._active[kind]
        logger.info("告警解除: %s", kind.message)
        if not self._active:
            self._notify(self._on_cleared)
        return True

    def apply(self, result: SignalResult):
        """应用单个分类器输出的边沿"""
        self.apply_all((result,))

    def apply_all(self, results: Iterable[SignalResult]):
        """
        应用同一帧内全部分类器的边沿。

        先应用所有激活再应用所有解除，帧内集合不会短暂变空，
        监听者不会收到多余的停止 / 开始通知。
        """
        results = tuple(results)
        for result in results:
            for kind in result.activated:
                self.activate(kind)
        for result in results:
            for kind in result.deactivated:
                self.deactivate(kind)

    def clear(self):
        """清空全部告警"""
        if not self._active:
            return
        self._active.clear()
        logger.info("全部告警已清除")
        self._notify(self._on_cleared)

    @property
    def active_alerts(self) -> Tuple[AlertKind, ...]:
        return tuple(self._active)

    @property
    def alert_message(self) -> str:
        return format_alerts(self._active)

    @property
    def driver_status(self) -> DriverStatus:
        return DriverStatus.DROWSY if self._active else DriverStatus.SAFE

    def __contains__(self, kind) -> bool:
        return kind in self._active

    def __len__(self) -> int:
        return len(self._active)

    @staticmethod
    def _notify(listeners: List[Listener]):
        for listener in listeners:
            listener()
