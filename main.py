"""驾驶员疲劳监测系统入口文件"""

import argparse
import logging
import sys
import time

import cv2

from detectors.face_detector import FaceDetector
from evaluators.session import Session
from models.config import load_config

logger = logging.getLogger(__name__)

_WINDOW_NAME = "Driver Monitor"


class FpsMeter:
    """统计处理帧率，每满一秒给出一次结果"""

    def __init__(self, clock=time.perf_counter):
        self._clock = clock
        self._frames = 0
        self._start = clock()

    def tick(self):
        """记录一帧；距上次统计满 1 秒时返回 FPS，否则返回 None"""
        self._frames += 1
        now = self._clock()
        elapsed = now - self._start
        if elapsed < 1.0:
            return None
        fps = round(self._frames / elapsed)
        self._frames = 0
        self._start = now
        return fps


class AlarmNotifier:
    """告警提醒：集合变为非空时开始循环提醒，变为空时停止（此处仅记录日志）"""

    def __init__(self):
        self.playing = False

    def start(self):
        if not self.playing:
            self.playing = True
            logger.warning("警报开始")

    def stop(self):
        if self.playing:
            self.playing = False
            logger.info("警报停止")


class MonitorApp:
    """监测主程序，管理摄像头主循环并把关键点帧交给 Session。"""

    def __init__(self, config_path=None, camera_index=0, show_preview=False):
        self.config = load_config(config_path)
        self.camera_index = camera_index
        self.show_preview = show_preview
        self._cap = None

        self.face_detector = FaceDetector()
        self.session = Session(self.config)
        self.notifier = AlarmNotifier()
        self.session.aggregator.add_listener(
            on_started=self.notifier.start,
            on_cleared=self.notifier.stop,
        )
        self.fps_meter = FpsMeter()

    def run(self):
        """启动主检测循环。"""
        self._cap = cv2.VideoCapture(self.camera_index)

        if not self._cap.isOpened():
            logger.error("无法打开摄像头 %s", self.camera_index)
            sys.exit(1)

        try:
            self._main_loop()
        except KeyboardInterrupt:
            logger.info("收到中断信号，停止监测")
        finally:
            self.stop()

    def _main_loop(self):
        while True:
            ret, frame = self._cap.read()
            if not ret:
                continue

            self.step(frame)

            if self.show_preview:
                cv2.imshow(_WINDOW_NAME, frame)
                # 按 q 退出
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    break

    def step(self, frame):
        """处理一帧图像，返回 FrameResult；未检测到人脸时返回 None"""
        landmarks = self.face_detector.detect(frame)
        result = self.session.process_frame(landmarks)

        fps = self.fps_meter.tick()
        if fps is not None:
            if result is None:
                logger.info("FPS: %d | 未检测到人脸", fps)
            else:
                logger.info(
                    "FPS: %d | EAR: %.3f | MAR: %.3f | Yaw Ratio: %.2f | %s %s %s | %s",
                    fps, result.ear, result.mar, result.yaw_ratio,
                    result.eye_status.value, result.yawn_status.value,
                    result.head_status.value, result.driver_status.value,
                )
        return result

    def stop(self):
        """重置会话、释放摄像头、关闭窗口和人脸检测器。可重复调用。"""
        self.session.reset()
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()
        if self.show_preview:
            cv2.destroyAllWindows()
        self.face_detector.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="驾驶员疲劳监测系统")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON 阈值配置文件路径",
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=0,
        help="摄像头编号",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="显示摄像头预览窗口（按 q 退出）",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="日志级别",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = MonitorApp(
        config_path=args.config,
        camera_index=args.camera,
        show_preview=args.show,
    )
    app.run()


if __name__ == "__main__":
    main()
