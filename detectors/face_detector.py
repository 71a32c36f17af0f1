"""人脸关键点检测模块，基于 MediaPipe FaceMesh，输出 LandmarkFrame"""

from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from models.data_models import LandmarkFrame


class FaceDetector:
    """使用 MediaPipe FaceMesh 检测单张人脸的 468 个关键点"""

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        face_mesh=None,
    ):
        """初始化 MediaPipe FaceMesh；可传入已创建的 face_mesh 对象"""
        if face_mesh is None:
            face_mesh = mp.solutions.face_mesh.FaceMesh(
                max_num_faces=1,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
                refine_landmarks=False,
            )
        self._face_mesh = face_mesh

    def detect(self, frame: np.ndarray) -> Optional[LandmarkFrame]:
        """
        检测单帧图像中的人脸关键点。

        Args:
            frame: BGR 格式的 OpenCV 图像帧

        Returns:
            LandmarkFrame（归一化坐标）；未检测到人脸时返回 None
        """
        # BGR -> RGB
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False

        results = self._face_mesh.process(rgb_frame)

        if not results.multi_face_landmarks:
            return None

        face = results.multi_face_landmarks[0]
        return LandmarkFrame.from_landmarks(face.landmark)

    def close(self):
        """释放 MediaPipe 资源，可重复调用"""
        if self._face_mesh is not None:
            self._face_mesh.close()
            self._face_mesh = None
