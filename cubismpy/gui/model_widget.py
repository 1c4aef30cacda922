"""
Live2D 模型预览控件（PyQt6）

由 QTimer 驱动一个 Model：每帧清空缓冲，推进模型（表情回退、动作回调、引擎 update）后绘制。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from PyQt6.QtCore import QEvent, QPointF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QCursor
from PyQt6.QtOpenGLWidgets import QOpenGLWidget

from cubismpy import framework
from cubismpy.config.settings import Settings, ViewerConfig
from cubismpy.core.model import Model
from cubismpy.utils.exceptions import CubismPyException, handle_exception
from cubismpy.utils.logger import get_logger

logger = get_logger(__name__)


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, float(x)))


class ModelGlWidget(QOpenGLWidget):
    """在 QOpenGLWidget 中渲染 Cubism 3+ 模型"""

    status_changed = pyqtSignal()
    motion_started = pyqtSignal(str, int)
    motion_finished = pyqtSignal()

    def __init__(
        self,
        *,
        model_json: Path | None = None,
        settings: Settings | None = None,
        parent=None,
    ) -> None:
        super().__init__(parent)

        self._settings = settings or Settings()
        viewer: ViewerConfig = self._settings.viewer
        if model_json is None and viewer.model_json:
            model_json = Path(viewer.model_json)

        self._model_json = Path(model_json) if model_json is not None else None
        self._model: Model | None = None
        self._ready = False
        self._paused = False
        self._error_message = ""
        self._clear_rgba: tuple[float, float, float, float] = tuple(viewer.clear_color)
        self._drag_pos: QPointF | None = None

        self._tick_timer = QTimer(self)
        self._tick_timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._tick_timer.setInterval(max(1, int(1000 / viewer.fps)))
        self._tick_timer.timeout.connect(self._on_tick)

        self.setMouseTracking(True)
        self.setCursor(QCursor(Qt.CursorShape.ArrowCursor))

    # -------------------------
    # 公共接口
    # -------------------------

    @property
    def is_ready(self) -> bool:
        return bool(self._ready)

    @property
    def is_paused(self) -> bool:
        return bool(self._paused)

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def model(self) -> Model | None:
        return self._model

    def set_clear_color(self, r: float, g: float, b: float, a: float = 0.0) -> None:
        self._clear_rgba = (_clamp01(r), _clamp01(g), _clamp01(b), _clamp01(a))
        self.update()

    def set_model(self, model_json: Path | None) -> None:
        self._model_json = Path(model_json) if model_json is not None else None
        if self._ready:
            # 在当前 GL 上下文中重建
            self.makeCurrent()
            try:
                self._create_model()
            finally:
                self.doneCurrent()
            self.update()

    def set_paused(self, paused: bool) -> None:
        self._paused = bool(paused)
        if self._paused:
            self._tick_timer.stop()
        elif self._ready:
            self._tick_timer.start()
        self.status_changed.emit()

    # -------------------------
    # Qt：GL 生命周期
    # -------------------------

    def initializeGL(self) -> None:  # noqa: N802 - Qt API naming
        try:
            framework.init(self._settings)
            framework.gl_init()
        except CubismPyException as exc:
            logger.error("Live2D initializeGL failed: %s", exc)
            self._set_error(exc.message)
            return

        self._create_model()
        if self._ready and not self._paused:
            self._tick_timer.start()

    def resizeGL(self, w: int, h: int) -> None:  # noqa: N802 - Qt API naming
        if self._model is None:
            return
        self._model.resize(max(1, int(w)), max(1, int(h)))

    def paintGL(self) -> None:  # noqa: N802 - Qt API naming
        if not self._ready or self._model is None:
            return

        # 指针位置每帧只喂一次，不按鼠标事件逐个处理
        if self._drag_pos is not None:
            self._model.drag(float(self._drag_pos.x()), float(self._drag_pos.y()))

        framework.clear_buffer(*self._clear_rgba)
        self._model.update()
        self._model.draw()

    def closeEvent(self, event):  # noqa: N802 - Qt API naming
        self._tick_timer.stop()
        self.makeCurrent()
        try:
            self._destroy_model()
            if framework.is_initialized():
                framework.gl_release()
        finally:
            self.doneCurrent()
        super().closeEvent(event)

    # -------------------------
    # 交互
    # -------------------------

    def event(self, event: QEvent):  # noqa: N802 - Qt API naming
        # 隐藏时暂停计时
        if event.type() == QEvent.Type.Hide:
            self._tick_timer.stop()
        elif event.type() == QEvent.Type.Show and self._ready and not self._paused:
            self._tick_timer.start()
        return super().event(event)

    def mouseMoveEvent(self, event):  # noqa: N802 - Qt API naming
        if self._model is not None:
            self._drag_pos = event.position()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mousePressEvent(self, event):  # noqa: N802 - Qt API naming
        if self._model is None or event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)

        pos: QPointF = event.position()
        area = self._model.hit_test(float(pos.x()), float(pos.y()))
        logger.debug("tap at (%.0f, %.0f) hit area=%r", pos.x(), pos.y(), area)
        self._model.touch(
            float(pos.x()),
            float(pos.y()),
            on_start=self._emit_motion_started,
            on_finish=self.motion_finished.emit,
        )
        event.accept()

    def leaveEvent(self, event):  # noqa: N802 - Qt API naming
        self._drag_pos = None
        super().leaveEvent(event)

    # -------------------------
    # 内部实现
    # -------------------------

    def _emit_motion_started(self, group: str, no: int) -> None:
        self.motion_started.emit(group, no)

    def _set_ready(self, ready: bool) -> None:
        ready = bool(ready)
        if ready == self._ready:
            return
        self._ready = ready
        self.status_changed.emit()

    def _set_error(self, message: str) -> None:
        message = str(message or "")
        if message == self._error_message:
            return
        self._error_message = message
        self.status_changed.emit()

    def _on_tick(self) -> None:
        if self._paused or not self._ready or self._model is None:
            return
        self.update()

    def _create_model(self) -> None:
        self._destroy_model()
        if self._model_json is None:
            self._set_error("未配置 Live2D 模型。")
            return
        if not self._model_json.exists():
            self._set_error(f"未找到模型文件：{self._model_json}")
            return

        model = Model(config=self._settings.model)
        try:
            model.load_model_json(self._model_json)
        except Exception as exc:
            model.dispose()
            self._set_error(handle_exception(exc, logger, "Live2D 模型加载失败。"))
            return

        self._model = model
        self.resizeGL(int(self.width()), int(self.height()))
        self._set_error("")
        self._set_ready(True)

    def _destroy_model(self) -> None:
        model, self._model = self._model, None
        self._set_ready(False)
        if model is not None:
            model.dispose()


def run_viewer(model_json: Path | None, settings: Settings | None = None) -> int:
    """打开独立窗口显示 model_json，返回 Qt 退出码"""
    from PyQt6.QtWidgets import QApplication

    settings = settings or Settings()
    app: Any = QApplication.instance() or QApplication([])
    widget = ModelGlWidget(model_json=model_json, settings=settings)
    widget.setWindowTitle(f"cubismpy - {model_json.name if model_json else 'no model'}")
    widget.resize(settings.viewer.width, settings.viewer.height)
    widget.show()
    try:
        return int(app.exec())
    finally:
        framework.dispose()
