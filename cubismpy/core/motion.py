"""
动作开始/结束回调桥接

引擎在自身 update 过程中调用固定的一对跳板函数。跳板按整数 token 在旁路表里
取出调用方的 handler 并将其移除，再在模型的调用上下文中执行。
因此每个 handler 最多执行一次，且只存活到对应事件触发为止。

handler 抛出的异常在此记录日志，不会传回引擎。
"""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional

from cubismpy.engine.base import MotionFinishCallback, MotionStartCallback
from cubismpy.utils.logger import get_logger, log_context
from cubismpy.utils.validation import ensure_handler

logger = get_logger(__name__)

Handler = Callable[..., Any]


class CallerContext:
    """handler 执行期间需要持有的东西：模型锁与日志上下文字段"""

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @contextmanager
    def enter(self, **fields: Any) -> Iterator[None]:
        with self._lock:
            with log_context(**fields):
                yield


@dataclass(frozen=True)
class MotionRegistration:
    start_token: Optional[int]
    finish_token: Optional[int]
    on_start: Optional[MotionStartCallback]
    on_finish: Optional[MotionFinishCallback]

    @property
    def empty(self) -> bool:
        return self.start_token is None and self.finish_token is None


EMPTY_REGISTRATION = MotionRegistration(None, None, None, None)


class MotionCallbackBridge:
    def __init__(self, context: CallerContext | None = None) -> None:
        self._context = context or CallerContext()
        self._retained: Dict[int, Handler] = {}
        self._tokens = itertools.count(1)

    @property
    def pending(self) -> int:
        """仍在等待事件的 handler 数量"""
        return len(self._retained)

    def is_pending(self, token: int | None) -> bool:
        return token is not None and token in self._retained

    def register(
        self,
        on_start: Any = None,
        on_finish: Any = None,
        *,
        group: str | None = None,
        no: int | None = None,
    ) -> MotionRegistration:
        """
        校验并保存 handler，返回交给引擎的跳板函数

        Raises:
            InvalidArgumentError: 任一 handler 既不是 None 也不可调用（此时不保存任何东西）
        """
        start_handler = ensure_handler("on_start", on_start)
        finish_handler = ensure_handler("on_finish", on_finish)
        if start_handler is None and finish_handler is None:
            return EMPTY_REGISTRATION

        start_token = finish_token = None
        start_cb: MotionStartCallback | None = None
        finish_cb: MotionFinishCallback | None = None

        if start_handler is not None:
            start_token = self._retain(start_handler)
            start_cb = self._make_start_trampoline(start_token)
        if finish_handler is not None:
            finish_token = self._retain(finish_handler)
            finish_cb = self._make_finish_trampoline(finish_token, start_token, group, no)

        return MotionRegistration(start_token, finish_token, start_cb, finish_cb)

    def discard(self, registration: MotionRegistration) -> None:
        """释放不会再触发的 handler（如引擎调用失败）"""
        for token in (registration.start_token, registration.finish_token):
            if token is not None:
                self._retained.pop(token, None)

    def clear(self) -> None:
        if self._retained:
            logger.debug("releasing %d pending motion handler(s)", len(self._retained))
        self._retained.clear()

    def _retain(self, handler: Handler) -> int:
        token = next(self._tokens)
        self._retained[token] = handler
        return token

    def _make_start_trampoline(self, token: int) -> MotionStartCallback:
        def on_started(group: str, no: int) -> None:
            handler = self._retained.pop(token, None)
            if handler is None:
                return
            self._invoke(handler, (group, no), event="start", motion_group=group, motion_no=no)

        return on_started

    def _make_finish_trampoline(
        self, token: int, start_token: int | None, group: str | None, no: int | None
    ) -> MotionFinishCallback:
        def on_finished() -> None:
            # 动作结束后不会再有 start 回调
            if start_token is not None:
                self._retained.pop(start_token, None)
            handler = self._retained.pop(token, None)
            if handler is None:
                return
            self._invoke(handler, (), event="finish", motion_group=group, motion_no=no)

        return on_finished

    def _invoke(self, handler: Handler, args: tuple, *, event: str, **fields: Any) -> None:
        with self._context.enter(motion_event=event, **fields):
            try:
                handler(*args)
            except Exception:
                logger.exception(
                    "motion %s handler %r raised; error swallowed to protect the engine update",
                    event,
                    handler,
                )
