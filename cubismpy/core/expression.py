"""
临时表情：到时后自动回退

引擎只提供"设置表情"和"清除表情"。临时表情在这里排期，
由 Model.update() 每帧轮询一次毫秒时钟，不需要额外的计时线程。

同一时间只保留一个待触发的回退，再次设置会覆盖它；reset() 直接丢弃，不触发。
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from cubismpy import framework
from cubismpy.engine.base import NativeModel

Clock = Callable[[], int]

INACTIVE = -1


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class FadeTransition:
    duration_ms: int = INACTIVE
    started_at_ms: int = INACTIVE
    fallback_expression: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.duration_ms >= 0

    def disarm(self) -> None:
        self.duration_ms = INACTIVE
        self.started_at_ms = INACTIVE


class ExpressionFadeController:
    def __init__(self, native: NativeModel, clock: Clock | None = None) -> None:
        self._native = native
        self._clock: Clock = clock or wall_clock_ms
        self._transition = FadeTransition()

    @property
    def transition(self) -> FadeTransition:
        return self._transition

    @property
    def armed(self) -> bool:
        return self._transition.active

    @property
    def fallback_expression(self) -> Optional[str]:
        return self._transition.fallback_expression

    def set_expression(self, expression_id: str, fadeout: int | None = None) -> None:
        """
        立即应用表情

        Args:
            expression_id: 表情 id
            fadeout: 毫秒数；>= 0 时为临时表情，到时由 tick() 回退到上一个常驻表情
                （没有则清除表情）。省略时该表情成为新的常驻表情，并取消待触发的回退
        """
        t = self._transition
        if fadeout is not None and fadeout >= 0:
            t.started_at_ms = self._clock()
            t.duration_ms = fadeout
        else:
            t.fallback_expression = expression_id
            t.disarm()

        self._native.set_expression(expression_id)

    def tick(self) -> bool:
        """到时则执行回退，返回是否触发"""
        t = self._transition
        if not t.active:
            return False

        elapsed = self._clock() - t.started_at_ms
        if elapsed < t.duration_ms:
            return False

        # 先解除再调用引擎，失败时不会每帧重试
        t.disarm()
        if t.fallback_expression is not None:
            self._native.set_expression(t.fallback_expression)
            framework.engine_info("reset expression %s", t.fallback_expression)
        else:
            self._native.reset_expression()
            framework.engine_info("clear expression")
        return True

    def reset(self) -> None:
        self._transition.fallback_expression = None
        self._transition.disarm()
        self._native.reset_expression()
