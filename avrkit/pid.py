"""A discrete PID controller with anti-windup and bumpless mode changes."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Callable


class Mode(IntEnum):
    MANUAL = 0
    AUTOMATIC = 1


class Direction(IntEnum):
    DIRECT = 0
    REVERSE = 1


def _default_clock() -> Callable[[], int]:
    start = time.monotonic()
    return lambda: int((time.monotonic() - start) * 1000)


class PID:
    """PID controller that recomputes its output once per sample period.

    Times are in milliseconds as returned by ``clock``.
    """

    DEFAULT_SAMPLE_TIME = 100
    DEFAULT_LIMITS = (0.0, 255.0)

    def __init__(
        self,
        setpoint: float,
        kp: float,
        ki: float,
        kd: float,
        direction: Direction = Direction.DIRECT,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._clock = clock if clock is not None else _default_clock()
        self.setpoint = float(setpoint)
        self.input = 0.0
        self.output = 0.0
        self._in_auto = False
        self._iterm = 0.0
        self._last_input = 0.0
        self._out_min, self._out_max = self.DEFAULT_LIMITS
        self._sample_time = self.DEFAULT_SAMPLE_TIME
        self._direction = Direction(direction)
        self._kp = self._ki = self._kd = 0.0
        self.set_tunings(kp, ki, kd)
        self._last_time = self._clock() - self._sample_time

    @property
    def kp(self) -> float:
        return self._disp_kp

    @property
    def ki(self) -> float:
        return self._disp_ki

    @property
    def kd(self) -> float:
        return self._disp_kd

    @property
    def mode(self) -> Mode:
        return Mode.AUTOMATIC if self._in_auto else Mode.MANUAL

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def sample_time(self) -> int:
        return self._sample_time

    @property
    def output_limits(self) -> tuple[float, float]:
        return self._out_min, self._out_max

    def _clamp(self, value: float) -> float:
        if value > self._out_max:
            return self._out_max
        if value < self._out_min:
            return self._out_min
        return value

    def compute(self, input: float) -> float:
        """Feed a new measurement and return the (possibly updated) output."""
        self.input = float(input)
        if not self._in_auto:
            return self.output
        now = self._clock()
        if now - self._last_time >= self._sample_time:
            measured = self.input
            error = self.setpoint - measured
            self._iterm = self._clamp(self._iterm + self._ki * error)
            d_input = measured - self._last_input
            self.output = self._clamp(
                self._kp * error + self._iterm - self._kd * d_input
            )
            self._last_input = measured
            self._last_time = now
        return self.output

    def set_tunings(self, kp: float, ki: float, kd: float) -> None:
        """Set the gains; negative gains are rejected."""
        if kp < 0 or ki < 0 or kd < 0:
            raise ValueError("PID gains must not be negative")
        self._disp_kp, self._disp_ki, self._disp_kd = float(kp), float(ki), float(kd)
        seconds = self._sample_time / 1000
        self._kp = float(kp)
        self._ki = ki * seconds
        self._kd = kd / seconds
        if self._direction == Direction.REVERSE:
            self._kp, self._ki, self._kd = -self._kp, -self._ki, -self._kd

    def set_sample_time(self, sample_time: int) -> None:
        """Set the period between computations, in milliseconds."""
        if sample_time <= 0:
            raise ValueError("sample time must be positive")
        ratio = sample_time / self._sample_time
        self._ki *= ratio
        self._kd /= ratio
        self._sample_time = int(sample_time)

    def set_output_limits(self, low: float, high: float) -> None:
        """Clamp the output (and integral term) to ``[low, high]``."""
        if low >= high:
            raise ValueError("lower output limit must be below the upper limit")
        self._out_min, self._out_max = float(low), float(high)
        if self._in_auto:
            self.output = self._clamp(self.output)
            self._iterm = self._clamp(self._iterm)

    def set_mode(self, mode: Mode) -> None:
        """Switch between manual and automatic control."""
        new_auto = mode == Mode.AUTOMATIC
        if new_auto != self._in_auto:
            self._initialize()
        self._in_auto = new_auto

    def _initialize(self) -> None:
        self._iterm = self._clamp(self.output)
        self._last_input = self.input

    def set_direction(self, direction: Direction) -> None:
        """Set whether a larger output raises (DIRECT) or lowers (REVERSE) the input."""
        direction = Direction(direction)
        if self._in_auto and direction != self._direction:
            self._kp, self._ki, self._kd = -self._kp, -self._ki, -self._kd
        self._direction = direction