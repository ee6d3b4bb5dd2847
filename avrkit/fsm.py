"""A small finite state machine with enter, update and exit callbacks."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

Callback = Optional[Callable[[], None]]


@dataclass(eq=False)
class State:
    """A state whose callbacks run on entry, on each update and on exit."""

    on_update: Callback = None
    on_enter: Callback = None
    on_exit: Callback = None

    def enter(self) -> None:
        if self.on_enter:
            self.on_enter()

    def update(self) -> None:
        if self.on_update:
            self.on_update()

    def exit(self) -> None:
        if self.on_exit:
            self.on_exit()


def _default_clock() -> Callable[[], int]:
    start = time.monotonic()
    return lambda: int((time.monotonic() - start) * 1000)


class FiniteStateMachine:
    """Runs one state at a time; transitions requested with transition_to
    take effect on the next update. Times are in milliseconds."""

    def __init__(self, initial: State, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock if clock is not None else _default_clock()
        self._current = initial
        self._next = initial
        self._need_enter = True
        self._state_change_time = 0
        self._millis_in_previous = 0

    @property
    def current_state(self) -> State:
        return self._current

    def update(self) -> FiniteStateMachine:
        """Enter the first state on the first call; afterwards perform any
        pending transition and update the current state."""
        if self._need_enter:
            self._current.enter()
            self._need_enter = False
        else:
            if self._current is not self._next:
                self.immediate_transition_to(self._next)
            self._current.update()
        return self

    def transition_to(self, state: State) -> FiniteStateMachine:
        """Schedule a transition for the next update."""
        self._next = state
        return self

    def immediate_transition_to(self, state: State) -> FiniteStateMachine:
        """Exit the current state and enter ``state`` right away."""
        self._current.exit()
        self._current = self._next = state
        now = self._clock()
        self._millis_in_previous = now - self._state_change_time
        self._state_change_time = now
        self._current.enter()
        return self

    def is_in_state(self, state: State) -> bool:
        return state is self._current

    def time_in_previous_state(self) -> int:
        return self._millis_in_previous

    def time_in_current_state(self) -> int:
        return self._clock() - self._state_change_time