import pytest

from avrkit.pid import PID, Direction, Mode


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def make(setpoint=100.0, kp=1.0, ki=0.0, kd=0.0, direction=Direction.DIRECT):
    clock = FakeClock()
    return PID(setpoint, kp, ki, kd, direction, clock), clock


def test_starts_in_manual_and_leaves_output_alone():
    pid, clock = make()
    pid.output = 42.0
    assert pid.mode == Mode.MANUAL
    assert pid.compute(10.0) == 42.0


def test_proportional_output():
    pid, _ = make(setpoint=100.0, kp=1.0)
    pid.set_mode(Mode.AUTOMATIC)
    assert pid.compute(40.0) == pytest.approx(60.0)


def test_output_clamped_to_default_limits():
    pid, _ = make(setpoint=1000.0, kp=10.0)
    pid.set_mode(Mode.AUTOMATIC)
    assert pid.compute(0.0) == 255.0
    assert pid.output_limits == (0.0, 255.0)


def test_reverse_direction_drives_output_to_lower_limit():
    pid, _ = make(setpoint=1000.0, kp=10.0, direction=Direction.REVERSE)
    pid.set_mode(Mode.AUTOMATIC)
    assert pid.compute(0.0) == 0.0


def test_no_recompute_before_sample_period():
    pid, clock = make(setpoint=100.0, kp=1.0)
    pid.set_mode(Mode.AUTOMATIC)
    first = pid.compute(40.0)
    clock.now = 50
    assert pid.compute(90.0) == first
    clock.now = 100
    assert pid.compute(90.0) == pytest.approx(100.0 - 90.0)


def test_set_sample_time_changes_period():
    pid, clock = make(setpoint=100.0, kp=1.0)
    pid.set_mode(Mode.AUTOMATIC)
    first = pid.compute(40.0)
    pid.set_sample_time(500)
    assert pid.sample_time == 500
    clock.now = 400
    assert pid.compute(90.0) == first
    clock.now = 500
    assert pid.compute(90.0) == pytest.approx(100.0 - 90.0)


def test_bumpless_transfer_keeps_manual_output():
    pid, _ = make(kp=0.0)
    pid.output = 50.0
    pid.set_mode(Mode.AUTOMATIC)
    assert pid.compute(30.0) == pytest.approx(50.0)


def test_integral_term_accumulates():
    pid, clock = make(setpoint=100.0, kp=0.0, ki=1.0)
    pid.set_mode(Mode.AUTOMATIC)
    first = pid.compute(0.0)
    clock.now = 100
    second = pid.compute(0.0)
    assert second == pytest.approx(2 * first)
    assert first > 0


def test_integral_windup_is_clamped():
    pid, clock = make(setpoint=100.0, kp=0.0, ki=1000.0)
    pid.set_mode(Mode.AUTOMATIC)
    for step in range(5):
        clock.now = step * 100
        out = pid.compute(0.0)
    assert out == 255.0


def test_set_output_limits_clamps_in_auto():
    pid, _ = make(setpoint=1000.0, kp=10.0)
    pid.set_mode(Mode.AUTOMATIC)
    pid.compute(0.0)
    pid.set_output_limits(-10.0, 10.0)
    assert pid.output == 10.0


def test_invalid_output_limits_raise():
    pid, _ = make()
    with pytest.raises(ValueError):
        pid.set_output_limits(5.0, 5.0)
    assert pid.output_limits == (0.0, 255.0)


def test_negative_tunings_raise_and_keep_values():
    pid, _ = make(kp=2.0, ki=3.0, kd=4.0)
    with pytest.raises(ValueError):
        pid.set_tunings(-1.0, 0.0, 0.0)
    assert (pid.kp, pid.ki, pid.kd) == (2.0, 3.0, 4.0)


def test_non_positive_sample_time_raises():
    pid, _ = make()
    with pytest.raises(ValueError):
        pid.set_sample_time(0)
    assert pid.sample_time == 100


def test_display_gains_are_as_given():
    pid, _ = make(kp=2.0, ki=3.0, kd=4.0, direction=Direction.REVERSE)
    assert (pid.kp, pid.ki, pid.kd) == (2.0, 3.0, 4.0)
    assert pid.direction == Direction.REVERSE


def test_set_direction_in_auto_flips_action():
    pid, _ = make(setpoint=1000.0, kp=10.0)
    pid.set_mode(Mode.AUTOMATIC)
    pid.set_direction(Direction.REVERSE)
    assert pid.direction == Direction.REVERSE
    assert pid.compute(0.0) == 0.0


def test_mode_round_trip():
    pid, _ = make()
    pid.set_mode(Mode.AUTOMATIC)
    assert pid.mode == Mode.AUTOMATIC
    pid.set_mode(Mode.MANUAL)
    assert pid.mode == Mode.MANUAL