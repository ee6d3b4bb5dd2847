"""Command byte layout for the I2C blink module."""

from enum import IntEnum, IntFlag


class LedPin(IntEnum):
    """Output pins the LEDs are wired to."""

    RED = 0
    GREEN = 9
    YELLOW = 10
    WHITE = 8
    PURPLE = 1
    RGB_G = 2
    RGB_B = 3
    RGB_R = 5


class LedMask(IntFlag):
    """Bits of a command byte."""

    RED = 1 << 0
    YELLOW = 1 << 1
    GREEN = 1 << 2
    PURPLE = 1 << 3
    WHITE = 1 << 4
    SET_LED = 1 << 5
    SET_RGB = 1 << 6
    SET_BLINK = 1 << 7


I2C_SLAVE_ADDR = 0x21
ALL_ON = 0xFF
ALL_OFF = 0x00


def _byte(value: int) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"command byte out of range: {value}")
    return value


def set_led(mask: int) -> LedMask:
    """Return the command byte that sets the LEDs in ``mask``."""
    return LedMask(_byte(mask) | LedMask.SET_LED)


def is_set(value: int, mask: int) -> bool:
    """True if every bit of ``mask`` is set in ``value``."""
    return (int(value) & int(mask)) == int(mask)