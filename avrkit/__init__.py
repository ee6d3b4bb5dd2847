"""Microcontroller building blocks: PID control, state machines, blink-module command bytes and an nRF24L01(+) driver."""

__version__ = "0.1.0"