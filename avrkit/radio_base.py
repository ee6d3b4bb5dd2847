"""Low-level SPI access to an nRF24L01(+) transceiver.

:class:`RadioCore` frames every exchange with the chip-select line. It reads
and writes registers and payloads, and keeps the driver state that the
higher-level radio API relies on.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Protocol, Union

from .registers import REGISTER_MASK, Command

MAX_PAYLOAD_SIZE = 32
ADDRESS_WIDTH = 5
_DUMMY = 0xFF

RegisterValue = Union[int, bytes, bytearray, Iterable[int]]


class SpiBus(Protocol):
    """A full-duplex SPI bus: each byte sent clocks one byte back."""

    def transfer(self, byte: int) -> int:
        """Send ``byte`` and return the byte received at the same time."""


class _Pins(Protocol):
    def set_output(self, pin: int) -> None:
        """Configure ``pin`` as a digital output."""

    def digital_write(self, pin: int, high: bool) -> None:
        """Drive ``pin`` high or low."""


def _default_clock() -> Callable[[], int]:
    start = time.monotonic()
    return lambda: int((time.monotonic() - start) * 1000)


class RadioCore:
    """Register-level driver state and SPI primitives.

    ``clock`` returns milliseconds. ``sleep`` takes seconds.
    """

    def __init__(
        self,
        spi: SpiBus,
        pins: _Pins,
        ce_pin: int,
        csn_pin: int,
        clock: Callable[[], int] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.spi = spi
        self.pins = pins
        self.ce_pin = ce_pin
        self.csn_pin = csn_pin
        self._clock = clock if clock is not None else _default_clock()
        self._sleep = sleep
        self.wide_band = True
        self.p_variant = False
        self._payload_size = MAX_PAYLOAD_SIZE
        self.ack_payload_available = False
        self.dynamic_payloads_enabled = False
        self.ack_payload_length = 0
        self.pipe0_reading_address = 0
        self.last_status = 0

    # -- pins and timing -------------------------------------------------

    def _csn(self, high: bool) -> None:
        self.pins.digital_write(self.csn_pin, high)

    def _ce(self, high: bool) -> None:
        self.pins.digital_write(self.ce_pin, high)

    def _millis(self) -> int:
        return self._clock()

    def _delay_ms(self, ms: float) -> None:
        self._sleep(ms / 1000)

    def _delay_us(self, us: float) -> None:
        self._sleep(us / 1_000_000)

    @contextmanager
    def _selected(self) -> Iterator[None]:
        self._csn(False)
        try:
            yield
        finally:
            self._csn(True)

    def _command(self, command: int, data: bytes = b"", read: int = 0) -> tuple[int, bytes]:
        """Run one SPI transaction and return the status byte and the bytes read."""
        with self._selected():
            status = self.spi.transfer(command) & 0xFF
            for byte in data:
                self.spi.transfer(byte)
            received = bytes(self.spi.transfer(_DUMMY) & 0xFF for _ in range(read))
        self.last_status = status
        return status, received

    @staticmethod
    def _address_bytes(address: int) -> bytes:
        """Return a 40-bit pipe address as it goes on the wire, least significant byte first."""
        if not 0 <= address < 1 << (8 * ADDRESS_WIDTH):
            raise ValueError(f"pipe address out of range: {address:#x}")
        return address.to_bytes(ADDRESS_WIDTH, "little")

    # -- registers -------------------------------------------------------

    def read_register(self, reg: int, length: int | None = None) -> int | bytes:
        """Read a register.

        Without ``length`` the single register value comes back as an int.
        With ``length`` that many bytes come back.
        """
        count = 1 if length is None else length
        if count < 0:
            raise ValueError("length must not be negative")
        _, data = self._command(Command.R_REGISTER | (REGISTER_MASK & reg), read=count)
        return data[0] if length is None else data

    def write_register(self, reg: int, value: RegisterValue) -> int:
        """Write an int (one byte) or a byte sequence to a register; return the status."""
        data = bytes([value]) if isinstance(value, int) else bytes(value)
        status, _ = self._command(Command.W_REGISTER | (REGISTER_MASK & reg), data)
        return status

    # -- payloads --------------------------------------------------------

    @property
    def payload_size(self) -> int:
        return self._payload_size

    def set_payload_size(self, size: int) -> None:
        """Set the static payload size, capped at 32 bytes."""
        if size < 0:
            raise ValueError("payload size must not be negative")
        self._payload_size = min(size, MAX_PAYLOAD_SIZE)

    def _payload_split(self, length: int) -> tuple[int, int]:
        data_len = min(length, self._payload_size)
        blank_len = 0 if self.dynamic_payloads_enabled else self._payload_size - data_len
        return data_len, blank_len

    def write_payload(self, data: bytes) -> int:
        """Load a transmit payload, zero-padded to the static size; return the status."""
        data = bytes(data)
        data_len, blank_len = self._payload_split(len(data))
        status, _ = self._command(Command.W_TX_PAYLOAD, data[:data_len] + bytes(blank_len))
        return status

    def read_payload(self, length: int) -> bytes:
        """Read up to ``length`` bytes of the received payload."""
        if length < 0:
            raise ValueError("length must not be negative")
        data_len, blank_len = self._payload_split(length)
        _, received = self._command(Command.R_RX_PAYLOAD, read=data_len + blank_len)
        return received[:data_len]

    def dynamic_payload_size(self) -> int:
        """Return the width of the payload at the top of the receive FIFO."""
        _, data = self._command(Command.R_RX_PL_WID, read=1)
        return data[0]

    # -- simple commands -------------------------------------------------

    def flush_rx(self) -> int:
        return self._command(Command.FLUSH_RX)[0]

    def flush_tx(self) -> int:
        return self._command(Command.FLUSH_TX)[0]

    def get_status(self) -> int:
        return self._command(Command.NOP)[0]

    def toggle_features(self) -> None:
        """Switch the extra features (dynamic and ack payloads) on or off."""
        self._command(Command.ACTIVATE, bytes([0x73]))