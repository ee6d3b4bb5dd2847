"""High-level driver for the nRF24L01(+) 2.4GHz transceiver."""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

from .radio_base import MAX_PAYLOAD_SIZE, RadioCore
from .registers import (
    ARC,
    ARD,
    CRCO,
    DPL_P0,
    DPL_P1,
    DPL_P2,
    DPL_P3,
    DPL_P4,
    DPL_P5,
    EN_ACK_PAY,
    EN_CRC,
    EN_DPL,
    MAX_RT,
    PRIM_RX,
    PWR_UP,
    RF_DR_HIGH,
    RF_DR_LOW,
    RF_PWR_HIGH,
    RF_PWR_LOW,
    RX_DR,
    RX_EMPTY,
    RX_P_NO,
    TX_DS,
    Command,
    Register,
    bit,
)

MAX_CHANNEL = 127
DEFAULT_CHANNEL = 76
WRITE_TIMEOUT_MS = 500
PIPE_COUNT = 6

_IRQ_BITS = bit(RX_DR) | bit(TX_DS) | bit(MAX_RT)
_ALL_PIPES = 0b111111

_PIPE_ADDRESS = (
    Register.RX_ADDR_P0,
    Register.RX_ADDR_P1,
    Register.RX_ADDR_P2,
    Register.RX_ADDR_P3,
    Register.RX_ADDR_P4,
    Register.RX_ADDR_P5,
)
_PIPE_WIDTH = (
    Register.RX_PW_P0,
    Register.RX_PW_P1,
    Register.RX_PW_P2,
    Register.RX_PW_P3,
    Register.RX_PW_P4,
    Register.RX_PW_P5,
)


class PALevel(IntEnum):
    """Power amplifier level."""

    MIN = 0
    LOW = 1
    HIGH = 2
    MAX = 3
    ERROR = 4


class DataRate(IntEnum):
    """Air data rate."""

    MBPS_1 = 0
    MBPS_2 = 1
    KBPS_250 = 2


class CRCLength(IntEnum):
    """Length of the CRC appended to each packet."""

    DISABLED = 0
    CRC_8 = 1
    CRC_16 = 2


class Interrupts(NamedTuple):
    """What caused the last interrupt."""

    tx_ok: bool
    tx_fail: bool
    rx_ready: bool


def _check_pipe(pipe: int) -> int:
    if not 0 <= pipe < PIPE_COUNT:
        raise ValueError(f"pipe must be between 0 and {PIPE_COUNT - 1}: {pipe}")
    return pipe


class RF24(RadioCore):
    """Driver for an nRF24L01(+) transceiver on an SPI bus."""

    # -- setup -----------------------------------------------------------

    def begin(self) -> None:
        """Put the chip into a known default configuration."""
        self.pins.set_output(self.ce_pin)
        self.pins.set_output(self.csn_pin)
        self._ce(False)
        self._csn(True)

        # The radio needs time to settle before configuration bits stick.
        self._delay_ms(5)

        self.write_register(Register.SETUP_RETR, (0b0100 << ARD) | (0b1111 << ARC))
        self.set_pa_level(PALevel.MAX)

        # Only the "+" model accepts 250 kbps.
        if self.set_data_rate(DataRate.KBPS_250):
            self.p_variant = True
        self.set_data_rate(DataRate.MBPS_1)

        self.set_crc_length(CRCLength.CRC_16)
        self.write_register(Register.DYNPD, 0)
        self.write_register(Register.STATUS, _IRQ_BITS)
        self.set_channel(DEFAULT_CHANNEL)
        self.flush_rx()
        self.flush_tx()

    # -- listening -------------------------------------------------------

    def start_listening(self) -> None:
        """Power up in receive mode and start listening on the open pipes."""
        config = self.read_register(Register.CONFIG)
        self.write_register(Register.CONFIG, config | bit(PWR_UP) | bit(PRIM_RX))
        self.write_register(Register.STATUS, _IRQ_BITS)

        if self.pipe0_reading_address:
            self.write_register(
                Register.RX_ADDR_P0, self._address_bytes(self.pipe0_reading_address)
            )

        self.flush_rx()
        self.flush_tx()
        self._ce(True)
        self._delay_us(130)

    def stop_listening(self) -> None:
        self._ce(False)
        self.flush_tx()
        self.flush_rx()

    # -- power -----------------------------------------------------------

    def power_down(self) -> None:
        config = self.read_register(Register.CONFIG)
        self.write_register(Register.CONFIG, config & ~bit(PWR_UP))

    def power_up(self) -> None:
        config = self.read_register(Register.CONFIG)
        self.write_register(Register.CONFIG, config | bit(PWR_UP))

    # -- transmitting ----------------------------------------------------

    def write(self, data: bytes) -> bool:
        """Send a payload and block until it is acknowledged, fails or times out."""
        self.start_write(data)

        sent_at = self._millis()
        while True:
            self.read_register(Register.OBSERVE_TX, 1)
            if self.last_status & (bit(TX_DS) | bit(MAX_RT)):
                break
            if self._millis() - sent_at >= WRITE_TIMEOUT_MS:
                break

        result = self.what_happened()
        self.ack_payload_available = result.rx_ready
        if self.ack_payload_available:
            self.ack_payload_length = self.dynamic_payload_size()

        self.power_down()
        self.flush_tx()
        return result.tx_ok

    def start_write(self, data: bytes) -> None:
        """Load a payload and pulse CE to send it, without waiting."""
        config = self.read_register(Register.CONFIG)
        self.write_register(Register.CONFIG, (config | bit(PWR_UP)) & ~bit(PRIM_RX))
        self._delay_us(150)
        self.write_payload(data)
        self._ce(True)
        self._delay_us(15)
        self._ce(False)

    def write_ack_payload(self, pipe: int, data: bytes) -> None:
        """Queue a payload to send back with the next acknowledgement on ``pipe``."""
        payload = bytes(data)[:MAX_PAYLOAD_SIZE]
        self._command(Command.W_ACK_PAYLOAD | (pipe & 0b111), payload)

    def is_ack_payload_available(self) -> bool:
        """Report, and clear, whether the last write brought back an ack payload."""
        result = self.ack_payload_available
        self.ack_payload_available = False
        return result

    def what_happened(self) -> Interrupts:
        """Read and clear the interrupt flags."""
        status = self.write_register(Register.STATUS, _IRQ_BITS)
        return Interrupts(
            tx_ok=bool(status & bit(TX_DS)),
            tx_fail=bool(status & bit(MAX_RT)),
            rx_ready=bool(status & bit(RX_DR)),
        )

    # -- receiving -------------------------------------------------------

    def _poll(self) -> int | None:
        status = self.get_status()
        if not status & bit(RX_DR):
            return None
        pipe = (status >> RX_P_NO) & 0b111
        self.write_register(Register.STATUS, bit(RX_DR))
        if status & bit(TX_DS):
            self.write_register(Register.STATUS, bit(TX_DS))
        return pipe

    def available(self) -> bool:
        """True if a payload is waiting to be read."""
        return self._poll() is not None

    def available_pipe(self) -> int | None:
        """Return the pipe a waiting payload arrived on, or None if there is none."""
        return self._poll()

    def read(self, length: int) -> tuple[bytes, bool]:
        """Read a payload; return it and whether the receive FIFO is now empty."""
        payload = self.read_payload(length)
        empty = bool(self.read_register(Register.FIFO_STATUS) & bit(RX_EMPTY))
        return payload, empty

    # -- pipes -----------------------------------------------------------

    def open_writing_pipe(self, address: int) -> None:
        """Set the 40-bit destination address (also used for pipe 0 acks)."""
        raw = self._address_bytes(address)
        self.write_register(Register.RX_ADDR_P0, raw)
        self.write_register(Register.TX_ADDR, raw)
        self.write_register(Register.RX_PW_P0, min(self.payload_size, MAX_PAYLOAD_SIZE))

    def open_reading_pipe(self, child: int, address: int) -> None:
        """Open reading pipe ``child`` (0-5) on ``address``.

        Pipes 2-5 only take the least significant byte of the address.
        """
        _check_pipe(child)
        raw = self._address_bytes(address)
        if child == 0:
            self.pipe0_reading_address = address
        self.write_register(_PIPE_ADDRESS[child], raw if child < 2 else raw[:1])
        self.write_register(_PIPE_WIDTH[child], self.payload_size)
        enabled = self.read_register(Register.EN_RXADDR)
        self.write_register(Register.EN_RXADDR, enabled | bit(child))

    # -- configuration ---------------------------------------------------

    def set_retries(self, delay: int, count: int) -> None:
        """Set the retry delay (units of 250us, 0-15) and retry count (0-15)."""
        self.write_register(
            Register.SETUP_RETR, ((delay & 0xF) << ARD) | ((count & 0xF) << ARC)
        )

    def set_channel(self, channel: int) -> None:
        """Select the RF channel, capped at 127."""
        if channel < 0:
            raise ValueError("channel must not be negative")
        self.write_register(Register.RF_CH, min(channel, MAX_CHANNEL))

    def _enable_features(self, mask: int) -> None:
        self.write_register(Register.FEATURE, self.read_register(Register.FEATURE) | mask)
        if not self.read_register(Register.FEATURE):
            self.toggle_features()
            self.write_register(
                Register.FEATURE, self.read_register(Register.FEATURE) | mask
            )

    def enable_ack_payload(self) -> None:
        """Enable payloads on acknowledgements, with dynamic payloads on pipes 0 and 1."""
        self._enable_features(bit(EN_ACK_PAY) | bit(EN_DPL))
        dynpd = self.read_register(Register.DYNPD)
        self.write_register(Register.DYNPD, dynpd | bit(DPL_P1) | bit(DPL_P0))

    def enable_dynamic_payloads(self) -> None:
        """Enable dynamically sized payloads on every pipe."""
        self._enable_features(bit(EN_DPL))
        dynpd = self.read_register(Register.DYNPD)
        all_pipes = (
            bit(DPL_P5) | bit(DPL_P4) | bit(DPL_P3) | bit(DPL_P2) | bit(DPL_P1) | bit(DPL_P0)
        )
        self.write_register(Register.DYNPD, dynpd | all_pipes)
        self.dynamic_payloads_enabled = True

    def set_auto_ack(self, enable: bool, pipe: int | None = None) -> None:
        """Turn auto-acknowledgement on or off for every pipe, or for one pipe."""
        if pipe is None:
            self.write_register(Register.EN_AA, _ALL_PIPES if enable else 0)
            return
        _check_pipe(pipe)
        en_aa = self.read_register(Register.EN_AA)
        en_aa = en_aa | bit(pipe) if enable else en_aa & ~bit(pipe)
        self.write_register(Register.EN_AA, en_aa)

    def set_pa_level(self, level: PALevel) -> None:
        """Set the power amplifier level; ERROR selects the maximum."""
        level = PALevel(level)
        setup = self.read_register(Register.RF_SETUP)
        setup &= ~(bit(RF_PWR_LOW) | bit(RF_PWR_HIGH))
        if level in (PALevel.MAX, PALevel.ERROR):
            setup |= bit(RF_PWR_LOW) | bit(RF_PWR_HIGH)
        elif level == PALevel.HIGH:
            setup |= bit(RF_PWR_HIGH)
        elif level == PALevel.LOW:
            setup |= bit(RF_PWR_LOW)
        self.write_register(Register.RF_SETUP, setup)

    def get_pa_level(self) -> PALevel:
        power = self.read_register(Register.RF_SETUP) & (bit(RF_PWR_LOW) | bit(RF_PWR_HIGH))
        if power == bit(RF_PWR_LOW) | bit(RF_PWR_HIGH):
            return PALevel.MAX
        if power == bit(RF_PWR_HIGH):
            return PALevel.HIGH
        if power == bit(RF_PWR_LOW):
            return PALevel.LOW
        return PALevel.MIN

    def set_data_rate(self, speed: DataRate) -> bool:
        """Set the air data rate; return whether the chip accepted it."""
        speed = DataRate(speed)
        setup = self.read_register(Register.RF_SETUP)
        setup &= ~(bit(RF_DR_LOW) | bit(RF_DR_HIGH))
        self.wide_band = False
        if speed == DataRate.KBPS_250:
            setup |= bit(RF_DR_LOW)
        elif speed == DataRate.MBPS_2:
            self.wide_band = True
            setup |= bit(RF_DR_HIGH)
        self.write_register(Register.RF_SETUP, setup)

        if self.read_register(Register.RF_SETUP) == setup:
            return True
        self.wide_band = False
        return False

    def get_data_rate(self) -> DataRate:
        rate = self.read_register(Register.RF_SETUP) & (bit(RF_DR_LOW) | bit(RF_DR_HIGH))
        if rate == bit(RF_DR_LOW):
            return DataRate.KBPS_250
        if rate == bit(RF_DR_HIGH):
            return DataRate.MBPS_2
        return DataRate.MBPS_1

    def set_crc_length(self, length: CRCLength) -> None:
        length = CRCLength(length)
        config = self.read_register(Register.CONFIG) & ~(bit(CRCO) | bit(EN_CRC))
        if length == CRCLength.CRC_8:
            config |= bit(EN_CRC)
        elif length == CRCLength.CRC_16:
            config |= bit(EN_CRC) | bit(CRCO)
        self.write_register(Register.CONFIG, config)

    def get_crc_length(self) -> CRCLength:
        config = self.read_register(Register.CONFIG) & (bit(CRCO) | bit(EN_CRC))
        if not config & bit(EN_CRC):
            return CRCLength.DISABLED
        return CRCLength.CRC_16 if config & bit(CRCO) else CRCLength.CRC_8

    def disable_crc(self) -> None:
        config = self.read_register(Register.CONFIG) & ~bit(EN_CRC)
        self.write_register(Register.CONFIG, config)

    # -- channel monitoring ----------------------------------------------

    def test_carrier(self) -> bool:
        """True if a carrier was present during the last listening period."""
        return bool(self.read_register(Register.CD) & 1)

    def test_rpd(self) -> bool:
        """True if a signal of at least -64dBm is present ("+" model only)."""
        return bool(self.read_register(Register.RPD) & 1)