"""Readable dumps of an nRF24L01(+) transceiver's registers and settings."""

from __future__ import annotations

import sys
from typing import Iterable, TextIO, Union

from .radio import RF24, CRCLength, DataRate, PALevel
from .radio_base import ADDRESS_WIDTH
from .registers import (
    ARC_CNT,
    MAX_RT,
    PLOS_CNT,
    RX_DR,
    RX_P_NO,
    TX_DS,
    TX_FULL,
    Register,
    bit,
)

Address = Union[int, bytes, bytearray, Iterable[int]]

_DATA_RATE_NAMES = {
    DataRate.MBPS_1: "1MBPS",
    DataRate.MBPS_2: "2MBPS",
    DataRate.KBPS_250: "250KBPS",
}
_MODEL_NAMES = ("nRF24L01", "nRF24L01+")
_CRC_NAMES = {
    CRCLength.DISABLED: "Disabled",
    CRCLength.CRC_8: "8 bits",
    CRCLength.CRC_16: "16 bits",
}
_PA_NAMES = {
    PALevel.MIN: "PA_MIN",
    PALevel.LOW: "PA_LOW",
    PALevel.HIGH: "LA_MED",
    PALevel.MAX: "PA_HIGH",
}


def _check_byte(value: int) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"register value out of range: {value}")
    return value


def _flag(value: int, position: int) -> int:
    return 1 if value & bit(position) else 0


def _header(name: str) -> str:
    extra_tab = "\t" if len(name) < 8 else ""
    return f"{name}\t{extra_tab} ="


def format_status(status: int) -> str:
    """Decode a STATUS register value into one line."""
    status = _check_byte(status)
    return (
        f"STATUS\t\t = 0x{status:02x}"
        f" RX_DR={_flag(status, RX_DR):x}"
        f" TX_DS={_flag(status, TX_DS):x}"
        f" MAX_RT={_flag(status, MAX_RT):x}"
        f" RX_P_NO={(status >> RX_P_NO) & 0b111:x}"
        f" TX_FULL={_flag(status, TX_FULL):x}"
    )


def format_observe_tx(value: int) -> str:
    """Decode an OBSERVE_TX register value into one line."""
    value = _check_byte(value)
    return (
        f"OBSERVE_TX={value:02x}:"
        f" POLS_CNT={(value >> PLOS_CNT) & 0b1111:x}"
        f" ARC_CNT={(value >> ARC_CNT) & 0b1111:x}"
    )


def format_byte_register(name: str, values: Iterable[int]) -> str:
    """Format one or more successive 8-bit registers on a single line."""
    return _header(name) + "".join(f" 0x{_check_byte(v):02x}" for v in values)


def _address_bytes(address: Address) -> bytes:
    if isinstance(address, int):
        if not 0 <= address < 1 << (8 * ADDRESS_WIDTH):
            raise ValueError(f"pipe address out of range: {address:#x}")
        return address.to_bytes(ADDRESS_WIDTH, "little")
    raw = bytes(address)
    if len(raw) != ADDRESS_WIDTH:
        raise ValueError(f"an address register holds {ADDRESS_WIDTH} bytes, got {len(raw)}")
    return raw


def format_address_register(name: str, addresses: Iterable[Address]) -> str:
    """Format one or more 40-bit address registers on a single line.

    Each address is an int or the register's raw bytes, least significant first.
    """
    return _header(name) + "".join(
        " 0x" + _address_bytes(address)[::-1].hex() for address in addresses
    )


def _bytes(radio: RF24, reg: int, qty: int = 1) -> list[int]:
    return [radio.read_register(reg + offset) for offset in range(qty)]


def _addresses(radio: RF24, reg: int, qty: int = 1) -> list[bytes]:
    return [radio.read_register(reg + offset, ADDRESS_WIDTH) for offset in range(qty)]


def details(radio: RF24) -> list[str]:
    """Read the radio's registers and settings and return them as lines."""
    return [
        format_status(radio.get_status()),
        format_address_register("RX_ADDR_P0-1", _addresses(radio, Register.RX_ADDR_P0, 2)),
        format_byte_register("RX_ADDR_P2-5", _bytes(radio, Register.RX_ADDR_P2, 4)),
        format_address_register("TX_ADDR", _addresses(radio, Register.TX_ADDR)),
        format_byte_register("RX_PW_P0-6", _bytes(radio, Register.RX_PW_P0, 6)),
        format_byte_register("EN_AA", _bytes(radio, Register.EN_AA)),
        format_byte_register("EN_RXADDR", _bytes(radio, Register.EN_RXADDR)),
        format_byte_register("RF_CH", _bytes(radio, Register.RF_CH)),
        format_byte_register("RF_SETUP", _bytes(radio, Register.RF_SETUP)),
        format_byte_register("CONFIG", _bytes(radio, Register.CONFIG)),
        format_byte_register("DYNPD/FEATURE", _bytes(radio, Register.DYNPD, 2)),
        f"Data Rate\t = {_DATA_RATE_NAMES[radio.get_data_rate()]}",
        f"Model\t\t = {_MODEL_NAMES[bool(radio.p_variant)]}",
        f"CRC Length\t = {_CRC_NAMES[radio.get_crc_length()]}",
        f"PA Power\t = {_PA_NAMES[radio.get_pa_level()]}",
    ]


def print_details(radio: RF24, file: TextIO | None = None) -> None:
    """Write the radio's details to ``file`` (standard output by default)."""
    out = file if file is not None else sys.stdout
    for line in details(radio):
        out.write(line + "\n")