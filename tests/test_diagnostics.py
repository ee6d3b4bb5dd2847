import io

import pytest

from avrkit.diagnostics import (
    details,
    format_address_register,
    format_byte_register,
    format_observe_tx,
    format_status,
    print_details,
)
from avrkit.radio import RF24, CRCLength, DataRate
from avrkit.registers import (
    CRCO,
    EN_CRC,
    MAX_RT,
    RF_DR_LOW,
    RF_PWR_HIGH,
    RF_PWR_LOW,
    RX_DR,
    TX_DS,
    TX_FULL,
    Register,
    bit,
)

CE_PIN = 9
CSN_PIN = 10


class FakeChip:
    """Register file that answers SPI transactions like the transceiver."""

    def __init__(self, status=0x0E):
        self.status = status
        self.regs = {reg: bytearray([0]) for reg in range(0x20)}
        for reg in (Register.RX_ADDR_P0, Register.RX_ADDR_P1, Register.TX_ADDR):
            self.regs[reg] = bytearray(5)
        self.cmd = None
        self.index = 0

    def select(self):
        self.cmd = None
        self.index = 0

    def transfer(self, byte):
        if self.cmd is None:
            self.cmd = byte
            self.index = 0
            return self.status
        if self.cmd < 0x20:
            data = self.regs[self.cmd & 0x1F]
            value = data[self.index] if self.index < len(data) else 0
            self.index += 1
            return value
        if self.cmd < 0x40:
            reg = self.cmd & 0x1F
            if self.index == 0:
                self.regs[reg] = bytearray()
            self.regs[reg].append(byte)
            self.index += 1
        return 0


class FakePins:
    def __init__(self, chip):
        self.chip = chip

    def set_output(self, pin):
        pass

    def digital_write(self, pin, high):
        if pin == CSN_PIN and not high:
            self.chip.select()


@pytest.fixture
def chip():
    return FakeChip()


@pytest.fixture
def radio(chip):
    return RF24(chip, FakePins(chip), CE_PIN, CSN_PIN, clock=lambda: 0, sleep=lambda s: None)


def test_format_status_reset_value():
    assert format_status(0x0E) == "STATUS\t\t = 0x0e RX_DR=0 TX_DS=0 MAX_RT=0 RX_P_NO=7 TX_FULL=0"


@pytest.mark.parametrize("position,field", [(RX_DR, "RX_DR"), (TX_DS, "TX_DS"), (MAX_RT, "MAX_RT"), (TX_FULL, "TX_FULL")])
def test_format_status_flags(position, field):
    assert f"{field}=1" in format_status(bit(position))
    assert f"{field}=0" in format_status(0)


def test_format_status_starts_with_hex_value():
    for status in (0x00, 0x2E, 0xFF):
        assert format_status(status).startswith(f"STATUS\t\t = 0x{status:02x} ")


def test_format_status_rejects_out_of_range():
    with pytest.raises(ValueError):
        format_status(0x100)


def test_format_observe_tx_zero():
    assert format_observe_tx(0) == "OBSERVE_TX=00: POLS_CNT=0 ARC_CNT=0"


def test_format_observe_tx_fields_are_nibbles():
    line = format_observe_tx(0xF0)
    assert line.startswith("OBSERVE_TX=f0:")
    assert line.endswith("POLS_CNT=f ARC_CNT=0")


def test_format_byte_register_short_name():
    assert format_byte_register("EN_AA", [0x3F]) == "EN_AA\t\t = 0x3f"


def test_format_byte_register_long_name_has_single_tab():
    line = format_byte_register("RX_PW_P0-6", range(6))
    assert line.startswith("RX_PW_P0-6\t =")
    assert line.count(" 0x") == 6


def test_format_byte_register_rejects_large_value():
    with pytest.raises(ValueError):
        format_byte_register("RF_CH", [256])


def test_format_address_register_prints_most_significant_first():
    address = 0xF0F0F0F0E1
    raw = address.to_bytes(5, "little")
    assert format_address_register("TX_ADDR", [raw]) == format_address_register("TX_ADDR", [address])
    assert format_address_register("TX_ADDR", [raw]).endswith(f" 0x{address:010x}")


def test_format_address_register_rejects_wrong_width():
    with pytest.raises(ValueError):
        format_address_register("TX_ADDR", [b"\x01\x02"])
    with pytest.raises(ValueError):
        format_address_register("TX_ADDR", [1 << 40])


def test_details_reports_configuration(radio, chip):
    chip.regs[Register.RF_SETUP] = bytearray([bit(RF_DR_LOW) | bit(RF_PWR_LOW) | bit(RF_PWR_HIGH)])
    chip.regs[Register.CONFIG] = bytearray([bit(EN_CRC) | bit(CRCO)])
    radio.p_variant = True
    lines = details(radio)
    assert radio.get_data_rate() == DataRate.KBPS_250
    assert radio.get_crc_length() == CRCLength.CRC_16
    assert lines[-4:] == [
        "Data Rate\t = 250KBPS",
        "Model\t\t = nRF24L01+",
        "CRC Length\t = 16 bits",
        "PA Power\t = PA_HIGH",
    ]


def test_details_defaults_on_blank_chip(radio):
    lines = details(radio)
    assert lines[-4:] == [
        "Data Rate\t = 1MBPS",
        "Model\t\t = nRF24L01",
        "CRC Length\t = Disabled",
        "PA Power\t = PA_MIN",
    ]


def test_details_register_lines(radio, chip):
    address = 0xF0F0F0F0D2
    chip.regs[Register.RX_ADDR_P1] = bytearray(address.to_bytes(5, "little"))
    chip.regs[Register.RF_CH] = bytearray([76])
    lines = details(radio)
    assert lines[0] == format_status(chip.status)
    assert lines[1] == format_address_register("RX_ADDR_P0-1", [0, address])
    assert format_byte_register("RF_CH", [76]) in lines
    assert len(lines) == 15


def test_print_details_writes_every_line(radio):
    out = io.StringIO()
    print_details(radio, out)
    assert out.getvalue() == "".join(line + "\n" for line in details(radio))