# avrkit

Small building blocks for microcontroller-style programs, in plain Python
with no third-party dependencies:

- `avrkit.pid`: a sampled PID controller (`PID`, `Mode`, `Direction`) with
  output clamping, anti-windup, bumpless manual-to-automatic transfer and
  direct or reverse action.
- `avrkit.fsm`: a finite state machine (`State`, `FiniteStateMachine`)
  with enter, update and exit callbacks, deferred or immediate transitions
  and timing of the current and previous states.
- `avrkit.blink`: pin numbers and command-byte bits of the I2C blink LED
  module (`LedPin`, `LedMask`, `set_led`, `is_set`, `I2C_SLAVE_ADDR`,
  `ALL_ON`, `ALL_OFF`).
- `avrkit.registers`: the nRF24L01(+) register map (`Register`), SPI
  instructions (`Command`) and bit positions.
- `avrkit.radio_base` and `avrkit.radio`: an nRF24L01(+) driver (`RF24`)
  that talks to the chip through any object with the `SpiBus` interface.
- `avrkit.diagnostics`: text dumps of the radio's status and registers
  (`format_status`, `format_observe_tx`, `format_byte_register`,
  `format_address_register`, `details`, `print_details`).

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Time

Components that need time take a `clock` callable returning milliseconds.
If none is given they count milliseconds from `time.monotonic()`. Passing
a fake clock makes them easy to drive in tests.

## PID control

    from avrkit.pid import PID, Mode, Direction

    pid = PID(setpoint=100.0, kp=2.0, ki=5.0, kd=1.0,
              direction=Direction.DIRECT)
    pid.set_output_limits(0, 255)
    pid.set_mode(Mode.AUTOMATIC)
    output = pid.compute(42.0)

`compute` stores the measurement and returns the output. In automatic
mode it recomputes the output only once per sample period (100 ms by
default, changed with `set_sample_time`). In manual mode it returns the
current `output` unchanged, and you may set `pid.output` yourself; the
switch back to automatic starts from that value. Negative gains, a
non-positive sample time and output limits with `low >= high` raise
`ValueError`. The gains as given are read back through `kp`, `ki` and
`kd`; `mode`, `direction`, `sample_time` and `output_limits` are also
readable.

## State machines

    from avrkit.fsm import State, FiniteStateMachine

    idle = State(on_update=lambda: None)
    running = State(on_enter=lambda: print("start"), on_update=lambda: None)

    machine = FiniteStateMachine(idle)
    machine.update()                 # runs idle's enter callback
    machine.transition_to(running)
    machine.update()                 # exits idle, enters and updates running
    assert machine.is_in_state(running)

`immediate_transition_to` changes state at once. `time_in_current_state()`
and `time_in_previous_state()` report milliseconds; `current_state` is the
state now running.

## Blink module command bytes

    from avrkit.blink import LedMask, set_led, is_set

    command = set_led(LedMask.RED | LedMask.GREEN)
    assert is_set(command, LedMask.SET_LED)

`set_led` raises `ValueError` for a value outside a byte.

## Radio

`RF24(spi, pins, ce_pin, csn_pin, clock=None, sleep=time.sleep)` needs:

- `spi`: an object with `transfer(byte) -> int` returning the byte clocked
  back;
- `pins`: an object with `set_output(pin)` and `digital_write(pin, high)`
  for the chip-enable and chip-select lines;
- `sleep`: a function taking seconds.

After `begin()` the radio runs at 1 Mbps with 16-bit CRC, maximum power
and channel 76, and `p_variant` tells whether the chip took 250 kbps (the
"+" model). Pipe addresses are 40-bit integers.

    radio.begin()
    radio.open_writing_pipe(0xF0F0F0F0E1)
    radio.open_reading_pipe(1, 0xF0F0F0F0D2)
    delivered = radio.write(b"hello")       # blocks up to 500 ms

    radio.start_listening()
    pipe = radio.available_pipe()           # None if nothing is waiting
    if pipe is not None:
        payload, fifo_empty = radio.read(32)

Other calls: `stop_listening`, `start_write`, `what_happened` (returns an
`Interrupts` tuple), `set_channel`, `set_retries`, `set_payload_size`,
`set_pa_level`/`get_pa_level` (`PALevel`), `set_data_rate`/`get_data_rate`
(`DataRate`), `set_crc_length`/`get_crc_length` (`CRCLength`),
`disable_crc`, `set_auto_ack`, `enable_dynamic_payloads`,
`enable_ack_payload`, `write_ack_payload`, `is_ack_payload_available`,
`power_up`, `power_down`, `test_carrier`, `test_rpd`. Pipe numbers outside
0-5, negative channels and addresses wider than 40 bits raise `ValueError`.

`avrkit.diagnostics.print_details(radio)` writes a dump of the registers
and settings to standard output, or to a given file; `details(radio)`
returns the same lines as a list.

## What it does not do

The package contains no hardware backends: it does not open an SPI device
or drive GPIO pins itself, so a `SpiBus` and a pin object must be supplied.
It has no command-line program, and it does not act as the blink module's
I2C slave; `avrkit.blink` only describes the command bytes the module
understands.