[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "avrkit"
version = "0.1.0"
description = "Microcontroller building blocks in pure Python: a PID controller, a finite state machine, blink-module command bytes and an nRF24L01(+) radio driver over a pluggable SPI bus."
requires-python = ">=3.10"
dependencies = []
keywords = ["pid", "finite-state-machine", "nrf24l01", "rf24", "spi", "embedded", "radio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["avrkit"]

[tool.pytest.ini_options]
addopts = "-ra"
