"""Serial transport for printers bound to an RFCOMM tty.

Covers ``rfcomm bind`` device nodes on Linux, the ``/dev/cu.*`` ports macOS
creates for paired SPP devices, and Windows Bluetooth COM ports.
"""

import logging
from typing import List, Optional

import serial
from serial.tools.list_ports import comports as list_comports

from .base import BaseAdapter, BaseTransport, PairedDevice


def _detect_port():
    all_ports = list(list_comports())
    if len(all_ports) == 0:
        raise RuntimeError("No serial ports detected")
    if len(all_ports) > 1:
        msg = "Too many serial ports, please select specific one:"
        for port, desc, hwid in all_ports:
            msg += f"\n- {port} : {desc} [{hwid}]"
        raise RuntimeError(msg)
    return all_ports[0][0]


class SerialTransport(BaseTransport):
    """Serial/RFCOMM tty transport implementation."""

    def __init__(self, port: str = "auto", baudrate: int = 9600, timeout: Optional[float] = None):
        port = port if port != "auto" else _detect_port()
        self.port = port
        self._serial = serial.Serial(port=port, baudrate=baudrate, write_timeout=timeout)

    def write(self, data: bytes) -> int:
        logging.debug(f"write {len(data)} bytes to {self.port}")
        written = self._serial.write(data)
        self._serial.flush()
        return written

    def close(self):
        self._serial.close()


class SerialAdapter(BaseAdapter):
    """Treats every detected serial port as a paired device."""

    def __init__(self, baudrate: int = 9600, timeout: Optional[float] = None):
        self.baudrate = baudrate
        self.timeout = timeout

    def is_enabled(self) -> bool:
        return len(list(list_comports())) > 0

    def bonded_devices(self) -> List[PairedDevice]:
        return [
            PairedDevice(name=desc or port, address=port)
            for port, desc, hwid in list_comports()
        ]

    def connect(self, address: str, uuid: str) -> SerialTransport:
        # The SPP service was already resolved when the tty was bound
        try:
            return SerialTransport(address, baudrate=self.baudrate, timeout=self.timeout)
        except serial.SerialException as e:
            raise ConnectionError(f"Cannot open serial port {address}: {e}") from e
