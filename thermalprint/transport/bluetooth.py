"""Bluetooth transport for thermalprint (Linux/BlueZ).

Adapter state and bonded devices come from BlueZ over D-Bus, the byte
channel is a kernel RFCOMM socket.
"""

import errno
import logging
import re
import socket
from typing import List, Optional

import dbus

from .base import BaseAdapter, BaseTransport, PairedDevice

BLUEZ_SERVICE = "org.bluez"
ADAPTER_INTERFACE = "org.bluez.Adapter1"
DEVICE_INTERFACE = "org.bluez.Device1"
OBJECT_MANAGER_INTERFACE = "org.freedesktop.DBus.ObjectManager"

MAC_ADDRESS = re.compile(r"([0-9A-F]{2}:){5}([0-9A-F]{2})")


class BluetoothTransport(BaseTransport):
    """Standard Bluetooth RFCOMM transport implementation for Linux."""

    def __init__(self, address: str, channel: int = 1, timeout: Optional[float] = None):
        self.address = address
        self._sock = socket.socket(
            socket.AF_BLUETOOTH,
            socket.SOCK_STREAM,
            socket.BTPROTO_RFCOMM,
        )
        self._sock.settimeout(timeout)
        try:
            self._sock.connect((address, channel))
        except OSError as e:
            self._sock.close()
            if e.errno == errno.EHOSTDOWN:  # errno 112
                raise ConnectionError(
                    f"Cannot connect to Bluetooth device {address}. "
                    f"Please ensure the device is:\n"
                    f"1. Powered on and in range\n"
                    f"2. Properly paired with this system using: bluetoothctl\n"
                    f"3. Not connected to another device"
                ) from e
            elif e.errno == errno.ECONNREFUSED:  # errno 111
                raise ConnectionError(
                    f"Connection refused by device {address} on RFCOMM channel {channel}. "
                    f"The device may be busy or expose its serial port on another channel."
                ) from e
            else:
                raise

    def write(self, data: bytes) -> int:
        logging.debug(f"write {len(data)} bytes: {data!r}")
        self._sock.sendall(data)
        return len(data)

    def close(self):
        self._sock.close()


class BluezAdapter(BaseAdapter):
    """BlueZ adapter reached over the D-Bus system bus."""

    def __init__(self, channel: int = 1, timeout: Optional[float] = None):
        self.channel = channel
        self.timeout = timeout
        try:
            self._bus = dbus.SystemBus()
            self._bus.get_object(BLUEZ_SERVICE, "/")
        except dbus.exceptions.DBusException as e:
            raise RuntimeError(f"Failed to connect to BlueZ: {e}") from e

    def _managed_objects(self):
        try:
            manager = dbus.Interface(
                self._bus.get_object(BLUEZ_SERVICE, "/"), OBJECT_MANAGER_INTERFACE
            )
            return manager.GetManagedObjects()
        except dbus.exceptions.DBusException as e:
            raise RuntimeError(f"BlueZ object query failed: {e}") from e

    def _adapter(self):
        for path, interfaces in self._managed_objects().items():
            if ADAPTER_INTERFACE in interfaces:
                return path, interfaces[ADAPTER_INTERFACE]
        return None, None

    def is_enabled(self) -> bool:
        path, properties = self._adapter()
        return path is not None and bool(properties.get("Powered", False))

    def bonded_devices(self) -> List[PairedDevice]:
        devices = []
        for path, interfaces in self._managed_objects().items():
            properties = interfaces.get(DEVICE_INTERFACE)
            if properties is None or not properties.get("Paired", False):
                continue
            address = str(properties["Address"])
            name = str(properties.get("Name", properties.get("Alias", address)))
            devices.append(PairedDevice(name=name, address=address))
        return devices

    def cancel_discovery(self):
        path, properties = self._adapter()
        if path is None or not properties.get("Discovering", False):
            return
        try:
            adapter = dbus.Interface(self._bus.get_object(BLUEZ_SERVICE, path), ADAPTER_INTERFACE)
            adapter.StopDiscovery()
        except dbus.exceptions.DBusException as e:
            # Adapter removed, or discovery started by another D-Bus client
            logging.debug(f"StopDiscovery failed: {e}")

    def connect(self, address: str, uuid: str) -> BluetoothTransport:
        address = address.upper()
        if not MAC_ADDRESS.fullmatch(address):
            raise ValueError(f"Bad MAC address: {address}")
        # Kernel sockets take a channel, not a service UUID
        logging.debug(f"Opening {uuid} on {address} via RFCOMM channel {self.channel}")
        return BluetoothTransport(address, channel=self.channel, timeout=self.timeout)
