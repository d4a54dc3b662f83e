"""Bluetooth transport for thermalprint (macOS)."""

import logging
import platform
import time
from typing import List, Optional

from .base import BaseAdapter, BaseTransport, PairedDevice

# OSX-specific imports
if platform.system() == "Darwin":
    try:
        import objc
        from Foundation import NSData, NSDate, NSDefaultRunLoopMode, NSObject, NSRunLoop
        from IOBluetooth import IOBluetoothDevice, IOBluetoothHostController, IOBluetoothSDPUUID
        OSX_BLUETOOTH_AVAILABLE = True
    except ImportError:
        OSX_BLUETOOTH_AVAILABLE = False
else:
    OSX_BLUETOOTH_AVAILABLE = False

K_IO_RETURN_SUCCESS = 0
K_BLUETOOTH_HCI_POWER_STATE_ON = 1

ERROR_MESSAGES = {
    -536870212: "Device not found or not available",
    -536870208: "Device busy or already in use",
    -536870207: "Connection refused",
    -536870186: "Connection timeout",
    -536870174: "Device not paired",
    -536870173: "Authentication failed",
}


def _status(result):
    # PyObjC returns (status, out_param) for methods with output arguments
    return result[0] if isinstance(result, tuple) else result


def _error_message(error_code):
    return ERROR_MESSAGES.get(error_code, f"Unknown error code: {error_code}")


if OSX_BLUETOOTH_AVAILABLE:

    class RFCOMMChannelDelegate(NSObject):
        """Receives RFCOMM channel events from IOBluetooth"""

        def init(self):
            self = objc.super(RFCOMMChannelDelegate, self).init()
            if self is None:
                return None
            self.transport = None
            self.channel = None
            return self

        def rfcommChannelOpenComplete_status_(self, rfcommChannel, error):
            if error == K_IO_RETURN_SUCCESS:
                self.channel = rfcommChannel
                logging.debug("RFCOMM channel opened")
            else:
                logging.warning(f"RFCOMM channel open failed: {_error_message(error)}")

        def rfcommChannelClosed_(self, rfcommChannel):
            logging.info("RFCOMM channel closed by remote device")
            if self.transport:
                self.transport._connected = False


class BluetoothOSXTransport(BaseTransport):
    """
    macOS-specific Bluetooth transport using PyObjC and IOBluetooth framework.
    The channel id is looked up from the device's SDP record for the requested
    service, falling back to the configured default.
    """

    def __init__(self, address: str, uuid: str, channel: int = 1, timeout: float = 5.0):
        # IOBluetooth accepts dashes or colons
        self.address = address.replace(":", "-").upper()
        self.device = None
        self.channel = None
        self.delegate = None
        self._connected = False
        self._connect(uuid, channel, timeout)

    def _connect(self, uuid, default_channel, timeout):
        self.device = IOBluetoothDevice.deviceWithAddressString_(self.address)
        if not self.device:
            raise ValueError(f"Could not resolve Bluetooth device address {self.address}")

        if not self.device.isPaired():
            raise ConnectionError(
                f"Bluetooth device {self.address} is not paired. "
                "Please pair the device first using System Settings > Bluetooth."
            )

        if not self.device.isConnected():
            error_code = _status(self.device.openConnection())
            if error_code != K_IO_RETURN_SUCCESS:
                raise ConnectionError(
                    f"Failed to connect to Bluetooth device {self.address}: "
                    f"{_error_message(error_code)}. Make sure the device is turned on and in range."
                )

        channel_id = self._lookup_channel(uuid) or default_channel
        logging.debug(f"Opening {uuid} on {self.address} via RFCOMM channel {channel_id}")

        self.delegate = RFCOMMChannelDelegate.alloc().init()
        self.delegate.transport = self
        error_code = _status(
            self.device.openRFCOMMChannelSync_withChannelID_delegate_(None, channel_id, self.delegate)
        )
        if error_code != K_IO_RETURN_SUCCESS:
            raise ConnectionError(f"Failed to open RFCOMM channel: {_error_message(error_code)}")

        deadline = time.time() + timeout
        while not self.delegate.channel and time.time() < deadline:
            NSRunLoop.currentRunLoop().runMode_beforeDate_(
                NSDefaultRunLoopMode, NSDate.dateWithTimeIntervalSinceNow_(0.1)
            )

        self.channel = self.delegate.channel
        if not self.channel:
            raise RuntimeError("Failed to get RFCOMM channel reference")
        self._connected = True

    def _lookup_channel(self, uuid) -> Optional[int]:
        short_uuid = int(uuid.split("-")[0], 16)
        record = self.device.getServiceRecordForUUID_(IOBluetoothSDPUUID.uuid16_(short_uuid))
        if record is None:
            return None
        status, channel_id = record.getRFCOMMChannelID_(None)
        if status != K_IO_RETURN_SUCCESS:
            return None
        return channel_id

    def write(self, data: bytes) -> int:
        if not self._connected or not self.channel:
            raise RuntimeError("RFCOMM channel not available")

        logging.debug(f"write {len(data)} bytes: {data!r}")
        ns_data = NSData.dataWithBytes_length_(data, len(data))
        result = self.channel.writeSync_length_(ns_data, len(data))
        if result != K_IO_RETURN_SUCCESS:
            raise RuntimeError(f"Failed to write data: {_error_message(result)}")
        return len(data)

    def close(self):
        if self.channel:
            self.channel.closeChannel()
            self.channel = None
        self._connected = False


class IOBluetoothAdapter(BaseAdapter):
    """Local host controller reached through IOBluetooth."""

    def __init__(self, channel: int = 1, timeout: Optional[float] = None):
        if not OSX_BLUETOOTH_AVAILABLE:
            raise ImportError(
                "PyObjC IOBluetooth framework not available. "
                "Install with: pip install pyobjc-framework-IOBluetooth"
            )
        self.channel = channel
        self.timeout = timeout if timeout is not None else 5.0

    def is_enabled(self) -> bool:
        controller = IOBluetoothHostController.defaultController()
        return controller is not None and controller.powerState() == K_BLUETOOTH_HCI_POWER_STATE_ON

    def bonded_devices(self) -> List[PairedDevice]:
        devices = IOBluetoothDevice.pairedDevices() or []
        return [
            PairedDevice(
                name=str(device.name() or ""),
                address=str(device.addressString()).replace("-", ":").upper(),
            )
            for device in devices
        ]

    def connect(self, address: str, uuid: str) -> BluetoothOSXTransport:
        return BluetoothOSXTransport(address, uuid, channel=self.channel, timeout=self.timeout)
