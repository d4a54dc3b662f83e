import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from thermalprint.commands import LINE_FEED, SPP_UUID, TextSize, encode_text, size_command
from thermalprint.transport import BaseAdapter, BaseTransport

DISCONNECTED_MESSAGE = "Device was disconnected, reconnect"

# Exceptions a platform stack raises for a failed connect or write
IO_ERRORS = (OSError, RuntimeError)


def log_notification(message: str):
    logging.warning(message)


class PrinterSession:
    """Owns at most one open channel to a serial printer.

    Connect and disconnect run on a single worker thread and hand back
    futures. Writes block the calling thread. Every access to the channel
    goes through one lock.
    """

    def __init__(
        self,
        adapter: Optional[BaseAdapter],
        notify: Callable[[str], None] = log_notification,
    ):
        self._adapter = adapter
        self.notify = notify
        self._lock = threading.Lock()
        self._channel: Optional[BaseTransport] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="printer-session")
        self.target_address = ""
        self._closed = False

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._channel is not None

    def adapter_enabled(self) -> bool:
        if self._adapter is None:
            return False
        try:
            return self._adapter.is_enabled()
        except IO_ERRORS as e:
            logging.warning(f"Adapter status query failed: {e}")
            return False

    def list_paired_devices(self) -> List[str]:
        if self._adapter is None:
            return []
        try:
            devices = self._adapter.bonded_devices()
        except IO_ERRORS as e:
            logging.warning(f"Bonded device query failed: {e}")
            return []
        return [str(device) for device in devices]

    def connect_async(self, address: str) -> "Future[bool]":
        return self._executor.submit(self._connect, address)

    def connect(self, address: str, timeout: Optional[float] = None) -> bool:
        return self.connect_async(address).result(timeout=timeout)

    def disconnect_async(self) -> "Future[bool]":
        return self._executor.submit(self._disconnect)

    def disconnect(self, timeout: Optional[float] = None) -> bool:
        return self.disconnect_async().result(timeout=timeout)

    def _connect(self, address: str) -> bool:
        self.target_address = address
        if not address:
            return False

        with self._lock:
            if self._channel is not None:
                return True
            if not self.adapter_enabled():
                logging.info(f"Bluetooth adapter unavailable, not connecting to {address}")
                return False
            try:
                self._adapter.cancel_discovery()
                self._channel = self._adapter.connect(address, SPP_UUID)
            except (ValueError,) + IO_ERRORS as e:
                logging.info(f"Connect error for {address}: {e}")
                return False
        logging.info(f"Connected to printer {address}")
        return True

    def _disconnect(self) -> bool:
        with self._lock:
            channel, self._channel = self._channel, None
            if channel is None:
                return False
            try:
                channel.close()
            except IO_ERRORS as e:
                logging.debug(f"Error closing channel: {e}")
        logging.info("Disconnected printer")
        return True

    def _write(self, data: bytes) -> bool:
        with self._lock:
            if self._channel is None:
                return False
            try:
                self._channel.write(data)
                return True
            except IO_ERRORS as e:
                logging.info(f"Write failed, dropping channel: {e}")
                channel, self._channel = self._channel, None
                try:
                    channel.close()
                except IO_ERRORS:
                    pass  # remote end already gone
        self.notify(DISCONNECTED_MESSAGE)
        return False

    def write_bytes(self, payload) -> bool:
        return self._write(LINE_FEED + bytes(payload))

    def print_text(self, text: str, size=TextSize.STANDARD_FONT) -> bool:
        return self._write(size_command(size) + encode_text(text))

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self.disconnect()
        finally:
            self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
