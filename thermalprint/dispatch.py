"""Method-call surface for host applications.

Maps the method names a host sends to :class:`PrinterSession` operations and
returns plain Python values.
"""

import logging

from thermalprint import platform_info
from thermalprint.commands import TextSize
from thermalprint.session import PrinterSession


class DispatchError(Exception):
    code = "ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MethodNotImplemented(DispatchError):
    code = "NOT_IMPLEMENTED"


class UnavailableError(DispatchError):
    code = "UNAVAILABLE"


class InvalidArguments(DispatchError):
    code = "BAD_ARGS"


class MethodDispatcher:
    def __init__(self, session: PrinterSession, platform_info=platform_info):
        self.session = session
        self.platform_info = platform_info
        self._methods = {
            "getPlatformVersion": self.get_platform_version,
            "getBatteryLevel": self.get_battery_level,
            "BluetoothStatus": self.bluetooth_status,
            "connectPrinter": self.connect_printer,
            "disconnectPrinter": self.disconnect_printer,
            "writeBytes": self.write_bytes,
            "printText": self.print_text,
            "bluetothLinked": self.bluetooth_linked,
        }

    @property
    def methods(self):
        return sorted(self._methods)

    def call(self, method: str, arguments=None):
        """Run ``method`` with ``arguments``.

        Raises:
            MethodNotImplemented: If no handler is registered for ``method``
            UnavailableError: If a queried platform resource is missing
            InvalidArguments: If ``arguments`` has the wrong shape
        """
        handler = self._methods.get(method)
        if handler is None:
            raise MethodNotImplemented(f"Method {method!r} is not implemented")
        logging.debug(f"dispatch {method}")
        return handler(arguments)

    def get_platform_version(self, arguments):
        return self.platform_info.platform_version()

    def get_battery_level(self, arguments):
        level = self.platform_info.battery_level()
        if level == -1:
            raise UnavailableError("Battery level not available.")
        return level

    def bluetooth_status(self, arguments):
        return self.session.adapter_enabled()

    def connect_printer(self, arguments):
        address = "" if arguments is None else str(arguments)
        return self.session.connect(address)

    def disconnect_printer(self, arguments):
        self.session.disconnect()
        return True

    def write_bytes(self, arguments):
        if arguments is None:
            arguments = []
        try:
            payload = bytes(int(b) & 0xFF for b in arguments)
        except (TypeError, ValueError) as e:
            raise InvalidArguments(f"writeBytes expects a list of integers: {e}") from e
        return self.session.write_bytes(payload)

    def print_text(self, arguments):
        size = TextSize.STANDARD_FONT
        if isinstance(arguments, dict):
            text = arguments.get("text", "")
            try:
                size = TextSize(arguments.get("size", size))
            except ValueError as e:
                raise InvalidArguments(f"Unknown text size: {e}") from e
        else:
            text = "" if arguments is None else str(arguments)
        return self.session.print_text(str(text), size)

    def bluetooth_linked(self, arguments):
        return self.session.list_paired_devices()
