from thermalprint.commands import PRESETS, SPP_UUID, TextSize
from thermalprint.dispatch import (
    DispatchError,
    InvalidArguments,
    MethodDispatcher,
    MethodNotImplemented,
    UnavailableError,
)
from thermalprint.session import DISCONNECTED_MESSAGE, PrinterSession
from thermalprint.transport import get_adapter

__all__ = [
    "DISCONNECTED_MESSAGE",
    "DispatchError",
    "InvalidArguments",
    "MethodDispatcher",
    "MethodNotImplemented",
    "PRESETS",
    "PrinterSession",
    "SPP_UUID",
    "TextSize",
    "UnavailableError",
    "get_adapter",
]
