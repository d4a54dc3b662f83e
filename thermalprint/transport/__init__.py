"""Transport layer for thermalprint.

This module provides different adapter implementations that can be dynamically
imported based on the connection type selected by the user.
"""

import platform

from .base import BaseAdapter, BaseTransport, PairedDevice

__all__ = [
    "ADAPTER_TYPES",
    "BaseAdapter",
    "BaseTransport",
    "PairedDevice",
    "default_adapter_type",
    "get_adapter",
]

ADAPTER_TYPES = ("bluetooth", "bluetooth_osx", "serial")


def default_adapter_type() -> str:
    if platform.system() == "Darwin":
        return "bluetooth_osx"
    return "bluetooth"


def get_adapter(adapter_type: str, **kwargs) -> BaseAdapter:
    """Dynamically import and create an adapter instance based on type.

    Args:
        adapter_type: One of 'bluetooth', 'bluetooth_osx', 'serial'
        **kwargs: Arguments to pass to the adapter constructor

    Returns:
        Adapter instance

    Raises:
        ImportError: If the platform library for the adapter is missing
        ValueError: If adapter_type is unknown
    """
    if adapter_type == "bluetooth":
        from .bluetooth import BluezAdapter
        return BluezAdapter(**kwargs)
    elif adapter_type == "bluetooth_osx":
        from .bluetooth_osx import IOBluetoothAdapter
        return IOBluetoothAdapter(**kwargs)
    elif adapter_type == "serial":
        from .serial import SerialAdapter
        return SerialAdapter(**kwargs)
    else:
        raise ValueError(f"Unknown adapter type: {adapter_type}")
