"""Base transport and adapter classes for thermalprint."""

import abc
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class PairedDevice:
    name: str
    address: str

    def __str__(self):
        return f"{self.name}#{self.address}"


class BaseTransport(metaclass=abc.ABCMeta):
    """An open byte channel to a printer."""

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Write data to the transport.

        Args:
            data: Data to write

        Returns:
            int: Number of bytes written
        """
        raise NotImplementedError

    @abc.abstractmethod
    def close(self):
        raise NotImplementedError


class BaseAdapter(metaclass=abc.ABCMeta):
    """Abstract base class for the local Bluetooth (or serial) adapter."""

    @abc.abstractmethod
    def is_enabled(self) -> bool:
        """Whether the adapter exists and is powered on."""
        raise NotImplementedError

    @abc.abstractmethod
    def bonded_devices(self) -> List[PairedDevice]:
        """Devices already paired with this adapter. Never starts discovery."""
        raise NotImplementedError

    def cancel_discovery(self):
        """Stop any running inquiry, it competes with RFCOMM connects."""

    @abc.abstractmethod
    def connect(self, address: str, uuid: str) -> BaseTransport:
        """Open a channel to the service ``uuid`` on ``address``.

        Raises:
            ValueError: If the address cannot be parsed
            ConnectionError: If the remote device refuses or is unreachable
            RuntimeError: If the platform stack reports any other failure
        """
        raise NotImplementedError
