import pytest

from thermalprint.session import PrinterSession
from thermalprint.transport import BaseAdapter, BaseTransport, PairedDevice


class FakeTransport(BaseTransport):
    def __init__(self, address):
        self.address = address
        self.written = bytearray()
        self.writes = []
        self.closed = False
        self.fail_writes = False

    def write(self, data: bytes) -> int:
        if self.fail_writes:
            raise BrokenPipeError(32, "Broken pipe")
        self.writes.append(bytes(data))
        self.written.extend(data)
        return len(data)

    def close(self):
        self.closed = True


class FakeAdapter(BaseAdapter):
    def __init__(self, enabled=True, devices=(), fail_connect=False):
        self.enabled = enabled
        self.devices = list(devices)
        self.fail_connect = fail_connect
        self.connects = []
        self.discovery_cancels = 0
        self.transports = []

    def is_enabled(self) -> bool:
        return self.enabled

    def bonded_devices(self):
        return list(self.devices)

    def cancel_discovery(self):
        self.discovery_cancels += 1

    def connect(self, address: str, uuid: str) -> FakeTransport:
        self.connects.append((address, uuid))
        if self.fail_connect:
            raise ConnectionError(f"Connection refused by device {address}")
        transport = FakeTransport(address)
        self.transports.append(transport)
        return transport


class Notifications(list):
    def __call__(self, message):
        self.append(message)


@pytest.fixture
def adapter():
    return FakeAdapter(
        devices=[
            PairedDevice("MTP-II", "AA:BB:CC:DD:EE:FF"),
            PairedDevice("Headset", "11:22:33:44:55:66"),
        ]
    )


@pytest.fixture
def notifications():
    return Notifications()


@pytest.fixture
def session(adapter, notifications):
    with PrinterSession(adapter, notify=notifications) as session:
        yield session


@pytest.fixture
def connected(session, adapter):
    assert session.connect("AA:BB:CC:DD:EE:FF")
    return adapter.transports[0]
