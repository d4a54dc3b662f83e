import pytest

from thermalprint.dispatch import (
    InvalidArguments,
    MethodDispatcher,
    MethodNotImplemented,
    UnavailableError,
)


class StubPlatform:
    def __init__(self, battery=87):
        self.battery = battery

    def platform_version(self):
        return "Linux 6.1.0"

    def battery_level(self):
        return self.battery


@pytest.fixture
def dispatcher(session):
    return MethodDispatcher(session, platform_info=StubPlatform())


def test_platform_version(dispatcher):
    assert dispatcher.call("getPlatformVersion") == "Linux 6.1.0"


def test_battery_level(dispatcher):
    assert dispatcher.call("getBatteryLevel") == 87


def test_battery_unavailable(session):
    dispatcher = MethodDispatcher(session, platform_info=StubPlatform(battery=-1))
    with pytest.raises(UnavailableError) as excinfo:
        dispatcher.call("getBatteryLevel")
    assert excinfo.value.code == "UNAVAILABLE"


def test_bluetooth_status_is_bool(dispatcher, adapter):
    assert dispatcher.call("BluetoothStatus") is True
    adapter.enabled = False
    assert dispatcher.call("BluetoothStatus") is False


def test_connect_and_disconnect(dispatcher, session):
    assert dispatcher.call("connectPrinter", "AA:BB:CC:DD:EE:FF") is True
    assert session.connected
    assert dispatcher.call("disconnectPrinter") is True
    assert not session.connected


def test_disconnect_when_idle_reports_true(dispatcher):
    assert dispatcher.call("disconnectPrinter") is True


def test_connect_without_address(dispatcher, adapter):
    assert dispatcher.call("connectPrinter", None) is False
    assert dispatcher.call("connectPrinter", "") is False
    assert adapter.connects == []


def test_write_bytes_truncates_to_byte(dispatcher, adapter):
    dispatcher.call("connectPrinter", "AA:BB:CC:DD:EE:FF")
    assert dispatcher.call("writeBytes", [27, 64, 256 + 10, -1]) is True
    assert adapter.transports[0].written == b"\n\x1b\x40\x0a\xff"


def test_write_bytes_bad_arguments(dispatcher, adapter):
    dispatcher.call("connectPrinter", "AA:BB:CC:DD:EE:FF")
    with pytest.raises(InvalidArguments):
        dispatcher.call("writeBytes", ["esc"])


def test_write_bytes_disconnected(dispatcher):
    assert dispatcher.call("writeBytes", [1, 2, 3]) is False


def test_print_text(dispatcher, adapter):
    dispatcher.call("connectPrinter", "AA:BB:CC:DD:EE:FF")
    assert dispatcher.call("printText", "Hello") is True
    assert adapter.transports[0].written == b"\x1b\x4d\x00Hello"


def test_print_text_with_size(dispatcher, adapter):
    dispatcher.call("connectPrinter", "AA:BB:CC:DD:EE:FF")
    assert dispatcher.call("printText", {"text": "Big", "size": 5}) is True
    assert adapter.transports[0].written == b"\x1d\x21\x33Big"


def test_print_text_unknown_size(dispatcher):
    with pytest.raises(InvalidArguments):
        dispatcher.call("printText", {"text": "Big", "size": 9})


def test_linked_devices(dispatcher):
    assert dispatcher.call("bluetothLinked") == [
        "MTP-II#AA:BB:CC:DD:EE:FF",
        "Headset#11:22:33:44:55:66",
    ]


def test_unknown_method(dispatcher):
    with pytest.raises(MethodNotImplemented) as excinfo:
        dispatcher.call("printImage", b"")
    assert excinfo.value.code == "NOT_IMPLEMENTED"


def test_methods(dispatcher):
    assert "bluetothLinked" in dispatcher.methods
    assert len(dispatcher.methods) == 8
