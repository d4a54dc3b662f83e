import json
import logging
import platform
import sys

import click

from thermalprint.commands import TextSize
from thermalprint.dispatch import DispatchError, MethodDispatcher
from thermalprint.session import PrinterSession
from thermalprint.transport import ADAPTER_TYPES, default_adapter_type, get_adapter


def create_adapter(adapter_type, channel, timeout):
    if adapter_type == "serial":
        kwargs = {"timeout": timeout}
    else:
        kwargs = {"channel": channel, "timeout": timeout}
    try:
        return get_adapter(adapter_type, **kwargs)
    except ImportError as e:
        # macOS exposes paired SPP printers as /dev/cu.* ports
        if adapter_type == "bluetooth_osx" and "PyObjC IOBluetooth framework not available" in str(e):
            logging.warning("PyObjC IOBluetooth not available, falling back to serial ports")
            return get_adapter("serial", timeout=timeout)
        raise
    except RuntimeError as e:
        logging.warning(f"Bluetooth adapter unavailable: {e}")
        return None


def parse_byte(ctx, param, values):
    try:
        return [int(value, 0) & 0xFF for value in values]
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def echo_notification(message):
    click.echo(message, err=True)


address_option = click.option(
    "-a",
    "--addr",
    envvar="THERMALPRINT_ADDRESS",
    required=True,
    help="Bluetooth MAC address OR serial device path",
)


@click.group()
@click.option(
    "--adapter",
    "adapter_type",
    type=click.Choice(ADAPTER_TYPES),
    envvar="THERMALPRINT_ADAPTER",
    default=default_adapter_type,
    show_default="bluetooth_osx on macOS, else bluetooth",
    help="Connection type",
)
@click.option(
    "-c",
    "--channel",
    type=click.IntRange(1, 30),
    envvar="THERMALPRINT_CHANNEL",
    default=1,
    show_default=True,
    help="RFCOMM channel used when the SPP record cannot be looked up",
)
@click.option(
    "-t",
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    envvar="THERMALPRINT_TIMEOUT",
    default=None,
    help="Socket timeout in seconds",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging",
)
@click.pass_context
def cli(ctx, adapter_type, channel, timeout, verbose):
    logging.basicConfig(
        level="DEBUG" if verbose else "INFO",
        format="%(asctime)s.%(msecs)03d | %(levelname)s | %(module)s:%(funcName)s:%(lineno)d - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.debug(f"Running on {platform.system()} with adapter {adapter_type}")
    adapter = create_adapter(adapter_type, channel, timeout)
    ctx.obj = ctx.with_resource(PrinterSession(adapter, notify=echo_notification))


@cli.command("status")
@click.pass_obj
def status_cmd(session):
    """Print whether the Bluetooth adapter is powered on."""
    click.echo("true" if session.adapter_enabled() else "false")


@cli.command("linked")
@click.pass_obj
def linked_cmd(session):
    """List paired devices as name#address."""
    for device in session.list_paired_devices():
        click.echo(device)


@cli.command("print-text")
@address_option
@click.option(
    "-s",
    "--size",
    type=click.Choice([size.name.lower() for size in TextSize], False),
    default="standard_font",
    show_default=True,
    help="Text size preset",
)
@click.argument("text")
@click.pass_obj
def print_text_cmd(session, addr, size, text):
    """Connect, print TEXT and disconnect."""
    if not session.connect(addr):
        raise click.ClickException(f"Could not connect to {addr}")
    ok = session.print_text(text + "\n", TextSize[size.upper()])
    session.disconnect()
    if not ok:
        raise click.ClickException("Print failed")


@cli.command("write-bytes")
@address_option
@click.argument("data", nargs=-1, required=True, callback=parse_byte)
@click.pass_obj
def write_bytes_cmd(session, addr, data):
    """Connect, send DATA (decimal or 0x hex bytes) and disconnect."""
    if not session.connect(addr):
        raise click.ClickException(f"Could not connect to {addr}")
    ok = session.write_bytes(data)
    session.disconnect()
    if not ok:
        raise click.ClickException("Write failed")


def handle_request(dispatcher, line):
    try:
        request = json.loads(line)
        method = request["method"]
    except (ValueError, KeyError, TypeError) as e:
        return {"error": {"code": "BAD_REQUEST", "message": str(e)}}
    response = {"id": request["id"]} if "id" in request else {}
    if not isinstance(method, str):
        response["error"] = {"code": "BAD_REQUEST", "message": f"method must be a string, got {method!r}"}
        return response
    try:
        response["result"] = dispatcher.call(method, request.get("args"))
    except DispatchError as e:
        response["error"] = {"code": e.code, "message": e.message}
    return response


@cli.command("serve")
@click.pass_obj
def serve_cmd(session):
    """Answer JSON method calls read line by line from stdin."""

    def emit(message):
        click.echo(json.dumps(message))
        sys.stdout.flush()

    session.notify = lambda text: emit({"notification": text})
    dispatcher = MethodDispatcher(session)
    with click.open_file("-") as stdin:
        for line in stdin:
            if not line.strip():
                continue
            emit(handle_request(dispatcher, line))


if __name__ == "__main__":
    cli()
