import enum

# Serial Port Profile service class
SPP_UUID = "00001101-0000-1000-8000-00805F9B34FB"

LINE_FEED = b"\n"


class TextSize(enum.IntEnum):
    NORMAL = 0  # GS ! 0x00
    CONDENSED_FONT = 1  # ESC M 1
    STANDARD_FONT = 2  # ESC M 0
    DOUBLE = 3  # GS ! 0x11
    TRIPLE = 4  # GS ! 0x22
    QUADRUPLE = 5  # GS ! 0x33


PRESETS = (
    b"\x1d\x21\x00",
    b"\x1b\x4d\x01",
    b"\x1b\x4d\x00",
    b"\x1d\x21\x11",
    b"\x1d\x21\x22",
    b"\x1d\x21\x33",
)


def size_command(size) -> bytes:
    return PRESETS[TextSize(size)]


def encode_text(text: str) -> bytes:
    """Encode text for the printer's single-byte code page.

    Characters outside ISO-8859-1 become ``?``.
    """
    return text.encode("latin-1", errors="replace")
