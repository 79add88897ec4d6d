"""STOMP 1.2 frame encoding and decoding."""

from ..models import StompCommand, StompFrame

HEARTBEAT = "\n"

# CONNECT and CONNECTED headers are never escaped
_UNESCAPED_COMMANDS = (StompCommand.CONNECT, StompCommand.CONNECTED)

_UNESCAPES = {"r": "\r", "n": "\n", "c": ":", "\\": "\\"}


class StompProtocolError(Exception):
    """Malformed STOMP input or a frame that violates the protocol."""


def _escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
        .replace(":", "\\c")
    )


def _unescape(value: str) -> str:
    if "\\" not in value:
        return value

    out = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\":
            if i + 1 >= len(value) or value[i + 1] not in _UNESCAPES:
                raise StompProtocolError(f"Invalid header escape in {value!r}")
            out.append(_UNESCAPES[value[i + 1]])
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def encode_frame(frame: StompFrame) -> str:
    """Serialize a frame, adding content-length for non-empty bodies."""
    escape = frame.command not in _UNESCAPED_COMMANDS
    headers = dict(frame.headers)
    if frame.body and "content-length" not in headers:
        headers["content-length"] = str(len(frame.body.encode("utf-8")))

    lines = [frame.command.value]
    for name, value in headers.items():
        if escape:
            name, value = _escape(name), _escape(str(value))
        lines.append(f"{name}:{value}")

    return "\n".join(lines) + "\n\n" + frame.body + "\0"


def _read_line(data: bytes, pos: int) -> tuple[str, int]:
    nl = data.find(b"\n", pos)
    if nl == -1:
        raise StompProtocolError("Incomplete frame: missing end of line")
    line = data[pos:nl]
    if line.endswith(b"\r"):
        line = line[:-1]
    try:
        return line.decode("utf-8"), nl + 1
    except UnicodeDecodeError:
        raise StompProtocolError("Frame is not valid UTF-8") from None


def _decode_one(data: bytes, pos: int) -> tuple[StompFrame, int]:
    raw_command, pos = _read_line(data, pos)
    try:
        command = StompCommand(raw_command)
    except ValueError:
        raise StompProtocolError(f"Unknown command {raw_command!r}") from None

    escaped = command not in _UNESCAPED_COMMANDS
    headers: dict[str, str] = {}
    while True:
        line, pos = _read_line(data, pos)
        if not line:
            break
        if ":" not in line:
            raise StompProtocolError(f"Malformed header line {line!r}")
        name, value = line.split(":", 1)
        if escaped:
            name, value = _unescape(name), _unescape(value)
        # Repeated headers: only the first occurrence counts
        headers.setdefault(name, value)

    if "content-length" in headers:
        try:
            length = int(headers["content-length"])
        except ValueError:
            raise StompProtocolError(
                f"Invalid content-length {headers['content-length']!r}"
            ) from None
        if length < 0:
            raise StompProtocolError(f"Invalid content-length {length}")
        end = pos + length
        if len(data) < end + 1 or data[end : end + 1] != b"\0":
            raise StompProtocolError("Body does not match content-length")
    else:
        end = data.find(b"\0", pos)
        if end == -1:
            raise StompProtocolError("Incomplete frame: missing NULL terminator")

    try:
        body = data[pos:end].decode("utf-8")
    except UnicodeDecodeError:
        raise StompProtocolError("Frame body is not valid UTF-8") from None
    return StompFrame(command=command, headers=headers, body=body), end + 1


def decode_frames(data: str | bytes) -> list[StompFrame]:
    """Parse every frame in data. Bare EOLs (heart-beats) are skipped."""
    if isinstance(data, str):
        data = data.encode("utf-8")

    frames = []
    pos = 0
    while pos < len(data):
        if data[pos : pos + 1] in (b"\n", b"\r"):
            pos += 1
            continue
        frame, pos = _decode_one(data, pos)
        frames.append(frame)
    return frames
