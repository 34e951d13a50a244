"""JSON encoding and decoding on bytes, strings and streams.

Output is compact by default, with object keys sorted and text kept as
UTF-8. Non-finite floats are written as ``null``. Failures raise
:class:`JsonError`.
"""

from __future__ import annotations

import json
import math
from typing import Any, Optional

from . import errors

_READ_CHUNK = 4096


class JsonError(errors.SimpleError):
    """A JSON value could not be encoded or decoded."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid literal {name!r}")


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def _dump(value: Any, indent: Optional[int] = None) -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        _finite(value),
        ensure_ascii=False,
        allow_nan=False,
        sort_keys=True,
        indent=indent,
        separators=separators,
    )


def _dump_or_raise(value: Any, indent: Optional[int], what: str) -> str:
    try:
        return _dump(value, indent)
    except (TypeError, ValueError) as exc:
        raise JsonError(f"{what} error: {exc}") from exc


def _with_prefix(text: str, prefix: str) -> str:
    if not prefix:
        return text
    return "\n".join(prefix + line for line in text.split("\n"))


def _parse(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise JsonError(f"unmarshal error: {exc}") from exc


def _decode_bytes(data: bytes) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise JsonError(f"unmarshal error: {exc}") from exc


def marshal(value: Any) -> bytes:
    """Encode ``value`` as compact JSON bytes."""
    return _dump_or_raise(value, None, "marshal").encode("utf-8")


def marshal_string(value: Any) -> str:
    """Encode ``value`` as a compact JSON string."""
    return _dump_or_raise(value, None, "marshal")


def unmarshal(data: bytes) -> Any:
    """Decode JSON bytes into a Python value."""
    return _parse(_decode_bytes(data))


def unmarshal_string(data: str) -> Any:
    """Decode a JSON string into a Python value."""
    return _parse(data)


def valid(data: bytes) -> bool:
    """Return True if ``data`` holds exactly one valid JSON value."""
    try:
        unmarshal(data)
    except JsonError:
        return False
    return True


def valid_string(data: str) -> bool:
    """Return True if ``data`` holds exactly one valid JSON value."""
    try:
        unmarshal_string(data)
    except JsonError:
        return False
    return True


def compact(src: bytes) -> bytes:
    """Re-encode JSON bytes without insignificant whitespace."""
    return marshal(unmarshal(src))


def indent(src: bytes, prefix: str, indent: str) -> bytes:
    """Re-encode JSON bytes over several lines.

    Each level is indented by as many spaces as ``indent`` has characters,
    and every line starts with ``prefix``.
    """
    value = unmarshal(src)
    text = _dump_or_raise(value, len(indent), "indent")
    return _with_prefix(text, prefix).encode("utf-8")


class Encoder:
    """Writes JSON values, one per line, to a writer."""

    def __init__(self, writer: Any) -> None:
        self.writer = writer
        self.prefix = ""
        self.indent = ""
        self.escape_html = True

    def encode(self, value: Any) -> None:
        """Write ``value`` followed by a newline."""
        if self.indent:
            text = _dump_or_raise(value, len(self.indent), "encode")
            text = _with_prefix(text, self.prefix)
        else:
            text = _dump_or_raise(value, None, "encode")
        self.writer.write((text + "\n").encode("utf-8"))

    def set_indent(self, prefix: str, indent: str) -> None:
        """Indent later output; an empty ``indent`` keeps it compact."""
        self.prefix = prefix
        self.indent = indent

    def set_escape_html(self, escape: bool) -> None:
        """Record whether HTML characters should be escaped."""
        self.escape_html = escape


class Decoder:
    """Reads JSON values from a reader."""

    def __init__(self, reader: Any) -> None:
        self.reader = reader
        self.use_number_flag = False
        self.disallow_unknown = False

    def decode(self) -> Any:
        """Read until a complete JSON value has arrived and return it."""
        data = bytearray()
        while True:
            try:
                chunk = self.reader.read(_READ_CHUNK)
            except errors.Error:
                if not data:
                    raise
                break
            if not chunk:
                break
            data.extend(chunk)
            try:
                return unmarshal(bytes(data))
            except JsonError:
                continue
        return unmarshal(bytes(data))

    def more(self) -> bool:
        """Report whether another value follows; streams are read whole."""
        return False

    def token(self) -> Any:
        """Return the next value from the stream."""
        return self.decode()

    def use_number(self) -> None:
        """Record that numbers should be kept as numbers."""
        self.use_number_flag = True

    def disallow_unknown_fields(self) -> None:
        """Record that unknown object fields should be rejected."""
        self.disallow_unknown = True


def new_encoder(writer: Any) -> Encoder:
    """Return an encoder that writes to ``writer``."""
    return Encoder(writer)


def new_decoder(reader: Any) -> Decoder:
    """Return a decoder that reads from ``reader``."""
    return Decoder(reader)


def is_null(value: Any) -> bool:
    return value is None


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def get_bool(value: Any, default: bool = False) -> bool:
    """Return ``value`` if it is a boolean, else ``default``."""
    return value if is_bool(value) else default


def get_int(value: Any, default: int = 0) -> int:
    """Return ``value`` as an integer, truncating floats, else ``default``."""
    if is_int(value):
        return value
    if is_float(value):
        return int(value)
    return default


def get_float(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a float if it is a number, else ``default``."""
    if is_int(value) or is_float(value):
        return float(value)
    return default


def get_string(value: Any, default: str = "") -> str:
    """Return ``value`` if it is a string, else ``default``."""
    return value if is_string(value) else default


def get_array(value: Any, default: Optional[list] = None) -> list:
    """Return a copy of ``value`` if it is an array, else ``default``."""
    if is_array(value):
        return list(value)
    return [] if default is None else default


def get_object(value: Any, default: Optional[dict] = None) -> dict:
    """Return a copy of ``value`` if it is an object, else ``default``."""
    if is_object(value):
        return dict(value)
    return {} if default is None else default