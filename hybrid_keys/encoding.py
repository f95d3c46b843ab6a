"""
Conversions between binary buffers and their textual forms.

Every codec is a pair of pure functions:
``from_buffer(bytes) -> str`` and ``to_buffer(str) -> bytes``.
"""

import base64
import binascii
import string
from collections.abc import Callable
from dataclasses import dataclass

from hybrid_keys.exceptions import DecodeError

Buffer = bytes | bytearray | memoryview


@dataclass(frozen=True)
class Codec:
    """A named, reversible bytes <-> text converter."""

    name: str
    from_buffer: Callable[[Buffer], str]
    to_buffer: Callable[[str], bytes]

    def __repr__(self) -> str:
        return f"Codec({self.name!r})"


def _base64_from_buffer(buffer: Buffer) -> str:
    return base64.b64encode(bytes(buffer)).decode("ascii")


def _base64_to_buffer(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        msg = f"Invalid base64 input: {e}"
        raise DecodeError(msg, encoding="base64") from e


def _hex_from_buffer(buffer: Buffer) -> str:
    return bytes(buffer).hex()


def _hex_to_buffer(text: str) -> bytes:
    for position, char in enumerate(text):
        if char not in string.hexdigits:
            msg = f"Invalid hex digit {char!r} at position {position}"
            raise DecodeError(msg, encoding="hex")
    if len(text) % 2:
        msg = "Hex input has an odd number of digits"
        raise DecodeError(msg, encoding="hex")
    return bytes.fromhex(text)


def _string_from_buffer(buffer: Buffer) -> str:
    # latin-1 maps every byte 0-255 to the code point of the same value
    return bytes(buffer).decode("latin-1")


def _string_to_buffer(text: str) -> bytes:
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as e:
        msg = f"Code point out of byte range at position {e.start}"
        raise DecodeError(msg, encoding="string") from e


def _utf8_from_buffer(buffer: Buffer) -> str:
    try:
        return bytes(buffer).decode("utf-8")
    except UnicodeDecodeError as e:
        msg = f"Invalid UTF-8 sequence at position {e.start}"
        raise DecodeError(msg, encoding="utf8") from e


def _utf8_to_buffer(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates have no UTF-8 form
        msg = f"Unencodable character at position {e.start}"
        raise DecodeError(msg, encoding="utf8") from e


BASE64 = Codec("base64", _base64_from_buffer, _base64_to_buffer)
HEX = Codec("hex", _hex_from_buffer, _hex_to_buffer)
STRING = Codec("string", _string_from_buffer, _string_to_buffer)
UTF8 = Codec("utf8", _utf8_from_buffer, _utf8_to_buffer)

CODECS: dict[str, Codec] = {codec.name: codec for codec in (BASE64, HEX, STRING, UTF8)}


def get_codec(name: str) -> Codec:
    """
    Look up a codec by name.

    Args:
        name: One of ``base64``, ``hex``, ``string``, ``utf8``.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return CODECS[name]
    except KeyError:
        msg = f"Unknown codec: {name!r}"
        raise ValueError(msg) from None
