"""ABI word encoding: 32-byte big-endian words and dynamic string fields.

Every scalar resolves to exactly one word regardless of how the caller
spelled it (int, decimal string, 0x hex string). Anything that cannot be
represented raises EncodingError instead of producing a short or long word.
"""

import re
from typing import NamedTuple

from web3 import Web3

WORD_SIZE = 32
MAX_UINT256 = 2 ** 256 - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_INT_PATTERN = re.compile(r"-?(0x[0-9a-f]+|[0-9]+)", re.IGNORECASE)


class EncodingError(ValueError):
    """A value cannot be represented as an ABI word."""


class EncodedDynamicField(NamedTuple):
    length_word: str
    padded_data: str


def pad_to_word(byte_length: int) -> int:
    """Round a byte count up to the next multiple of 32."""
    return -(-byte_length // WORD_SIZE) * WORD_SIZE


def to_int(value) -> int:
    """Normalize int / decimal string / 0x hex string to an int."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        # ASCII digits only: int() would also take "1_000" and non-Latin numerals
        if not _INT_PATTERN.fullmatch(text):
            raise EncodingError(f"Not an integer: {value!r}")
        if text.lower().startswith(("0x", "-0x")):
            return int(text, 16)
        return int(text, 10)
    raise EncodingError(f"Unsupported integer type {type(value).__name__}: {value!r}")


def encode_uint(value) -> str:
    number = to_int(value)
    if number < 0:
        raise EncodingError(f"Negative value for unsigned word: {number}")
    if number > MAX_UINT256:
        raise EncodingError(f"Value exceeds 256 bits: {number}")
    return number.to_bytes(WORD_SIZE, "big").hex()


def is_valid_address(address) -> bool:
    """20-byte 0x hex string; mixed case must carry a valid checksum."""
    if not (isinstance(address, str) and address.startswith("0x") and Web3.is_address(address)):
        return False
    body = address[2:]
    return body.islower() or body.isupper() or Web3.is_checksum_address(address)


def encode_address(address) -> str:
    if not is_valid_address(address):
        raise EncodingError(f"Malformed address: {address!r}")
    return bytes.fromhex(address[2:]).rjust(WORD_SIZE, b"\x00").hex()


def encode_bool(value: bool) -> str:
    return encode_uint(1 if value else 0)


def encode_string(text: str) -> EncodedDynamicField:
    """UTF-8 length word plus data right-padded with zeros to a word boundary."""
    if not isinstance(text, str):
        raise EncodingError(f"Expected str, got {type(text).__name__}")
    data = text.encode("utf-8")
    padded = data.ljust(pad_to_word(len(data)), b"\x00")
    return EncodedDynamicField(encode_uint(len(data)), padded.hex())
