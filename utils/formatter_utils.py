# MIT License
#
# Copyright (c) 2018 Evgeny Medvedev, evge.medvedev@gmail.com
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
# Change Description: formatters for proposal data (BigNumberish parsing, addresses,
# hex data, bytes32 padding and wei amounts) built on eth_utils.

from decimal import Decimal
from typing import Any, Union

from eth_utils import add_0x_prefix, from_wei, is_hex, remove_0x_prefix, to_bytes, to_checksum_address, to_hex, to_int

ZERO_BYTES32 = "0x" + "00" * 32


def to_big_int(value: Union[int, str, bytes, None]) -> int:
    """
    Parses a BigNumberish value: int, decimal string, 0x-prefixed hex string or big-endian bytes.
    """
    if value is None:
        raise ValueError("Cannot convert None to an integer")
    if isinstance(value, bool):
        raise ValueError(f"Refusing to treat boolean {value} as an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big")
    if isinstance(value, str):
        value = value.strip()
        if value.startswith(("0x", "0X")):
            return to_int(hexstr=value)
        return int(value)
    raise ValueError(f"Unsupported numeric value: {value!r}")


def to_normalized_address(address: Any) -> str:
    """
    Returns the EIP-55 checksummed form of an address. Raises ValueError on malformed input.
    """
    if isinstance(address, (bytes, bytearray)):
        address = to_hex(address)
    if not isinstance(address, str):
        raise ValueError(f"Address must be a string, got {type(address).__name__}")
    return to_checksum_address(address)


def to_hex_data(value: Union[str, bytes]) -> str:
    """Returns 0x-prefixed lowercase hex for calldata given as bytes or hex string."""
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    if not isinstance(value, str) or not is_hex(value):
        raise ValueError(f"Not a hex string: {value!r}")
    return add_0x_prefix(remove_0x_prefix(value)).lower()


def to_bytes32_hex(value: Union[int, str, bytes]) -> str:
    """Left-pads a number or short byte string to a 32 byte hex word."""
    if isinstance(value, bool) or not isinstance(value, (int, str, bytes, bytearray)):
        raise ValueError(f"Cannot convert {type(value).__name__} to bytes32")
    if isinstance(value, int):
        if not 0 <= value < 2**256:
            raise ValueError(f"Value out of uint256 range: {value}")
        raw = value.to_bytes(32, "big")
    else:
        raw = to_bytes(hexstr=value) if isinstance(value, str) else bytes(value)
        if len(raw) > 32:
            raise ValueError(f"Value longer than 32 bytes: {to_hex(raw)}")
        raw = raw.rjust(32, b"\x00")
    return to_hex(raw)


def format_wei(value: int, unit: str = "ether") -> str:
    amount = Decimal(from_wei(value, unit))
    text = format(amount.normalize(), "f")
    return f"{text} {'ETH' if unit == 'ether' else unit}"
