from typing import Any, List, Sequence, Tuple, Union

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_bytes, to_hex

from utils.exceptions import CalldataDecodeError


def function_selector(signature: str) -> str:
    """0x-prefixed 4 byte selector of a canonical signature, e.g. "transfer(address,uint256)"."""
    return to_hex(function_signature_to_4byte_selector(signature))


def parse_signature_types(signature: str) -> List[str]:
    """
    Splits the argument list of a canonical signature into ABI types,
    keeping tuple types such as "(address,uint256)[]" intact.
    """
    start = signature.find("(")
    if start < 0 or not signature.endswith(")"):
        raise ValueError(f"Malformed function signature: {signature}")
    inner = signature[start + 1 : -1]
    types: List[str] = []
    depth = 0
    current = ""
    for char in inner:
        if char == "," and depth == 0:
            types.append(current)
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current:
        types.append(current)
    return types


def encode_function_call(signature: str, args: Sequence[Any]) -> str:
    """ABI-encodes a call: selector followed by the encoded arguments."""
    types = parse_signature_types(signature)
    return to_hex(function_signature_to_4byte_selector(signature) + encode(types, list(args)))


def decode_function_call(signature: str, calldata: Union[str, bytes]) -> Tuple[Any, ...]:
    """
    Decodes calldata for ``signature``.
    Raises CalldataDecodeError when the selector differs or the arguments do not decode.
    """
    data = to_bytes(hexstr=calldata) if isinstance(calldata, str) else bytes(calldata)
    expected = function_signature_to_4byte_selector(signature)
    if data[:4] != expected:
        raise CalldataDecodeError(
            f"Calldata selector {to_hex(data[:4])} does not match {signature} ({to_hex(expected)})"
        )
    try:
        return tuple(decode(parse_signature_types(signature), data[4:]))
    except Exception as e:
        raise CalldataDecodeError(f"Could not decode calldata as {signature}: {e}") from e


def calldata_selector(calldata: Union[str, bytes]) -> str:
    data = to_bytes(hexstr=calldata) if isinstance(calldata, str) else bytes(calldata)
    return to_hex(data[:4]) if len(data) >= 4 else "0x"
