import asyncio

import pytest
from unittest.mock import AsyncMock, patch

from utils.abi_utils import calldata_selector, decode_function_call, parse_signature_types
from utils.async_utils import async_retry, gather_with_concurrency
from utils.bytecode_utils import find_opcodes, strip_metadata
from utils.exceptions import CalldataDecodeError
from utils.formatter_utils import format_wei, to_big_int, to_bytes32_hex, to_hex_data


@pytest.mark.parametrize(
    "value, expected",
    [(5, 5), ("42", 42), ("0x2a", 42), (b"\x01\x00", 256), (" 7 ", 7)],
)
def test_to_big_int(value, expected):
    assert to_big_int(value) == expected


@pytest.mark.parametrize("value", [None, True, 1.5])
def test_to_big_int_rejects(value):
    with pytest.raises(ValueError):
        to_big_int(value)


def test_hex_helpers():
    assert to_hex_data("ABCD") == "0xabcd"
    assert to_hex_data(b"\x12") == "0x12"
    assert to_bytes32_hex(1) == "0x" + "00" * 31 + "01"
    assert to_bytes32_hex("0x01") == "0x" + "00" * 31 + "01"
    with pytest.raises(ValueError):
        to_hex_data("0xzz")


def test_hex_helpers_accept_uppercase_prefix():
    assert to_hex_data("0XABCD") == "0xabcd"
    assert to_bytes32_hex("0X01") == "0x" + "00" * 31 + "01"


@pytest.mark.parametrize("value", [1234, None, 1.5])
def test_to_hex_data_rejects_non_text(value):
    with pytest.raises(ValueError):
        to_hex_data(value)


@pytest.mark.parametrize("value", [-1, 2**256, True, 1.5])
def test_to_bytes32_hex_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        to_bytes32_hex(value)


def test_format_wei():
    assert format_wei(10**18) == "1 ETH"
    assert format_wei(15 * 10**17) == "1.5 ETH"
    assert format_wei(0) == "0 ETH"


def test_parse_signature_types_keeps_tuples():
    assert parse_signature_types("f((address,uint256)[],bytes)") == ["(address,uint256)[]", "bytes"]
    assert parse_signature_types("f()") == []


def test_decode_function_call_checks_selector():
    with pytest.raises(CalldataDecodeError):
        decode_function_call("execute(uint256)", "0x12345678" + "00" * 32)
    assert calldata_selector("0x12") == "0x"


def test_find_opcodes_skips_push_data():
    # PUSH1 0xff, PUSH1 0xf4, STOP
    assert find_opcodes("0x60ff60f400", ["SELFDESTRUCT", "DELEGATECALL"]) == set()
    assert find_opcodes("0x6000ff", ["SELFDESTRUCT"]) == {"SELFDESTRUCT"}
    assert find_opcodes(None, ["SELFDESTRUCT"]) == set()


def test_strip_metadata():
    code = b"\x60\x00\x00"
    metadata = b"\xa2" + b"\xff" * 3
    trailer = len(metadata).to_bytes(2, "big")

    assert strip_metadata(code + metadata + trailer) == code
    assert find_opcodes(code + metadata + trailer, ["SELFDESTRUCT"]) == set()
    assert strip_metadata(code) == code


@pytest.mark.asyncio
async def test_async_retry_retries_listed_exceptions():
    calls = AsyncMock(side_effect=[ValueError("flaky"), "ok"])

    @async_retry(max_retries=2, initial_delay=0.5, exceptions=(ValueError,))
    async def flaky():
        return await calls()

    with patch("utils.async_utils.asyncio.sleep", new_callable=AsyncMock) as sleep:
        assert await flaky() == "ok"

    sleep.assert_awaited_once_with(0.5)


@pytest.mark.asyncio
async def test_async_retry_does_not_retry_other_exceptions():
    calls = AsyncMock(side_effect=KeyError("nope"))

    @async_retry(max_retries=2, exceptions=(ValueError,))
    async def broken():
        return await calls()

    with pytest.raises(KeyError):
        await broken()
    assert calls.await_count == 1


@pytest.mark.asyncio
async def test_gather_with_concurrency_limits_and_keeps_order():
    running = 0
    peak = 0

    async def task(i):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0)
        running -= 1
        return i

    results = await gather_with_concurrency(2, *(task(i) for i in range(5)))

    assert results == [0, 1, 2, 3, 4]
    assert peak <= 2
