from typing import Iterable, Optional, Set, Union

from pyevmasm import disassemble_all

from utils.logger_utils import get_logger

logger = get_logger("Bytecode Utils")

# CBOR map headers used by the solc/vyper metadata trailer (a1..a5 entries)
CBOR_MAP_HEADERS = range(0xA1, 0xA6)


def clean_bytecode(bytecode: Union[str, bytes, None]) -> Optional[bytes]:
    """
    Normalizes bytecode to raw bytes. Returns None for empty code (EOA or destroyed contract).
    """
    if bytecode is None:
        return None
    if isinstance(bytecode, (bytes, bytearray)):
        raw = bytes(bytecode)
    else:
        text = bytecode[2:] if bytecode.startswith("0x") else bytecode
        raw = bytes.fromhex(text)
    return raw or None


def strip_metadata(code: bytes) -> bytes:
    """
    Drops the compiler metadata trailer. The last two bytes hold the trailer length;
    left in place, its hash bytes can look like SELFDESTRUCT/DELEGATECALL opcodes.
    """
    if len(code) < 2:
        return code
    metadata_length = int.from_bytes(code[-2:], "big")
    start = len(code) - 2 - metadata_length
    if start < 0 or code[start] not in CBOR_MAP_HEADERS:
        return code
    return code[:start]


def find_opcodes(bytecode: Union[str, bytes, None], opcodes: Iterable[str]) -> Set[str]:
    """
    Disassembles runtime bytecode and returns which of ``opcodes`` it contains.
    PUSH operands are skipped by the disassembler, so data bytes never match.
    """
    code = clean_bytecode(bytecode)
    if code is None:
        return set()

    wanted = {name.upper() for name in opcodes}
    found: Set[str] = set()
    for instruction in disassemble_all(strip_metadata(code)):
        if instruction.name in wanted:
            found.add(instruction.name)
            if found == wanted:
                break
    return found
