# opcodes.py: register/opcode maps, operand and instruction encoding
import re
from typing import Optional, Union

from .diagnostics import DiagnosticLog, SourceLoc, OPERAND, OPCODE
from .encoding import (
    WORD_MASK, A_SHIFT, A_MASK, B_MASK, B_REG_FLAG, B_REG_SHIFT, B_REG_MASK,
    MIN_IMM, MAX_IMM, CLASS_MASK, JUMP_CLASS, to_tc11, from_tc11, in_imm_range,
)

REG = {
    "NIL":   0,
    "ACC":   1,
    "ANY":   2,
    "LAST":  3,
    "LEFT":  4,   # neighbour 0
    "RIGHT": 5,   # neighbour 1
    "UP":    6,   # neighbour 2
    "DOWN":  7,   # neighbour 3
}

REG_REV = {v: k for k, v in REG.items()}

# Base words. Operand fields are OR-ed into these.
OP = {
    "NOP": 0x0000,
    "MOV": 0x0000,   # 0aaa bbbb bbbb bbbb
    "ADD": 0x8000,   # 100X bbbb bbbb bbbb
    "SUB": 0x8001,
    "JRO": 0x8002,
    "JMP": 0xC000,   # 110N NNcc ccxx xxxx
    "JEZ": 0xC400,
    "JNZ": 0xC800,
    "JGZ": 0xCC00,
    "JLZ": 0xD000,
    "NEG": 0xE000,   # 111o oo.. .... ....
    "SAV": 0xE200,
    "SWP": 0xE400,
}

SOURCE_OPS = ("ADD", "SUB", "JRO")
JUMP_OPS = ("JMP", "JEZ", "JNZ", "JGZ", "JLZ")
BARE_OPS = ("NEG", "SAV", "SWP", "NOP")

_NUMERIC = re.compile(r"-?[0-9]+")


def is_numeric_token(tok: str) -> bool:
    return _NUMERIC.fullmatch(tok) is not None


def is_jump_word(bits: int) -> bool:
    return (bits & CLASS_MASK) == JUMP_CLASS


def encode_register(name: str, log: DiagnosticLog, loc: SourceLoc) -> int:
    code = REG.get(name)
    if code is None:
        log.report(OPERAND, loc, f"Register Name {name} is not valid.")
        return 0
    return code


def encode_source_operand(tok: str, log: DiagnosticLog, loc: SourceLoc) -> int:
    """
    Encode a source operand as the 12-bit B-field.

    Bit 11 clear: bits [10:0] hold an 11-bit two's-complement literal.
    Bit 11 set:   bits [10:8] hold a register code.
    An empty token is looked up as a register and fails there.
    """
    if is_numeric_token(tok):
        number = int(tok)
        if not in_imm_range(number):
            log.report(OPERAND, loc, f"Literal {number} is outside valid range of {MIN_IMM} to {MAX_IMM}.")
        return to_tc11(number)
    return ((encode_register(tok, log, loc) << B_REG_SHIFT) & B_REG_MASK) | B_REG_FLAG


def decode_source_operand(field: int) -> Union[int, str]:
    """Inverse of encode_source_operand for well-formed fields: literal value or register name."""
    field &= B_MASK
    if field & B_REG_FLAG:
        return REG_REV[(field & B_REG_MASK) >> B_REG_SHIFT]
    return from_tc11(field)


def encode_instruction(mnemonic: Optional[str], arg0: Optional[str], arg1: Optional[str],
                       log: DiagnosticLog, loc: SourceLoc) -> int:
    # Jump targets are left at 0; the label resolver fills bits [9:6].
    arg0 = arg0 or ""
    arg1 = arg1 or ""
    if not mnemonic:
        return OP["NOP"]
    if mnemonic == "MOV":
        src = encode_source_operand(arg0, log, loc)
        dst = encode_register(arg1, log, loc)
        return (OP["MOV"] | ((dst & A_MASK) << A_SHIFT) | src) & WORD_MASK
    if mnemonic in SOURCE_OPS:
        return (OP[mnemonic] | encode_source_operand(arg0, log, loc)) & WORD_MASK
    if mnemonic in JUMP_OPS or mnemonic in BARE_OPS:
        return OP[mnemonic]
    log.report(OPCODE, loc, f"Opcode {mnemonic} is not valid.")
    return OP["NOP"]
