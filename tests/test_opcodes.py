# tests/test_opcodes.py
import pytest

from tis_asm.core.diagnostics import DiagnosticLog, SourceLoc, OPERAND, OPCODE
from tis_asm.core.opcodes import (
    REG, encode_register, encode_source_operand, decode_source_operand,
    encode_instruction, is_numeric_token, is_jump_word,
)

LOC = SourceLoc(node=2, line=7)


def test_register_codes_are_a_bijection():
    diag = DiagnosticLog()
    codes = {name: encode_register(name, diag, LOC) for name in
             ("NIL", "ACC", "ANY", "LAST", "LEFT", "RIGHT", "UP", "DOWN")}
    assert codes == {"NIL": 0, "ACC": 1, "ANY": 2, "LAST": 3,
                     "LEFT": 4, "RIGHT": 5, "UP": 6, "DOWN": 7}
    assert sorted(codes.values()) == list(range(8))
    assert not diag.failed


@pytest.mark.parametrize("name", ["acc", "R0", "", "LEFTT"])
def test_unknown_register_recovers_with_zero(name):
    diag = DiagnosticLog()
    assert encode_register(name, diag, LOC) == 0
    assert [d.kind for d in diag] == [OPERAND]
    assert str(diag.items[0]) == f"Node 2, line 7: Register Name {name} is not valid."


def test_numeric_classification():
    assert is_numeric_token("0")
    assert is_numeric_token("-12")
    assert not is_numeric_token("")
    assert not is_numeric_token("-")
    assert not is_numeric_token("1-2")
    assert not is_numeric_token("+5")
    assert not is_numeric_token("ACC")


def test_every_literal_in_range_round_trips():
    diag = DiagnosticLog()
    for v in range(-1024, 1024):
        field = encode_source_operand(str(v), diag, LOC)
        assert field & 0x800 == 0
        assert decode_source_operand(field) == v
    assert not diag.failed


def test_register_source_sets_discriminator():
    diag = DiagnosticLog()
    for name, code in REG.items():
        field = encode_source_operand(name, diag, LOC)
        assert field == 0x800 | (code << 8)
        assert decode_source_operand(field) == name


def test_literal_out_of_range_is_reported_and_truncated():
    diag = DiagnosticLog()
    assert encode_source_operand("2000", diag, LOC) == 2000 & 0x7FF
    assert [d.kind for d in diag] == [OPERAND]
    assert "Literal 2000 is outside valid range of -1024 to 1023." in str(diag.items[0])


def test_empty_source_is_a_register_error():
    diag = DiagnosticLog()
    assert encode_source_operand("", diag, LOC) == 0x800
    assert diag.of_kind(OPERAND)


@pytest.mark.parametrize("mnemonic,arg0,arg1,expected", [
    ("MOV", "5", "ACC", 0x1005),
    ("MOV", "UP", "DOWN", 0x7E00),
    ("MOV", "-1", "NIL", 0x07FF),
    ("ADD", "1", None, 0x8001),
    ("ADD", "ACC", None, 0x8900),
    ("SUB", "-1024", None, 0x8401),
    ("JRO", "-1", None, 0x87FF),
    ("JMP", "loop", None, 0xC000),
    ("JEZ", "loop", None, 0xC400),
    ("JNZ", "loop", None, 0xC800),
    ("JGZ", "loop", None, 0xCC00),
    ("JLZ", "loop", None, 0xD000),
    ("NEG", None, None, 0xE000),
    ("SAV", None, None, 0xE200),
    ("SWP", None, None, 0xE400),
    ("NOP", None, None, 0x0000),
    (None, None, None, 0x0000),
])
def test_instruction_table(mnemonic, arg0, arg1, expected):
    diag = DiagnosticLog()
    assert encode_instruction(mnemonic, arg0, arg1, diag, LOC) == expected
    assert not diag.failed


@pytest.mark.parametrize("src", ["0", "1023", "-1024", "ACC", "LAST"])
def test_high_bits_do_not_depend_on_operands(src):
    diag = DiagnosticLog()
    assert encode_instruction("MOV", src, "RIGHT", diag, LOC) >> 12 == 0b0101
    assert encode_instruction("ADD", src, None, diag, LOC) >> 12 == 0b1000
    assert encode_instruction("SUB", src, None, diag, LOC) >> 12 == 0b1000
    assert encode_instruction("JRO", src, None, diag, LOC) >> 12 == 0b1000
    assert encode_instruction("JLZ", src, None, diag, LOC) == 0xD000
    assert encode_instruction("SWP", src, src, diag, LOC) == 0xE400
    assert not diag.failed


def test_unknown_opcode_becomes_nop():
    diag = DiagnosticLog()
    assert encode_instruction("HCF", "1", None, diag, LOC) == 0x0000
    assert [d.kind for d in diag] == [OPCODE]
    assert diag.items[0].message == "Opcode HCF is not valid."


def test_mnemonics_are_case_sensitive():
    diag = DiagnosticLog()
    assert encode_instruction("mov", "1", "ACC", diag, LOC) == 0x0000
    assert diag.of_kind(OPCODE)


def test_jump_class_detection():
    assert is_jump_word(0xC000)
    assert is_jump_word(0xD000 | (15 << 6))
    assert not is_jump_word(0xE000)
    assert not is_jump_word(0x8002)
    assert not is_jump_word(0x7E00)
