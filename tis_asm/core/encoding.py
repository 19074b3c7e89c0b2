# encoding.py: 16-bit word helpers, field masks, 11-bit two's complement
WORD_BITS = 16
BYTE_PER_WORD = 2
WORD_MASK = (1 << WORD_BITS) - 1

SLOTS_PER_NODE = 16
NODE_MASK = 0xFF

# A-field: destination register, bits [14:12]
A_SHIFT = 12
A_MASK = 0x7

# B-field: source operand, bits [11:0]
B_BITS = 12
B_MASK = (1 << B_BITS) - 1
B_REG_FLAG = 0x800       # bit 11: register (1) / immediate (0)
B_REG_SHIFT = 8          # register code in bits [10:8]
B_REG_MASK = 0x700

# Immediate literals live in bits [10:0]
IMM_BITS = 11
IMM_MASK = (1 << IMM_BITS) - 1
IMM_SIGN = 1 << (IMM_BITS - 1)
MIN_IMM = -(1 << (IMM_BITS - 1))
MAX_IMM = (1 << (IMM_BITS - 1)) - 1

# Jump target: slot index in bits [9:6]
TARGET_SHIFT = 6
TARGET_MASK = 0xF

# Top three bits 110 mark a jump-class word
CLASS_MASK = 0xE000
JUMP_CLASS = 0xC000

IDLE_WORD = 0xC000  # JMP 0


def to_tc11(val: int) -> int:
    """Truncate to 11-bit two's complement (no clamping, out-of-range values wrap)."""
    return val & IMM_MASK


def from_tc11(bits: int) -> int:
    bits &= IMM_MASK
    if bits & IMM_SIGN:
        return -(((~bits) & IMM_MASK) + 1)
    else:
        return bits


def in_imm_range(val: int) -> bool:
    return MIN_IMM <= val <= MAX_IMM


def word_to_bytes(bits: int) -> bytes:
    return (bits & WORD_MASK).to_bytes(BYTE_PER_WORD, byteorder="little", signed=False)


def word_to_hex(bits: int) -> str:
    """Render a word as its little-endian bytes in lowercase hex, e.g. 0x1005 -> '0510'."""
    return word_to_bytes(bits).hex()


def set_target(bits: int, slot: int) -> int:
    return (bits & ~(TARGET_MASK << TARGET_SHIFT) & WORD_MASK) | ((slot & TARGET_MASK) << TARGET_SHIFT)


def get_target(bits: int) -> int:
    return (bits >> TARGET_SHIFT) & TARGET_MASK
