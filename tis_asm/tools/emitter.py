# emitter.py: hex text stream and slot listing for assembled nodes
from typing import Iterable, List

from ..core.encoding import NODE_MASK, word_to_hex, get_target
from ..core.opcodes import is_jump_word
from .assembler import NodeProgram

WORDS_PER_ROW = 4


def format_node(node: NodeProgram) -> str:
    """
    Blank line, node index as two hex digits, then the 16 words four per row.
    Each word prints low byte first: 0x1005 -> '0510'.
    """
    out = [f"\n{node.index & NODE_MASK:02x}\n"]
    for j, word in enumerate(node.words):
        out.append(word_to_hex(word))
        out.append("\n" if (j % WORDS_PER_ROW) == WORDS_PER_ROW - 1 else " ")
    return "".join(out)


def format_program(nodes: Iterable[NodeProgram]) -> str:
    return "".join(format_node(n) for n in nodes)


def format_listing(nodes: Iterable[NodeProgram]) -> str:
    lines: List[str] = []
    for node in nodes:
        lines.append(f"@{node.index}")
        for j, slot in enumerate(node.slots):
            names = ",".join(node.labels[j])
            where = f"{slot.line:5d}" if slot.line is not None else "    -"
            text = slot.source.strip() if slot.source else "(idle)"
            if slot.line is not None and is_jump_word(slot.word):
                text += f"  -> {get_target(slot.word):02d}"
            lines.append(f"  {j:02d}: 0x{slot.word:04X}  {where}  {names:<12} {text}".rstrip())
    return "\n".join(lines) + ("\n" if lines else "")
