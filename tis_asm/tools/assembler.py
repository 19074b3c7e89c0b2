# assembler.py: per-node two-pass assembler and the multi-node batch driver
import logging
from typing import Iterable, List, Optional, Tuple, Union

from ..core.diagnostics import DiagnosticLog, SourceLoc, SYNTAX, LABEL
from ..core.encoding import SLOTS_PER_NODE, IDLE_WORD, set_target
from ..core.opcodes import encode_instruction, is_jump_word
from ..core.observe import TraceSink
from .tokenizer import TokenLine, tokenize_line, is_node_directive, parse_node_directive

log = logging.getLogger(__name__)

OVERFLOW_WRAP = "wrap"   # 17th code line wraps to slot 0 and overwrites it
OVERFLOW_DROP = "drop"   # lines past the 16th are discarded
OVERFLOW_POLICIES = (OVERFLOW_WRAP, OVERFLOW_DROP)


class ResolvedSlot:
    def __init__(self, word: int, line: Optional[int] = None, source: str = ""):
        self.word   = word
        self.line   = line
        self.source = source

    def __repr__(self):
        return f"ResolvedSlot(word=0x{self.word:04X}, line={self.line})"


class PendingJump:
    """Jump-class word whose target bits wait for the node's label table."""
    def __init__(self, word: int, label: str, line: int, source: str = ""):
        self.word   = word
        self.label  = label
        self.line   = line
        self.source = source

    def resolve(self, target: int) -> ResolvedSlot:
        return ResolvedSlot(set_target(self.word, target), self.line, self.source)

    def __repr__(self):
        return f"PendingJump(word=0x{self.word:04X}, label={self.label!r}, line={self.line})"


Slot = Union[ResolvedSlot, PendingJump]


class NodeProgram:
    """Sixteen instruction slots and the label table of one node."""

    def __init__(self, index: int, diag: DiagnosticLog, overflow: str = OVERFLOW_WRAP,
                 trace: Optional[TraceSink] = None):
        self.index = index
        self.diag = diag
        self.overflow = overflow
        self.trace = trace
        self.slots: List[Slot] = [ResolvedSlot(IDLE_WORD) for _ in range(SLOTS_PER_NODE)]
        self.labels: List[List[str]] = [[] for _ in range(SLOTS_PER_NODE)]
        self.code_lines = 0
        self.resolved = False
        self.diag_start = len(diag)

    # ---------- helpers ----------
    def _next_slot(self) -> Optional[int]:
        if self.code_lines < SLOTS_PER_NODE:
            return self.code_lines
        if self.overflow == OVERFLOW_WRAP:
            return self.code_lines % SLOTS_PER_NODE
        return None

    def find_label(self, name: str) -> Optional[int]:
        # slot order, lowest index wins
        for j, names in enumerate(self.labels):
            if name in names:
                return j
        return None

    @property
    def words(self) -> List[int]:
        return [s.word for s in self.slots]

    @property
    def pending(self) -> List[PendingJump]:
        return [s for s in self.slots if isinstance(s, PendingJump)]

    # ---------- pass 1 ----------
    def add_line(self, lineno: int, tl: TokenLine, source: str = ""):
        loc = SourceLoc(self.index, lineno)
        for _ in tl.extra:
            self.diag.report(SYNTAX, loc, "Too many arguments.")

        slot = self._next_slot()
        if tl.label is not None and slot is not None:
            self.labels[slot].append(tl.label)

        if not tl.is_code:
            return

        if self.code_lines >= SLOTS_PER_NODE:
            self.diag.report(SYNTAX, loc, "Too many lines of code.")
            if slot is None:
                self.code_lines += 1
                return

        word = encode_instruction(tl.mnemonic, tl.operand0, tl.operand1, self.diag, loc)
        if is_jump_word(word):
            item: Slot = PendingJump(word, tl.operand0 or "", lineno, source)
        else:
            item = ResolvedSlot(word, lineno, source)
        self.slots[slot] = item
        self.code_lines += 1

        if self.trace:
            self.trace.slot(self.index, slot, lineno, word, tl.mnemonic, label=tl.label,
                            pending=item.label if isinstance(item, PendingJump) else None)

    # ---------- pass 2 ----------
    def resolve(self):
        for i, s in enumerate(self.slots):
            if not isinstance(s, PendingJump):
                continue
            target = self.find_label(s.label)
            if target is None:
                loc = SourceLoc(self.index, s.line)
                if s.label:
                    self.diag.report(LABEL, loc, f"Label {s.label} not found.")
                else:
                    self.diag.report(LABEL, loc, "Jump has no target label.")
                target = 0
            self.slots[i] = s.resolve(target)
        self.resolved = True

    def __repr__(self):
        return f"NodeProgram(index={self.index}, code_lines={self.code_lines})"


class GridAssembler:
    """
    Streams source lines; '@N' starts node N and closes the previous one.

    Lines ahead of the first directive are encoded so their errors surface,
    but they belong to no node and are never emitted.
    """

    def __init__(self, overflow: str = OVERFLOW_WRAP, trace: Optional[TraceSink] = None):
        if overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"Unknown overflow policy: {overflow!r} (expected one of {OVERFLOW_POLICIES})")
        self.overflow = overflow
        self.trace = trace
        self.diag = DiagnosticLog()
        self.nodes: List[NodeProgram] = []
        self.current: Optional[NodeProgram] = None
        self.preamble = NodeProgram(0, self.diag, overflow)
        self.lineno = 0

    def _finalize(self):
        node = self.current
        if node is None:
            return
        node.resolve()
        self.nodes.append(node)
        if self.trace:
            self.trace.node(node.index, node.words, len(self.diag) - node.diag_start)
        log.debug("node %d: %d code line(s)", node.index, node.code_lines)
        self.current = None

    def feed(self, raw: str):
        self.lineno += 1
        if is_node_directive(raw):
            self._finalize()
            start = len(self.diag)
            index = parse_node_directive(raw)
            if index is None:
                self.diag.report(SYNTAX, SourceLoc(0, self.lineno),
                                 f"Node directive {raw.strip()} has no index.")
                index = 0
            self.current = NodeProgram(index, self.diag, self.overflow, self.trace)
            self.current.diag_start = start
            return
        target = self.current if self.current is not None else self.preamble
        target.add_line(self.lineno, tokenize_line(raw), raw.rstrip("\r\n"))

    def finish(self) -> List[NodeProgram]:
        self._finalize()
        if self.preamble.code_lines:
            log.warning("%d code line(s) before the first node directive were ignored",
                        self.preamble.code_lines)
        return self.nodes

    def assemble(self, lines: Iterable[str]) -> Tuple[List[NodeProgram], DiagnosticLog]:
        for raw in lines:
            self.feed(raw)
        return self.finish(), self.diag


def assemble_lines(lines: Iterable[str], overflow: str = OVERFLOW_WRAP,
                   trace: Optional[TraceSink] = None) -> Tuple[List[NodeProgram], DiagnosticLog]:
    return GridAssembler(overflow, trace).assemble(lines)


def assemble_text(text: str, overflow: str = OVERFLOW_WRAP,
                  trace: Optional[TraceSink] = None) -> Tuple[List[NodeProgram], DiagnosticLog]:
    return assemble_lines(text.splitlines(keepends=True), overflow, trace)
