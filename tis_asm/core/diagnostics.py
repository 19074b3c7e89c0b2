# diagnostics.py: compile errors collected as data instead of raised
from typing import List, Optional

SYNTAX  = "syntax"    # too many arguments, too many lines, bad node directive
OPERAND = "operand"   # unknown register, literal out of range
OPCODE  = "opcode"    # unknown mnemonic
LABEL   = "label"     # jump to a name missing from the node's label table

KINDS = (SYNTAX, OPERAND, OPCODE, LABEL)


class SourceLoc:
    """Node index and 1-based physical source line an error is reported against."""
    def __init__(self, node: int = 0, line: Optional[int] = None):
        self.node = node
        self.line = line

    def __repr__(self):
        return f"SourceLoc(node={self.node}, line={self.line})"

    def __str__(self):
        if self.line is None:
            return f"Node {self.node}"
        return f"Node {self.node}, line {self.line}"


class Diagnostic:
    def __init__(self, kind: str, loc: SourceLoc, message: str):
        if kind not in KINDS:
            raise ValueError(f"Unknown diagnostic kind: {kind}")
        self.kind = kind
        self.node = loc.node
        self.line = loc.line
        self.message = message

    def __repr__(self):
        return f"Diagnostic(kind={self.kind}, node={self.node}, line={self.line}, message={self.message!r})"

    def __str__(self):
        return f"{SourceLoc(self.node, self.line)}: {self.message}"


class DiagnosticLog:
    """Accumulates every diagnostic of a compile run; `failed` is the final verdict."""
    def __init__(self):
        self.items: List[Diagnostic] = []

    def report(self, kind: str, loc: SourceLoc, message: str) -> Diagnostic:
        diag = Diagnostic(kind, loc, message)
        self.items.append(diag)
        return diag

    @property
    def failed(self) -> bool:
        return bool(self.items)

    def of_kind(self, kind: str) -> List[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
