# tokenizer.py: split one source line into label, mnemonic and operands
import re
from typing import List, Optional

COMMENT = "#"
LABEL_END = ":"
DELIMITERS = " \t,\r\n"
NODE_MARK = "@"

_NODE_INDEX = re.compile(r"\s*([+-]?[0-9]+)")


class TokenLine:
    def __init__(self):
        self.label: Optional[str] = None
        self.mnemonic: Optional[str] = None
        self.operand0: Optional[str] = None
        self.operand1: Optional[str] = None
        self.extra: List[str] = []

    @property
    def is_code(self) -> bool:
        return self.mnemonic is not None

    def _push_word(self, word: str):
        if self.mnemonic is None:
            self.mnemonic = word
        elif self.operand0 is None:
            self.operand0 = word
        elif self.operand1 is None:
            self.operand1 = word
        else:
            self.extra.append(word)

    def __repr__(self):
        return (f"TokenLine(label={self.label!r}, mnemonic={self.mnemonic!r}, "
                f"operand0={self.operand0!r}, operand1={self.operand1!r}, extra={self.extra!r})")


def tokenize_line(text: str) -> TokenLine:
    """
    Scan left to right:
      ':' closes the current word as the label (first colon only)
      '#' closes the current word and drops the rest of the line
      whitespace, ',' and line endings close the current word
    Words fill mnemonic, operand0, operand1, then spill into `extra`.
    """
    tl = TokenLine()
    word: List[str] = []
    have_label = False

    for ch in text:
        if ch == LABEL_END and not have_label:
            name = "".join(word)
            if name:
                tl.label = name
            have_label = True
            word = []
        elif ch == COMMENT:
            break
        elif ch in DELIMITERS:
            if word:
                tl._push_word("".join(word))
            word = []
        else:
            word.append(ch)

    if word:
        tl._push_word("".join(word))
    return tl


def is_node_directive(text: str) -> bool:
    return text.startswith(NODE_MARK)


def parse_node_directive(text: str) -> Optional[int]:
    """Decimal node index following '@'; None when no digits follow."""
    m = _NODE_INDEX.match(text[len(NODE_MARK):])
    if m is None:
        return None
    return int(m.group(1))
