# core/observe.py: JSON-lines trace of compiler events
import json, time
from typing import Optional, Dict, Any, List


class TraceSink:
    """Appends compiler events as JSON lines to a file path or a list-like collector."""
    def __init__(self, path: Optional[str] = None, collector: Optional[list] = None):
        self.path = path
        self.collector = collector

    def emit(self, event: Dict[str, Any]):
        event.setdefault("ts", now_ts())
        if self.path:
            line = json.dumps(event, separators=(",", ":"))
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        elif self.collector is not None:
            self.collector.append(event)

    def slot(self, node: int, slot: int, line: int, word: int, mnemonic: str,
             label: Optional[str] = None, pending: Optional[str] = None):
        self.emit({
            "event": "slot",
            "node": node,
            "slot": slot,
            "line": line,
            "word": f"0x{word:04X}",
            "mnemonic": mnemonic,
            "label": label,
            "pending": pending,
        })

    def node(self, node: int, words: List[int], errors: int):
        self.emit({
            "event": "node",
            "node": node,
            "words": [f"0x{w:04X}" for w in words],
            "errors": errors,
        })


def now_ts() -> float:
    return time.time()
