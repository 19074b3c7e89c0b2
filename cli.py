# cli.py: command-line front end for the grid-node assembler
# Compiles a multi-node source file to the hex word stream; diagnostics go to stderr.

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, List


# Local module imports
from tis_asm.tools.assembler import GridAssembler, OVERFLOW_POLICIES, OVERFLOW_WRAP
from tis_asm.tools.emitter import format_program, format_listing
from tis_asm.core.observe import TraceSink

log = logging.getLogger("tis_asm.cli")


# -----------------------------------------------------------------------------
# Utilities
# -----------------------------------------------------------------------------

def read_lines(path: Path) -> List[str]:
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return f.readlines()


def _setup_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="[%(levelname)s] %(message)s")


# -----------------------------------------------------------------------------
# Command handler
# -----------------------------------------------------------------------------

def cmd_compile(args: argparse.Namespace) -> int:
    src = Path(args.source)
    try:
        lines = read_lines(src)
    except OSError as e:
        print(f"Failed to open file {src} for compiling: {e.strerror or e}", file=sys.stderr)
        return 1

    trace = None
    if args.trace_file:
        Path(args.trace_file).write_text("", encoding="utf-8")
        trace = TraceSink(path=args.trace_file)

    asm = GridAssembler(overflow=args.overflow, trace=trace)
    nodes, diag = asm.assemble(lines)

    stream = format_program(nodes)
    if args.out:
        out = Path(args.out)
        out.write_text(stream, encoding="utf-8")
        log.info("Compiled '%s' → '%s' with %d node(s)", src.name, out, len(nodes))
    else:
        sys.stdout.write(stream)

    if args.listing:
        Path(args.listing).write_text(format_listing(nodes), encoding="utf-8")
        log.info("Listing written to '%s'", args.listing)

    for d in diag:
        print(str(d), file=sys.stderr)

    if diag.failed:
        print("\nCompilation Failed", file=sys.stderr)
        return 1
    return 0


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Grid-node assembler: source → 16 hex words per node")
    p.add_argument("source", help="Assembly source file")
    p.add_argument("-o", "--out", help="Write the hex stream to this file instead of stdout")
    p.add_argument("--listing", help="Emit per-slot listing to file")
    p.add_argument("--trace-file", help="Write JSONL compiler trace to file")
    p.add_argument("--overflow", choices=OVERFLOW_POLICIES, default=OVERFLOW_WRAP,
                   help="Handling of code lines past the 16th in a node (default: wrap)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    return cmd_compile(args)


if __name__ == "__main__":
    sys.exit(main())
