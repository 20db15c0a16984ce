# sketch_map/utils.py
from __future__ import annotations

"""
Helpers shared by the pipeline and the CLI.

Timing strings, span splitting for the threaded blur passes, and the
print-based log helpers. Log lines go to sys.stdout unless the calling
thread has opened a capture_output() block, in which case they collect in
that block's buffer. Folder jobs rely on this to keep each file's lines
together without touching the process-wide sys.stdout.
"""

import io
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, TextIO, Tuple

_sink = threading.local()


# Durations


def format_seconds_compact(seconds: float) -> str:
    """'12.3ms' under a second, '4.210s' under a minute, else '2m 5.0s'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    whole_min = int(seconds // 60)
    return f"{whole_min}m {seconds - 60 * whole_min:.1f}s"


# Work splitting


def split_span_into_parts(length: int, parts: int) -> List[Tuple[int, int]]:
    """Cut [0, length) into at most `parts` contiguous (start, end) spans."""
    parts = max(1, int(parts))
    step = max(1, -(-length // parts))
    return [(lo, min(lo + step, length)) for lo in range(0, length, step)]


# Output routing


def enable_line_buffered_stdout() -> None:
    """Ask stdout to flush per line so progress shows up live."""
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if not callable(reconfigure):
        return
    try:
        reconfigure(line_buffering=True, write_through=True)
    except (AttributeError, ValueError, OSError):
        pass


@contextmanager
def capture_output() -> Iterator[io.StringIO]:
    """
    Route this thread's log lines into a fresh buffer for the block.

    Other threads keep writing wherever they were writing. Blocks nest; the
    previous target is restored on exit.
    """
    buf = io.StringIO()
    previous = getattr(_sink, "stream", None)
    _sink.stream = buf
    try:
        yield buf
    finally:
        _sink.stream = previous


def _out() -> TextIO:
    stream = getattr(_sink, "stream", None)
    return stream if stream is not None else sys.stdout


# Log lines


def _show(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """'Name: value' pieces joined by sep. Bools read on/off, ints get commas."""
    return sep.join(f"{name}{eq}{_show(value)}" for name, value in pairs)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """One '[section] Key: value  ...' line, on the debug log when debug is set."""
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    if debug:
        debug_log(line)
    else:
        log(line)


def print_banner(title: str) -> None:
    print(f"\n=== {title} ===", file=_out(), flush=True)


def log(message: str) -> None:
    print(message, file=_out(), flush=True)


def debug_log(message: str) -> None:
    print(f"[debug] {message}", file=_out(), flush=True)


def warn(message: str) -> None:
    print(f"[warn] {message}", file=_out(), flush=True)


def error(message: str) -> None:
    """Errors always go to stderr, captured or not."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "split_span_into_parts",
    "enable_line_buffered_stdout",
    "capture_output",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
