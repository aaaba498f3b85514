"""Send an interrupt signal to the processes with the given pids."""

from __future__ import annotations

import os
import re
import signal
import sys
from collections.abc import Iterable, Sequence

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_pid(arg: str) -> int:
    """Return the pid in ``arg``; raise ValueError if it is not a number above 1."""
    pid = int(arg) if _INTEGER.fullmatch(arg) else 0
    if pid <= 1:
        raise ValueError(f"invalid pid: {arg}")
    return pid


def stop_processes(args: Iterable[str]) -> list[int]:
    """Interrupt each process in turn; return the pids signalled.

    Stops at the first invalid pid or failed signal by raising.
    """
    stopped = []
    for arg in args:
        pid = parse_pid(arg)
        os.kill(pid, signal.SIGINT)
        stopped.append(pid)
    return stopped


def main(argv: Sequence[str] | None = None) -> int:
    stop_processes(sys.argv[1:] if argv is None else argv)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())