"""Run a shell command and print each chunk of its output after a separator line."""

from __future__ import annotations

import argparse
import subprocess
import sys
from collections.abc import Sequence
from typing import BinaryIO

SEPARATOR = b"\n----------------\n"

_CHUNK_SIZE = 32 * 1024


class Recorder:
    """A binary writer that marks the start of every chunk with a separator."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream

    def write(self, data: bytes) -> int:
        self.stream.write(SEPARATOR)
        written = self.stream.write(data)
        self.stream.flush()
        return len(data) if written is None else written


def run_command(command: str, stream: BinaryIO) -> int:
    """Run ``command`` with /bin/sh in its own process group; return its exit status.

    Standard output is copied chunk by chunk through a Recorder onto ``stream``;
    standard error is inherited.
    """
    recorder = Recorder(stream)
    with subprocess.Popen(
        ["/bin/sh", "-c", command],
        stdout=subprocess.PIPE,
        start_new_session=True,
    ) as proc:
        assert proc.stdout is not None
        for chunk in iter(lambda: proc.stdout.read1(_CHUNK_SIZE), b""):
            recorder.write(chunk)
        return proc.wait()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="logrecorder")
    parser.add_argument("-c", dest="command", default="", help="command")
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    out = getattr(sys.stdout, "buffer", sys.stdout)
    try:
        status = run_command(args.command, out)
    except OSError as exc:
        sys.stderr.write(f"command error: {exc}")
        return 0

    if status != 0:
        sys.stderr.write(f"command error: exit status {status}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())