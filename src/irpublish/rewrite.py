# rewrite.py
# In-place, length-preserving line rewrites for generated files.
#
# Every rewritten line keeps its exact byte length: the new text is padded
# with spaces up to the old length and written over the old bytes at the
# same offset. Nothing before or after the line moves.

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Tuple

from .runner import RewriteError, StampError


INCLUDE_LOCAL = b'#include "'
INCLUDE_SYSTEM = b"#include <"


def _split_eol(raw: bytes) -> Tuple[bytes, bytes]:
    """Split a raw line into (content, terminator)."""
    if raw.endswith(b"\r\n"):
        return raw[:-2], b"\r\n"
    if raw.endswith(b"\n"):
        return raw[:-1], b"\n"
    return raw, b""


def _overwrite(f: BinaryIO, offset: int, raw: bytes, new: bytes) -> bool:
    """
    Replace the line that starts at `offset` with `new`, padded to length.

    Returns False (and writes nothing) if `new` does not fit.
    """
    content, eol = _split_eol(raw)
    if len(new) > len(content):
        return False
    f.seek(offset)
    f.write(new + b" " * (len(content) - len(new)) + eol)
    return True


def rewrite_includes(path: str | Path, marker: str = "/jule/") -> int:
    """
    Strip the build-root prefix from the local include block of a file.

    `#include "<anything><marker><rest>` becomes `#include "<rest>`, padded
    with trailing spaces. System includes and blank lines are skipped; the
    first other line after the block ends the scan.

    Returns:
        Number of lines rewritten.

    Raises:
        RewriteError: a local include does not contain `marker`.
    """
    needle = marker.encode("utf-8")
    rewritten = 0
    in_block = False
    lineno = 0

    with open(path, "r+b") as f:
        while True:
            offset = f.tell()
            raw = f.readline()
            if not raw:
                break
            lineno += 1

            text = raw.rstrip()
            if not text:
                continue
            if text.startswith(INCLUDE_SYSTEM):
                continue
            if not text.startswith(INCLUDE_LOCAL):
                if in_block:
                    break
                continue

            in_block = True
            pos = text.find(needle)
            if pos < 0:
                raise RewriteError(
                    f"include path has no {marker!r} segment",
                    file=str(path),
                    line=lineno,
                )
            new = INCLUDE_LOCAL + text[pos + len(needle):]
            if not _overwrite(f, offset, raw, new):
                raise RewriteError(
                    "rewritten include is longer than the original line",
                    file=str(path),
                    line=lineno,
                )
            # position is now at the start of the next line
            rewritten += 1

    return rewritten


def format_stamp(prefix: str, commit: str, commit_url: str) -> str:
    """`IR version: [<short>](<url><full hash>)`"""
    return f"{prefix}{commit[:10]}]({commit_url}{commit})"


def stamp_version(path: str | Path, prefix: str, replacement: str) -> None:
    """
    Replace the first line starting with `prefix` by `replacement`.

    Only that line changes; the scan stops after it.

    Raises:
        StampError: no such line, or `replacement` is longer than it.
    """
    head = prefix.encode("utf-8")
    new = replacement.encode("utf-8")

    with open(path, "r+b") as f:
        while True:
            offset = f.tell()
            raw = f.readline()
            if not raw:
                break
            if not raw.startswith(head):
                continue
            if not _overwrite(f, offset, raw, new):
                raise StampError(
                    "stamp is longer than the existing version line",
                    file=str(path),
                    old=raw.rstrip().decode("utf-8", errors="replace"),
                    new=replacement,
                )
            return

    raise StampError(f"no line starting with {prefix!r}", file=str(path))
