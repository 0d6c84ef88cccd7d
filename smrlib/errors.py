# smrlib/errors.py
from __future__ import annotations

from typing import Optional

__all__ = [
    "SmrError",
    "OutputStreamUnavailable",
    "CigarError",
    "MalformedCigarOpcode",
    "ZeroLengthReadError",
]


class SmrError(Exception):
    """Base class for errors raised by smrlib."""


class OutputStreamUnavailable(SmrError, OSError):
    """
    An output file could not be opened, or is not open when a write is attempted.
    Fatal for the run; nothing is retried.
    """

    def __init__(self, kind: str, path: Optional[str], reason: str = "could not be opened for writing"):
        self.kind = kind
        self.path = path
        super().__init__(f"{kind} output file {path!r} {reason}")


class CigarError(SmrError, ValueError):
    """Packed CIGAR stream cannot be decoded."""


class MalformedCigarOpcode(CigarError):
    def __init__(self, opcode: int, index: int):
        self.opcode = opcode
        self.index = index
        super().__init__(f"CIGAR op #{index}: unknown opcode tag {opcode} (expected 0=M, 1=I, 2=D)")


class ZeroLengthReadError(SmrError, ValueError):
    """Query coverage requested for a read of length 0."""
