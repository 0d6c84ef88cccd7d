# smrlib/formats/cigar.py
from __future__ import annotations

import re
from enum import IntEnum
from typing import Iterable, Iterator, List, Protocol, Sequence

from ..errors import CigarError, MalformedCigarOpcode

__all__ = [
    "CigarOp",
    "pack_op",
    "unpack_op",
    "iter_ops",
    "cigar_from_string",
    "cigar_string",
    "ref_span",
    "read_span",
]

# Packed word layout: 4 low bits = opcode tag, 28 high bits = run length
_OP_MASK = 0xF
_LEN_SHIFT = 4
_MAX_RUN = (1 << 28) - 1


class CigarOp(IntEnum):
    MATCH = 0
    INSERTION = 1     # gap in reference; consumes read only
    DELETION = 2      # gap in read; consumes reference only

    @property
    def letter(self) -> str:
        return "MID"[self.value]

    @property
    def consumes_ref(self) -> bool:
        return self is not CigarOp.INSERTION

    @property
    def consumes_read(self) -> bool:
        return self is not CigarOp.DELETION


_LETTERS = {"M": CigarOp.MATCH, "I": CigarOp.INSERTION, "D": CigarOp.DELETION}


class HasReadCoords(Protocol):
    read_begin: int
    read_end: int
    cigar: Sequence[int]


def pack_op(op: CigarOp, length: int) -> int:
    if not 0 < length <= _MAX_RUN:
        raise CigarError(f"run length must be in 1..{_MAX_RUN}, got {length}")
    return (length << _LEN_SHIFT) | int(op)


def unpack_op(word: int) -> tuple[int, int]:
    """Split one packed word into its raw (tag, length); no validation."""
    return word & _OP_MASK, (word & 0xFFFFFFF0) >> _LEN_SHIFT


def iter_ops(cigar: Iterable[int], *, strict: bool = True) -> Iterator[tuple[CigarOp, int]]:
    """
    Lazily decode packed words into (CigarOp, run_length) pairs, in order.

    strict=True rejects any tag outside {0, 1, 2} with MalformedCigarOpcode.
    strict=False keeps the permissive legacy reading: every tag that is neither
    Match nor Insertion is taken as a Deletion.
    """
    for i, word in enumerate(cigar):
        tag, length = unpack_op(word)
        if tag == CigarOp.MATCH:
            op = CigarOp.MATCH
        elif tag == CigarOp.INSERTION:
            op = CigarOp.INSERTION
        elif tag == CigarOp.DELETION or not strict:
            op = CigarOp.DELETION
        else:
            raise MalformedCigarOpcode(tag, i)
        if length == 0:
            raise CigarError(f"CIGAR op #{i}: zero-length {op.letter} run")
        yield op, length


_CIGAR_TOKEN = re.compile(r"(\d+)([MIDS])")

def cigar_from_string(text: str) -> List[int]:
    """
    Pack a textual CIGAR such as '2S3M2I3M' into words.
    Soft clips are accepted at either end and dropped (they are implied by read_begin/read_end).
    """
    tokens = _CIGAR_TOKEN.findall(text)
    if "".join(n + c for n, c in tokens) != text:
        raise CigarError(f"unparseable CIGAR string {text!r}")
    out: List[int] = []
    for k, (num, letter) in enumerate(tokens):
        if letter == "S":
            if 0 < k < len(tokens) - 1:
                raise CigarError("soft clip allowed only at the ends of a CIGAR")
            continue
        out.append(pack_op(_LETTERS[letter], int(num)))
    if not out:
        raise CigarError(f"CIGAR {text!r} has no M/I/D operations")
    return out


def cigar_string(aln: HasReadCoords, read_length: int, *, strict: bool = True) -> str:
    """
    CIGAR text with soft clips for the unaligned read ends:
      '<read_begin>S' if read_begin != 0, the ops, then '<n>S' for the unaligned tail.
    """
    parts: List[str] = []
    if aln.read_begin != 0:
        parts.append(f"{aln.read_begin}S")
    for op, length in iter_ops(aln.cigar, strict=strict):
        parts.append(f"{length}{op.letter}")
    end_mask = read_length - aln.read_end - 1
    if end_mask > 0:
        parts.append(f"{end_mask}S")
    return "".join(parts)


def ref_span(cigar: Iterable[int], *, strict: bool = True) -> int:
    return sum(n for op, n in iter_ops(cigar, strict=strict) if op.consumes_ref)


def read_span(cigar: Iterable[int], *, strict: bool = True) -> int:
    return sum(n for op, n in iter_ops(cigar, strict=strict) if op.consumes_read)
