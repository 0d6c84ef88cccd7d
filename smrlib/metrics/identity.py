# smrlib/metrics/identity.py
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..errors import ZeroLengthReadError
from ..formats.cigar import CigarOp, iter_ops
from ..models.alignment import DerivedMetrics
from ..sequences.base import to_alphabet


class HasCigar(Protocol):
    ref_begin: int
    read_begin: int
    read_end: int
    cigar: Sequence[int]
    metrics: Optional[DerivedMetrics]


def compute_metrics(aln: HasCigar, ref_seq: str, read_seq: str, *, strict: bool = True) -> DerivedMetrics:
    """
    One pass over the decoded CIGAR collecting (mismatches, gaps, identity).

      Match      compare run_length pairs in the {A,C,G,T,N} alphabet; both cursors advance
      Insertion  read cursor advances, gaps += run_length
      Deletion   reference cursor advances, gaps += run_length
    """
    ref = to_alphabet(ref_seq)
    read = to_alphabet(read_seq)
    q = aln.ref_begin
    p = aln.read_begin
    mismatches = gaps = identity = 0

    for op, n in iter_ops(aln.cigar, strict=strict):
        if op is CigarOp.MATCH:
            if q + n > len(ref) or p + n > len(read):
                raise ValueError(
                    f"Match run of {n} at ref={q}, read={p} runs past the sequence ends "
                    f"(ref len {len(ref)}, read len {len(read)})"
                )
            for a, b in zip(ref[q:q + n], read[p:p + n]):
                if a == b:
                    identity += 1
                else:
                    mismatches += 1
            q += n
            p += n
        elif op is CigarOp.INSERTION:
            p += n
            gaps += n
        else:
            q += n
            gaps += n

    return DerivedMetrics(mismatches=mismatches, gaps=gaps, identity=identity)


def ensure_metrics(aln: HasCigar, ref_seq: str, read_seq: str, *, strict: bool = True) -> DerivedMetrics:
    """Compute once and cache on aln.metrics; later calls return the cached value."""
    if aln.metrics is None:
        aln.metrics = compute_metrics(aln, ref_seq, read_seq, strict=strict)
    return aln.metrics


def query_coverage(aln: HasCigar, read_length: int) -> float:
    """Percent of the read covered by the alignment, rounded to 3 decimals."""
    if read_length <= 0:
        raise ZeroLengthReadError("query coverage is undefined for a read of length 0")
    return round(100.0 * abs(aln.read_end - aln.read_begin + 1) / read_length, 3)
