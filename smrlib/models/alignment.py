from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Optional, Literal, NamedTuple, Union, List

Strand = Literal["+", "-"]


class DerivedMetrics(NamedTuple):
    mismatches: int
    gaps: int
    identity: int     # identical Match columns

    @property
    def aligned_columns(self) -> int:
        return self.identity + self.mismatches

    @property
    def percent_identity(self) -> float:
        n = self.identity + self.mismatches
        if n == 0:
            return 0.0
        return round(self.identity / n * 100, 3)

    @property
    def edit_distance(self) -> int:
        return self.mismatches + self.gaps


@dataclass(slots=True)
class Alignment:
    """
    One alignment of a read against a reference, as produced by the search engine.

    Conventions:
      - Coordinates are 0-based, fully-closed [begin, end] for BOTH read and reference.
      - `cigar` is a list of packed words (see smrlib.formats.cigar): walking it from
        (ref_begin, read_begin) lands on (ref_end + 1, read_end + 1).
      - strand '+' means the read aligned forward, '-' means its reverse complement aligned.

    Statistics:
      - `e_value` and `bit_score` are computed upstream and carried verbatim. A str
        e_value is printed as-is by the encoders; a float is formatted.
      - `metrics` caches the DerivedMetrics once computed (see smrlib.metrics.identity).
    """

    ref_seq_id: int
    read_begin: int
    read_end: int
    ref_begin: int
    ref_end: int
    score: int
    strand: Strand = "+"
    cigar: List[int] = field(default_factory=list)

    e_value: Optional[Union[float, str]] = None
    bit_score: Optional[float] = None

    metrics: Optional[DerivedMetrics] = None

    # ---------- Validation ----------

    def __post_init__(self) -> None:
        if self.read_begin < 0 or self.ref_begin < 0:
            raise ValueError("Coordinates are 0-based; begins must be ≥ 0.")
        if self.read_end < self.read_begin:
            raise ValueError("read_end must be ≥ read_begin (fully-closed).")
        if self.ref_end < self.ref_begin:
            raise ValueError("ref_end must be ≥ ref_begin (fully-closed).")
        if self.strand not in ("+", "-"):
            raise ValueError("strand must be '+' or '-'.")

    # ---------- Helpers ----------

    @property
    def forward(self) -> bool:
        return self.strand == "+"

    @property
    def length(self) -> int:
        """Alignment length as reported in tabular output (read span)."""
        return self.read_end - self.read_begin + 1

    @property
    def ref_len_1c(self) -> int:
        return self.ref_end - self.ref_begin + 1

    def validate_cigar_span(self, *, strict: bool = True) -> None:
        """
        Walk the cigar from (ref_begin, read_begin) and check it lands on
        (ref_end + 1, read_end + 1). Raises ValueError on mismatch.
        """
        from ..formats.cigar import iter_ops
        if not self.cigar:
            raise ValueError("Alignment has no CIGAR operations.")
        ref, read = self.ref_begin, self.read_begin
        for op, n in iter_ops(self.cigar, strict=strict):
            if op.consumes_ref:
                ref += n
            if op.consumes_read:
                read += n
        errs = []
        if ref != self.ref_end + 1:
            errs.append(f"reference walk ends at {ref}, expected {self.ref_end + 1}")
        if read != self.read_end + 1:
            errs.append(f"read walk ends at {read}, expected {self.read_end + 1}")
        if errs:
            raise ValueError("Alignment/CIGAR mismatch: " + "; ".join(errs))

    def __repr__(self) -> str:
        import json
        return json.dumps(asdict(self), indent=4)


def first_token(header: str) -> str:
    """Header text up to the first space (leading '>' or '@' dropped)."""
    if header[:1] in (">", "@"):
        header = header[1:]
    parts = header.split(None, 1)
    return parts[0] if parts else ""


@dataclass(slots=True)
class Read:
    header: str
    sequence: str
    quality: Optional[str] = None
    alignments: List[Alignment] = field(default_factory=list)

    @property
    def id(self) -> str:
        return first_token(self.header)

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def aligned(self) -> bool:
        return bool(self.alignments)
