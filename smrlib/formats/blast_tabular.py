# smrlib/formats/blast_tabular.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union

from ..config import OutputOptions
from ..metrics.identity import ensure_metrics, query_coverage
from ..models.alignment import Alignment, Read
from ..sequences.base import ReferenceStore
from ..utils.sink import Sink, Source, emit, iter_lines
from .cigar import cigar_string

logger = logging.getLogger(__name__)

__all__ = [
    "TabularRecord",
    "format_evalue",
    "format_bitscore",
    "encode_alignment",
    "encode_null",
    "encode_read",
    "encode",
    "decode",
]

N_FIXED = 12

# Placeholders used by the null record of an unaligned read
_NULL_COLUMN = {"cigar": "*", "qcov": "0", "qstrand": "*"}


# -------------------------
# Public record structure
# -------------------------

@dataclass
class TabularRecord:
    # BLAST m8 columns
    qseqid: str
    sseqid: str
    pident: float
    length: int
    mismatch: int
    gaps: int
    qstart: int
    qend: int
    sstart: int
    send: int
    evalue: str          # kept as text: printed verbatim, may be '0'
    bitscore: int

    # Optional trailing columns, by name, in file order
    extras: dict[str, str] = field(default_factory=dict)

    @property
    def aligned(self) -> bool:
        return self.sseqid != "*"


# -------------------------
# Field formatting
# -------------------------

def format_evalue(e_value: Optional[Union[float, str]]) -> str:
    """str is printed verbatim; numbers get 3 significant digits, as the legacy stream did."""
    if e_value is None:
        return "0"
    if isinstance(e_value, str):
        return e_value
    return f"{e_value:.3g}"


def format_bitscore(bit_score: Optional[float]) -> str:
    return str(int(bit_score)) if bit_score is not None else "0"


def _fmt3(x: float) -> str:
    return f"{x:.3f}"


# -------------------------
# Encoders
# -------------------------

def encode_alignment(read: Read, aln: Alignment, refs: ReferenceStore, options: OutputOptions) -> str:
    ref = refs.get(aln.ref_seq_id)
    m = ensure_metrics(aln, ref.sequence, read.sequence, strict=options.strict_cigar)
    fields = [
        read.id,
        ref.id,
        _fmt3(m.percent_identity),
        str(aln.length),
        str(m.mismatches),
        str(m.gaps),
        str(aln.read_begin + 1),
        str(aln.read_end + 1),
        str(aln.ref_begin + 1),
        str(aln.ref_end + 1),
        format_evalue(aln.e_value),
        format_bitscore(aln.bit_score),
    ]
    for col in options.tabular_columns:
        if col == "cigar":
            fields.append(cigar_string(aln, read.length, strict=options.strict_cigar))
        elif col == "qcov":
            fields.append(_fmt3(query_coverage(aln, read.length)))
        elif col == "qstrand":
            fields.append(aln.strand)
    return "\t".join(fields) + "\n"


def encode_null(read: Read, options: OutputOptions) -> str:
    fields = [read.id, "*"] + ["0"] * (N_FIXED - 2)
    fields.extend(_NULL_COLUMN[col] for col in options.tabular_columns)
    return "\t".join(fields) + "\n"


def encode_read(read: Read, refs: ReferenceStore, options: OutputOptions) -> str:
    """All lines for one read: one per alignment, or a single null line if enabled."""
    if not read.alignments:
        return encode_null(read, options) if options.print_all_reads else ""
    return "".join(encode_alignment(read, aln, refs, options) for aln in read.alignments)


def encode(
    reads: Iterable[Read],
    refs: ReferenceStore,
    *,
    options: OutputOptions,
    sink: Sink = None,
) -> str:
    """
    Encode reads to BLAST tabular (m8 + optional columns).
    Returns emitted text; also writes to sink if provided.
    """
    text = "".join(encode_read(r, refs, options) for r in reads)
    return emit(text, sink)


# -------------------------
# Decoder
# -------------------------

def _parse_line(ln: str, columns: tuple[str, ...]) -> Optional[TabularRecord]:
    s = ln.rstrip("\r\n")
    if not s or s.lstrip().startswith("#"):
        return None
    p = s.split("\t")
    if len(p) < N_FIXED:
        logger.debug("skipping short tabular line (%d fields)", len(p))
        return None
    extras = {}
    for i, value in enumerate(p[N_FIXED:]):
        name = columns[i] if i < len(columns) else f"col{N_FIXED + i + 1}"
        extras[name] = value
    return TabularRecord(
        qseqid=p[0],
        sseqid=p[1],
        pident=float(p[2]),
        length=int(p[3]),
        mismatch=int(p[4]),
        gaps=int(p[5]),
        qstart=int(p[6]),
        qend=int(p[7]),
        sstart=int(p[8]),
        send=int(p[9]),
        evalue=p[10],
        bitscore=int(p[11]),
        extras=extras,
    )


def decode(source: Source, *, columns: Iterable[str] = ()) -> Iterator[TabularRecord]:
    """
    Stream-decode tabular text into TabularRecord.
    `columns` names the optional trailing columns; unnamed ones become 'col13', 'col14', ...
    """
    cols = tuple(columns)
    for ln in iter_lines(source):
        rec = _parse_line(ln, cols)
        if rec is not None:
            yield rec
