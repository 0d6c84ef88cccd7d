# smrlib/formats/sam.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..config import OutputOptions
from ..metrics.identity import ensure_metrics
from ..models.alignment import Alignment, Read
from ..sequences.base import ReferenceStore, to_alphabet
from ..utils.sink import Sink, emit
from .cigar import cigar_string

__all__ = ["SamRecord", "header", "to_record", "unaligned_record", "encode_read", "encode"]

FLAG_REVERSE = 16
FLAG_UNMAPPED = 4
MAPQ_UNAVAILABLE = 255


@dataclass
class SamRecord:
    """The 11 mandatory SAM fields plus the AS/NM tags."""
    qname: str
    flag: int
    rname: str
    pos: int             # 1-based leftmost reference position
    mapq: int
    cigar: str
    rnext: str = "*"
    pnext: int = 0
    tlen: int = 0
    seq: str = "*"
    qual: str = "*"
    score: Optional[int] = None           # AS:i
    edit_distance: Optional[int] = None   # NM:i

    def format(self) -> str:
        fields = [
            self.qname, str(self.flag), self.rname, str(self.pos), str(self.mapq),
            self.cigar, self.rnext, str(self.pnext), str(self.tlen), self.seq, self.qual,
        ]
        if self.score is not None:
            fields.append(f"AS:i:{self.score}")
        if self.edit_distance is not None:
            fields.append(f"NM:i:{self.edit_distance}")
        return "\t".join(fields) + "\n"


def header(refs: ReferenceStore) -> str:
    lines = ["@HD\tVN:1.0\tSO:unsorted\n"]
    for ref in refs:
        lines.append(f"@SQ\tSN:{ref.id}\tLN:{len(ref.sequence)}\n")
    return "".join(lines)


def to_record(read: Read, aln: Alignment, refs: ReferenceStore, options: Optional[OutputOptions] = None) -> SamRecord:
    """
    SEQ is the read as stored: for '-' alignments the caller already holds the
    reverse-complemented bases. Only QUAL is reversed here.
    """
    strict = options.strict_cigar if options is not None else True
    ref = refs.get(aln.ref_seq_id)
    m = ensure_metrics(aln, ref.sequence, read.sequence, strict=strict)
    if read.quality:
        qual = read.quality if aln.forward else read.quality[::-1]
    else:
        qual = "*"
    return SamRecord(
        qname=read.id,
        flag=0 if aln.forward else FLAG_REVERSE,
        rname=ref.id,
        pos=aln.ref_begin + 1,
        mapq=MAPQ_UNAVAILABLE,
        cigar=cigar_string(aln, read.length, strict=strict),
        seq=to_alphabet(read.sequence),
        qual=qual,
        score=aln.score,
        edit_distance=m.edit_distance,
    )


def unaligned_record(read: Read) -> SamRecord:
    return SamRecord(qname=read.id, flag=FLAG_UNMAPPED, rname="*", pos=0, mapq=0, cigar="*")


def encode_read(read: Read, refs: ReferenceStore, options: OutputOptions) -> str:
    if not read.alignments:
        return unaligned_record(read).format() if options.print_all_reads else ""
    return "".join(to_record(read, aln, refs, options).format() for aln in read.alignments)


def encode(
    reads: Iterable[Read],
    refs: ReferenceStore,
    *,
    options: OutputOptions,
    sink: Sink = None,
    with_header: bool = True,
) -> str:
    """Encode reads to SAM. Returns emitted text; also writes to sink if provided."""
    parts: List[str] = [header(refs)] if with_header else []
    parts.extend(encode_read(r, refs, options) for r in reads)
    return emit("".join(parts), sink)
