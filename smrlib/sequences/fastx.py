# smrlib/sequences/fastx.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional

from .base import ListReferenceStore

__all__ = ["ReadSpan", "FastxRecord", "scan_fastx", "load_references"]


class ReadSpan(NamedTuple):
    """Half-open byte range [start, end) of one record, terminator included."""
    start: int
    end: int


@dataclass(slots=True)
class FastxRecord:
    span: ReadSpan
    header: str
    sequence: str
    quality: Optional[str] = None


def _lines(buf: bytes) -> Iterator[tuple[int, int, bytes]]:
    """Yield (line_start, line_end_incl_terminator, stripped_line)."""
    pos = 0
    n = len(buf)
    while pos < n:
        nl = buf.find(b"\n", pos)
        end = n if nl == -1 else nl + 1
        yield pos, end, buf[pos:end].rstrip(b"\r\n")
        pos = end


def scan_fastx(buf: bytes) -> List[FastxRecord]:
    """
    Split a FASTA or FASTQ buffer into records, keeping exact byte spans.

    FASTA sequences may wrap over several lines; a record ends where the next
    '>' header starts. FASTQ records are the usual four lines
    (@header, sequence, '+' line, quality). The format is taken from the first
    non-blank byte.
    """
    records: List[FastxRecord] = []
    it = _lines(buf)

    first = next((ln for ln in _lines(buf) if ln[2]), None)
    if first is None:
        return records
    marker = first[2][:1]
    if marker not in (b">", b"@"):
        raise ValueError("FASTA/FASTQ: first record must start with '>' or '@'")

    if marker == b"@":
        for start, _end, line in it:
            if not line:
                continue
            if not line.startswith(b"@"):
                raise ValueError(f"FASTQ: expected '@' header at byte {start}")
            try:
                _, _, seq = next(it)
                _, _, plus = next(it)
                _, q_end, qual = next(it)
            except StopIteration:
                raise ValueError(f"FASTQ: truncated record at byte {start}") from None
            if not plus.startswith(b"+"):
                raise ValueError(f"FASTQ: missing '+' separator for record at byte {start}")
            records.append(FastxRecord(
                span=ReadSpan(start, q_end),
                header=line.decode("ascii", errors="replace"),
                sequence=seq.decode("ascii"),
                quality=qual.decode("ascii"),
            ))
        return records

    start: Optional[int] = None
    end = 0
    header = ""
    chunks: list[bytes] = []

    def _commit() -> None:
        if start is not None:
            records.append(FastxRecord(ReadSpan(start, end), header, b"".join(chunks).decode("ascii")))

    for ls, le, line in it:
        if line.startswith(b">"):
            _commit()
            start, end = ls, le
            header = line.decode("ascii", errors="replace")
            chunks = []
        elif start is not None:
            chunks.append(line.strip())
            end = le
    _commit()
    return records


def load_references(path: str) -> ListReferenceStore:
    """Load a reference FASTA into memory; ids follow file order."""
    store = ListReferenceStore()
    with open(path, "rt", encoding="utf-8", errors="ignore") as f:
        header: Optional[str] = None
        buf: list[str] = []
        for ln in f:
            if ln.startswith(">"):
                if header is not None:
                    store.add(header, "".join(buf))
                header = ln[1:].strip()
                buf = []
            else:
                buf.append(ln.strip())
        if header is not None:
            store.add(header, "".join(buf))
    return store
