# smrlib/formats/blast_pairwise.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from ..config import OutputOptions
from ..models.alignment import Alignment, Read
from ..sequences.base import ReferenceStore, to_alphabet
from ..utils.sink import Sink, emit
from .blast_tabular import format_bitscore, format_evalue
from .cigar import CigarOp, iter_ops

__all__ = ["BLOCK_WIDTH", "RenderCursor", "PairwiseRenderer", "encode_header", "encode_alignment", "encode"]

BLOCK_WIDTH = 60


@dataclass(frozen=True, slots=True)
class RenderCursor:
    """
    Resume point between blocks.
      op_index    index of the next CIGAR op to render
      op_offset   columns of that op already rendered (< its run length)
      ref_cursor  0-based reference position of the next column
      read_cursor 0-based read position of the next column
    """
    op_index: int
    op_offset: int
    ref_cursor: int
    read_cursor: int


class PairwiseRenderer:
    """
    Renders one alignment as BLAST-like three-line blocks:

        Target:        1    ACGT-ACGT    8
                            |||| |*||
        Query:         1    ACGTTAGGT    9

    Each block covers up to 60 CIGAR columns. The column window is walked
    once per block and all three rows are built from it, so the reference,
    match and query rows always end on the same column. Callers thread the
    returned RenderCursor back into render_next_block() until it reports done.
    """

    def __init__(self, aln: Alignment, ref_seq: str, read_seq: str, *, strict: bool = True, width: int = BLOCK_WIDTH):
        if width < 1:
            raise ValueError("block width must be ≥ 1")
        self.aln = aln
        self.width = width
        self.ops: List[tuple[CigarOp, int]] = list(iter_ops(aln.cigar, strict=strict))
        self.ref = to_alphabet(ref_seq)
        self.read = to_alphabet(read_seq)

        ref_need = aln.ref_begin + sum(n for op, n in self.ops if op.consumes_ref)
        read_need = aln.read_begin + sum(n for op, n in self.ops if op.consumes_read)
        if ref_need > len(self.ref) or read_need > len(self.read):
            raise ValueError(
                f"CIGAR walks past the sequence ends (needs ref {ref_need}/{len(self.ref)}, "
                f"read {read_need}/{len(self.read)})"
            )

    def start(self) -> RenderCursor:
        return RenderCursor(0, 0, self.aln.ref_begin, self.aln.read_begin)

    def is_done(self, cursor: RenderCursor) -> bool:
        return cursor.op_index >= len(self.ops)

    def _window(self, cursor: RenderCursor) -> tuple[List[CigarOp], RenderCursor]:
        """Column opcodes for the next block and the cursor just past them."""
        cols: List[CigarOp] = []
        idx, off = cursor.op_index, cursor.op_offset
        ref, read = cursor.ref_cursor, cursor.read_cursor
        while idx < len(self.ops) and len(cols) < self.width:
            op, n = self.ops[idx]
            take = min(n - off, self.width - len(cols))
            cols.extend([op] * take)
            if op.consumes_ref:
                ref += take
            if op.consumes_read:
                read += take
            off += take
            if off == n:
                idx, off = idx + 1, 0
        return cols, RenderCursor(idx, off, ref, read)

    def render_next_block(self, cursor: RenderCursor) -> tuple[List[str], RenderCursor, bool]:
        """
        Render the block starting at `cursor`.
        Returns ([target_line, match_line, query_line], next_cursor, done).
        """
        if self.is_done(cursor):
            return [], cursor, True

        cols, nxt = self._window(cursor)
        q, p = cursor.ref_cursor, cursor.read_cursor
        top: List[str] = []
        mid: List[str] = []
        bot: List[str] = []
        for op in cols:
            if op is CigarOp.MATCH:
                a, b = self.ref[q], self.read[p]
                top.append(a)
                mid.append("|" if a == b else "*")
                bot.append(b)
                q += 1
                p += 1
            elif op is CigarOp.INSERTION:
                top.append("-")
                mid.append(" ")
                bot.append(self.read[p])
                p += 1
            else:
                top.append(self.ref[q])
                mid.append(" ")
                bot.append("-")
                q += 1

        lines = [
            f"Target: {cursor.ref_cursor + 1:>8}    {''.join(top)}    {q}",
            " " * 20 + "".join(mid),
            f"Query: {cursor.read_cursor + 1:>9}    {''.join(bot)}    {p}",
        ]
        return lines, nxt, self.is_done(nxt)

    def blocks(self) -> Iterator[List[str]]:
        cursor = self.start()
        done = self.is_done(cursor)
        while not done:
            lines, cursor, done = self.render_next_block(cursor)
            yield lines

    def render(self) -> str:
        """All blocks; each block is followed by a blank line."""
        return "".join("\n".join(lines) + "\n\n" for lines in self.blocks())


def encode_header(read: Read, aln: Alignment, ref_id: str) -> str:
    return (
        f"Sequence ID: {ref_id}\n"
        f"Query ID: {read.id}\n"
        f"Score: {aln.score} bits ({format_bitscore(aln.bit_score)})\t"
        f"Expect: {format_evalue(aln.e_value)}\t"
        f"strand: {aln.strand}\n\n"
    )


def encode_alignment(read: Read, aln: Alignment, refs: ReferenceStore, options: Optional[OutputOptions] = None) -> str:
    strict = options.strict_cigar if options is not None else True
    ref = refs.get(aln.ref_seq_id)
    body = ""
    if aln.cigar:
        body = PairwiseRenderer(aln, ref.sequence, read.sequence, strict=strict).render()
    return encode_header(read, aln, ref.id) + body


def encode(
    reads: Iterable[Read],
    refs: ReferenceStore,
    *,
    options: Optional[OutputOptions] = None,
    sink: Sink = None,
) -> str:
    """
    Encode every alignment of every read, in order, as BLAST-like pairwise text.
    Reads without alignments produce nothing. Returns emitted text; also writes to sink if provided.
    """
    parts: List[str] = []
    for read in reads:
        for aln in read.alignments:
            parts.append(encode_alignment(read, aln, refs, options))
    return emit("".join(parts), sink)
