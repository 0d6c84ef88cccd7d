# smrlib/partition.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

from .config import OutputOptions
from .output.streams import OutputStreams

logger = logging.getLogger(__name__)

__all__ = ["PartitionSummary", "ReadPartitioner"]

Buffer = Union[bytes, bytearray, memoryview]
Span = tuple[int, int]

_LABELS = {
    "aligned": "aligned FASTA/FASTQ",
    "other": "not-aligned FASTA/FASTQ",
    "denovo": "de novo FASTA/FASTQ",
}


@dataclass
class PartitionSummary:
    total: int = 0
    aligned: int = 0
    other: int = 0
    denovo: int = 0


class ReadPartitioner:
    """
    Split a read file into aligned / other / denovo outputs.

    Reads are given as (start, end) byte spans into one buffer, in file order.
    Single-end mode routes each read by its own hit flag. In paired mode reads
    2k and 2k+1 are mates and the pair is written as one unit:

      pairedin   aligned if either mate aligned, other if neither did
      pairedout  aligned only if both mates aligned, other otherwise
      denovo     either mate a candidate (pairedin) / both mates (pairedout)

    So every read lands in exactly one of aligned/other, and optionally also in denovo.
    Spans are copied byte for byte; a record that does not end with a newline
    (last record of a file) gets one so appended outputs stay well framed.
    """

    def __init__(self, options: OutputOptions):
        self.options = options

    # ---------- routing ----------

    def units(self, n_reads: int) -> Iterator[tuple[int, ...]]:
        """Read indices written together: (i,) single-end, (2k, 2k+1) paired."""
        if not self.options.paired:
            for i in range(n_reads):
                yield (i,)
            return
        if n_reads % 2:
            raise ValueError(f"paired mode needs an even number of reads, got {n_reads}")
        for i in range(0, n_reads, 2):
            yield (i, i + 1)

    def is_aligned(self, unit: tuple[int, ...], hits: Sequence[bool]) -> bool:
        flags = [bool(hits[i]) for i in unit]
        if self.options.pairing == "pairedout":
            return all(flags)
        return any(flags)

    def is_denovo(self, unit: tuple[int, ...], denovo_hits: Sequence[bool]) -> bool:
        flags = [bool(denovo_hits[i]) for i in unit]
        if self.options.pairing == "pairedout":
            return all(flags)
        return any(flags)

    def select(self, kind: str, hits: Sequence[bool], denovo_hits: Optional[Sequence[bool]] = None) -> Iterator[tuple[int, ...]]:
        """Units that belong to output `kind`, in input order."""
        for unit in self.units(len(hits)):
            if kind == "aligned":
                keep = self.is_aligned(unit, hits)
            elif kind == "other":
                keep = not self.is_aligned(unit, hits)
            elif kind == "denovo":
                keep = denovo_hits is not None and self.is_denovo(unit, denovo_hits)
            else:
                raise ValueError(f"unknown partition kind {kind!r}")
            if keep:
                yield unit

    # ---------- writing ----------

    @staticmethod
    def _record_bytes(buffer: Buffer, span: Span) -> bytes:
        start, end = span
        if not 0 <= start <= end <= len(buffer):
            raise ValueError(f"read span {span} outside buffer of {len(buffer)} bytes")
        data = bytes(buffer[start:end])
        if data and not data.endswith(b"\n"):
            data += b"\n"
        return data

    def partition(
        self,
        buffer: Buffer,
        spans: Sequence[Span],
        hits: Sequence[bool],
        streams: OutputStreams,
        denovo_hits: Optional[Sequence[bool]] = None,
    ) -> PartitionSummary:
        """
        Write every configured output kind. Unconfigured kinds are skipped.
        Returns the number of reads written per kind.
        """
        if len(hits) != len(spans):
            raise ValueError(f"hit set has {len(hits)} entries for {len(spans)} reads")
        if denovo_hits is not None and len(denovo_hits) != len(spans):
            raise ValueError(f"denovo hit set has {len(denovo_hits)} entries for {len(spans)} reads")

        summary = PartitionSummary(total=len(spans))
        for kind in ("aligned", "other", "denovo"):
            if not streams.enabled(kind):
                continue
            if kind == "denovo" and denovo_hits is None:
                continue
            logger.info("Writing %s ... ", _LABELS[kind])
            t0 = time.time()
            n = 0
            for unit in self.select(kind, hits, denovo_hits):
                for i in unit:
                    streams.write(kind, self._record_bytes(buffer, spans[i]))
                    n += 1
            setattr(summary, kind, n)
            logger.info("Writing %s ... done [%.2f sec]", _LABELS[kind], time.time() - t0)
        return summary
