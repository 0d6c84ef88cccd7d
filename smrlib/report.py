# smrlib/report.py
from __future__ import annotations

import logging
import time
from typing import Iterable

from .config import OutputOptions
from .formats import biom, blast_pairwise, blast_tabular, sam
from .models.alignment import Read
from .output.streams import OutputStreams
from .sequences.base import ReferenceStore

logger = logging.getLogger(__name__)

__all__ = ["AlignmentReporter", "report_alignments", "write_biom"]


class AlignmentReporter:
    """
    Writes the configured alignment formats for a run:
      blast  pairwise view or tabular (options.blast_format)
      sam    SAM records (options.sam), header written before the first read
    """

    def __init__(self, refs: ReferenceStore, options: OutputOptions, streams: OutputStreams):
        self.refs = refs
        self.options = options
        self.streams = streams
        self._sam_header_done = False

    def write_read(self, read: Read) -> None:
        opts = self.options
        if opts.blast_format == "pairwise":
            text = "".join(blast_pairwise.encode_alignment(read, aln, self.refs, opts) for aln in read.alignments)
            if text:
                self.streams.write("blast", text)
        elif opts.blast_format == "tabular":
            text = blast_tabular.encode_read(read, self.refs, opts)
            if text:
                self.streams.write("blast", text)

        if opts.sam:
            if not self._sam_header_done:
                self.streams.write("sam", sam.header(self.refs))
                self._sam_header_done = True
            text = sam.encode_read(read, self.refs, opts)
            if text:
                self.streams.write("sam", text)


def report_alignments(
    reads: Iterable[Read],
    refs: ReferenceStore,
    options: OutputOptions,
    streams: OutputStreams,
) -> int:
    """Write every read through AlignmentReporter; returns the number of reads seen."""
    if options.blast_format is None and not options.sam:
        logger.warning("no alignment output format configured; nothing to write")
        return 0
    t0 = time.time()
    reporter = AlignmentReporter(refs, options, streams)
    n = 0
    for read in reads:
        reporter.write_read(read)
        n += 1
    logger.info("Wrote alignments for %d reads [%.2f sec]", n, time.time() - t0)
    return n


def write_biom(streams: OutputStreams) -> None:
    if streams.enabled("biom"):
        streams.write("biom", biom.encode())
