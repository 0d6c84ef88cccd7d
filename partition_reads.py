#!/usr/bin/env python3
"""
Split a FASTA/FASTQ read file into aligned / not-aligned / de novo outputs.

The hit files list 0-based read indices (one per line, '#' comments allowed),
in the order reads appear in --reads. In paired mode reads 2k and 2k+1 are mates.

Example:
  ./partition_reads.py \
      --reads reads.fq \
      --aligned-hits hits.txt \
      --aligned out/aligned.fq \
      --other out/other.fq \
      --paired-in
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from smrlib import OutputOptions, OutputPaths, OutputStreams, OutputStreamUnavailable, ReadPartitioner
from smrlib.sequences.fastx import scan_fastx


def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Partition reads into aligned / other / de novo FASTA/FASTQ files.")
    p.add_argument("--reads", required=True, type=Path, help="Input FASTA/FASTQ reads.")
    p.add_argument("--aligned-hits", required=True, type=Path, help="File of 0-based indices of aligned reads.")
    p.add_argument("--denovo-hits", type=Path, default=None, help="File of 0-based indices of de novo candidate reads.")
    p.add_argument("--aligned", default=None, help="Output path for aligned reads (appended to).")
    p.add_argument("--other", default=None, help="Output path for not-aligned reads (appended to).")
    p.add_argument("--denovo", default=None, help="Output path for de novo candidate reads (appended to).")
    mx = p.add_mutually_exclusive_group()
    mx.add_argument("--paired-in", action="store_true", help="Keep a pair in aligned output if either mate aligned.")
    mx.add_argument("--paired-out", action="store_true", help="Keep a pair in aligned output only if both mates aligned.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug).")
    return p.parse_args(argv)


def read_hit_indices(path: Path, n_reads: int) -> List[bool]:
    hits = [False] * n_reads
    with open(path, "rt", encoding="utf-8") as fh:
        for lineno, ln in enumerate(fh, 1):
            s = ln.split("#", 1)[0].strip()
            if not s:
                continue
            i = int(s)
            if not 0 <= i < n_reads:
                raise ValueError(f"{path}:{lineno}: read index {i} out of range 0..{n_reads - 1}")
            hits[i] = True
    return hits


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not args.reads.exists():
        print(f"[error] --reads '{args.reads}' does not exist.", file=sys.stderr)
        return 2
    if args.denovo and args.denovo_hits is None:
        print("[error] --denovo requires --denovo-hits.", file=sys.stderr)
        return 2

    pairing = "pairedin" if args.paired_in else "pairedout" if args.paired_out else "none"
    options = OutputOptions(pairing=pairing)
    paths = OutputPaths(aligned=args.aligned, other=args.other, denovo=args.denovo)

    buffer = args.reads.read_bytes()
    try:
        records = scan_fastx(buffer)
        hits = read_hit_indices(args.aligned_hits, len(records))
        denovo = read_hit_indices(args.denovo_hits, len(records)) if args.denovo_hits else None
    except ValueError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2

    try:
        with OutputStreams(paths) as streams:
            summary = ReadPartitioner(options).partition(
                buffer, [r.span for r in records], hits, streams, denovo_hits=denovo,
            )
    except OutputStreamUnavailable as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2

    print(f"[ok] {summary.total} reads: {summary.aligned} aligned, {summary.other} other, {summary.denovo} de novo")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
