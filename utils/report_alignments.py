#!/usr/bin/env python3
"""
Render alignment results as BLAST pairwise text, BLAST tabular and/or SAM.

Input is a JSON-lines dump, one read per line:

  {"header": "r1 sample=3", "sequence": "ACGT...", "quality": "IIII...",
   "alignments": [{"ref": 0, "read_begin": 0, "read_end": 99, "ref_begin": 10,
                   "ref_end": 109, "score": 180, "strand": "+", "cigar": "100M",
                   "e_value": 1e-30, "bit_score": 95}]}

"ref" is the 0-based position of the reference in --references.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from smrlib import Alignment, OutputOptions, OutputPaths, OutputStreams, OutputStreamUnavailable, Read, SmrError
from smrlib.formats.cigar import cigar_from_string
from smrlib.report import report_alignments, write_biom
from smrlib.sequences.fastx import load_references

# ---------- CLI ----------

def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Write BLAST-like / SAM reports for aligned reads.")
    p.add_argument("input", help="JSON-lines alignment dump; use '-' for stdin.")
    p.add_argument("--references", required=True, help="Reference FASTA (ids follow file order).")
    p.add_argument("--blast", default=None,
                   help="'0' pairwise view, or '1' tabular followed by optional columns, e.g. '1 cigar qcov qstrand'.")
    p.add_argument("--blast-out", default=None, help="Output path for --blast (appended to).")
    p.add_argument("--sam-out", default=None, help="Output path for SAM records (appended to).")
    p.add_argument("--biom-out", default=None, help="Output path for the BIOM header stub.")
    p.add_argument("--print-all-reads", action="store_true", help="Emit null records for reads without alignments.")
    p.add_argument("--permissive-cigar", action="store_true",
                   help="Read unknown CIGAR opcode tags as deletions instead of failing.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug).")
    return p.parse_args(argv)

# ---------- input ----------

def _alignment(d: dict, strict: bool) -> Alignment:
    aln = Alignment(
        ref_seq_id=int(d["ref"]),
        read_begin=int(d["read_begin"]),
        read_end=int(d["read_end"]),
        ref_begin=int(d["ref_begin"]),
        ref_end=int(d["ref_end"]),
        score=int(d.get("score", 0)),
        strand=d.get("strand", "+"),
        cigar=cigar_from_string(d["cigar"]),
        e_value=d.get("e_value"),
        bit_score=d.get("bit_score"),
    )
    # coordinates and CIGAR come from the dump independently
    aln.validate_cigar_span(strict=strict)
    return aln


def iter_reads(path: str, *, strict: bool = True) -> Iterator[Read]:
    fh = sys.stdin if path == "-" else open(path, "rt", encoding="utf-8")
    try:
        for lineno, ln in enumerate(fh, 1):
            if not ln.strip():
                continue
            try:
                d = json.loads(ln)
                read = Read(
                    header=d["header"],
                    sequence=d["sequence"],
                    quality=d.get("quality"),
                    alignments=[_alignment(a, strict) for a in d.get("alignments", [])],
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"{path}:{lineno}: bad record ({exc})") from exc
            yield read
    finally:
        if fh is not sys.stdin:
            fh.close()

# ---------- main ----------

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.WARNING - 10 * min(args.verbose, 2),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        options = OutputOptions.from_blast_spec(
            args.blast,
            sam=args.sam_out is not None,
            print_all_reads=args.print_all_reads,
            strict_cigar=not args.permissive_cigar,
        )
    except ValueError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2
    if options.blast_format is not None and args.blast_out is None:
        print("[error] --blast requires --blast-out.", file=sys.stderr)
        return 2
    if options.blast_format is None and args.blast_out is not None:
        print("[error] --blast-out requires --blast.", file=sys.stderr)
        return 2
    if args.input != "-" and not Path(args.input).exists():
        print(f"[error] input '{args.input}' does not exist.", file=sys.stderr)
        return 2
    if not Path(args.references).exists():
        print(f"[error] --references '{args.references}' does not exist.", file=sys.stderr)
        return 2

    refs = load_references(args.references)
    paths = OutputPaths(blast=args.blast_out, sam=args.sam_out, biom=args.biom_out)
    try:
        with OutputStreams(paths) as streams:
            n = report_alignments(iter_reads(args.input, strict=options.strict_cigar), refs, options, streams)
            write_biom(streams)
    except OutputStreamUnavailable as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    except (SmrError, ValueError, KeyError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2

    print(f"[ok] Reported {n} reads.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
