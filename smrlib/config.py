# smrlib/config.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterator, Literal, Optional, Sequence

BlastFormat = Literal["pairwise", "tabular"]
Pairing = Literal["none", "pairedin", "pairedout"]

TABULAR_COLUMNS = ("cigar", "qcov", "qstrand")
STREAM_KINDS = ("aligned", "other", "denovo", "blast", "sam", "biom")


@dataclass(frozen=True, slots=True)
class OutputOptions:
    """
    Immutable run configuration handed to every encoder/partitioner at construction.

      blast_format     'pairwise' (legacy BLAST-like view), 'tabular' (m8 + extras) or None
      sam              emit SAM records
      tabular_columns  ordered optional tabular columns, subset of {cigar, qcov, qstrand}
      pairing          'none' (single-end), 'pairedin' or 'pairedout'
      print_all_reads  emit null records for reads without alignments
      strict_cigar     reject unknown CIGAR opcode tags instead of reading them as deletions
    """
    blast_format: Optional[BlastFormat] = None
    sam: bool = False
    tabular_columns: tuple[str, ...] = ()
    pairing: Pairing = "none"
    print_all_reads: bool = False
    strict_cigar: bool = True

    def __post_init__(self) -> None:
        if self.blast_format not in (None, "pairwise", "tabular"):
            raise ValueError("blast_format must be 'pairwise', 'tabular' or None.")
        if self.pairing not in ("none", "pairedin", "pairedout"):
            raise ValueError("pairing must be 'none', 'pairedin' or 'pairedout'.")

        cols = tuple(self.tabular_columns)
        bad = [c for c in cols if c not in TABULAR_COLUMNS]
        if bad:
            raise ValueError(f"unknown tabular column(s): {', '.join(bad)}")
        if len(set(cols)) != len(cols):
            raise ValueError("tabular columns must not repeat.")
        if cols and self.blast_format != "tabular":
            raise ValueError("optional columns require blast_format='tabular'.")
        # frozen: normalise list input through object.__setattr__
        object.__setattr__(self, "tabular_columns", cols)

    @property
    def paired(self) -> bool:
        return self.pairing != "none"

    @classmethod
    def from_blast_spec(cls, spec: Optional[str], **kwargs) -> "OutputOptions":
        """
        Parse the legacy '--blast' string: '0' for the pairwise view,
        '1' for tabular optionally followed by column names, e.g. '1 cigar qcov'.
        """
        if spec is None or not spec.strip():
            return cls(**kwargs)
        tokens = spec.split()
        head, rest = tokens[0], tokens[1:]
        if head == "0":
            if rest:
                raise ValueError("pairwise output ('0') takes no optional columns.")
            return cls(blast_format="pairwise", **kwargs)
        if head == "1":
            return cls(blast_format="tabular", tabular_columns=tuple(rest), **kwargs)
        raise ValueError(f"unsupported --blast value {spec!r}; expected '0' or '1 [cigar] [qcov] [qstrand]'")


@dataclass(slots=True)
class OutputPaths:
    """File path per output stream kind; None disables that stream."""
    aligned: Optional[str] = None
    other: Optional[str] = None
    denovo: Optional[str] = None
    blast: Optional[str] = None
    sam: Optional[str] = None
    biom: Optional[str] = None

    def items(self) -> Iterator[tuple[str, Optional[str]]]:
        for f in fields(self):
            yield f.name, getattr(self, f.name)

    def configured(self) -> Sequence[str]:
        return [kind for kind, path in self.items() if path is not None]
