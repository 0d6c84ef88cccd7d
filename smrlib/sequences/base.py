# smrlib/sequences/base.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Protocol

from ..models.alignment import first_token

__all__ = [
    "ReferenceEntry",
    "ReferenceStore",
    "ListReferenceStore",
    "to_alphabet",
]

# Fixed 5-symbol alphabet: A, C, G, T and N for everything else
_FOLD_ACGT = str.maketrans("acgt", "ACGT")
_NON_ACGT = re.compile(r"[^ACGT]")

def to_alphabet(s: str) -> str:
    """Map a nucleotide string onto {A,C,G,T,N}; length is preserved."""
    return _NON_ACGT.sub("N", s.translate(_FOLD_ACGT))


@dataclass(slots=True)
class ReferenceEntry:
    header: str
    sequence: str

    @property
    def id(self) -> str:
        return first_token(self.header)

    def __len__(self) -> int:
        return len(self.sequence)


class ReferenceStore(Protocol):
    def get(self, ref_seq_id: int) -> ReferenceEntry: ...
    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[ReferenceEntry]: ...


@dataclass
class ListReferenceStore:
    """
    In-memory reference store; ref_seq_id is the position in load order.
    Raises KeyError for unknown ids.
    """
    entries: List[ReferenceEntry] = field(default_factory=list)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "ListReferenceStore":
        return cls([ReferenceEntry(h, s) for h, s in pairs])

    def add(self, header: str, sequence: str) -> int:
        self.entries.append(ReferenceEntry(header, sequence))
        return len(self.entries) - 1

    def get(self, ref_seq_id: int) -> ReferenceEntry:
        if not 0 <= ref_seq_id < len(self.entries):
            raise KeyError(f"unknown reference id {ref_seq_id}")
        return self.entries[ref_seq_id]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ReferenceEntry]:
        return iter(self.entries)
