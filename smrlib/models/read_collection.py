# smrlib/models/read_collection.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List
from .alignment import Read

@dataclass(slots=True)
class ReadCollection:
    items: List[Read] = field(default_factory=list)

    def extend(self, it: Iterable[Read]) -> None:
        self.items.extend(it)

    def append(self, read: Read) -> None:
        self.items.append(read)

    def __iter__(self) -> Iterator[Read]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def hit_set(self) -> List[bool]:
        """Per-read aligned flag, in collection order."""
        return [r.aligned for r in self.items]

    # Bulk exporters. These call the per-format encoders under the hood.

    def to_tabular(self, refs, options) -> str:
        from ..formats.blast_tabular import encode
        return encode(self.items, refs, options=options)

    def to_pairwise(self, refs, options=None) -> str:
        from ..formats.blast_pairwise import encode
        return encode(self.items, refs, options=options)

    def to_sam(self, refs, options, with_header: bool = True) -> str:
        from ..formats.sam import encode
        return encode(self.items, refs, options=options, with_header=with_header)
