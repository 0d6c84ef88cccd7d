import pytest

from smrlib import Alignment, Read
from smrlib.formats.cigar import cigar_from_string
from smrlib.sequences.base import ListReferenceStore


# Reference ids follow list order:
#   0 refA  ACGTA
#   1 refB  ACGTTT
#   2 refC  ACGTACGTAC
@pytest.fixture
def refs() -> ListReferenceStore:
    return ListReferenceStore.from_pairs([
        ("refA 16S rRNA", "ACGTA"),
        ("refB", "ACGTTT"),
        ("refC some description", "ACGTACGTAC"),
    ])


@pytest.fixture
def gapped_read() -> Read:
    # ACG, CC inserted, TTT against refB ACGTTT
    aln = Alignment(
        ref_seq_id=1, read_begin=0, read_end=7, ref_begin=0, ref_end=5,
        score=30, strand="+", cigar=cigar_from_string("3M2I3M"),
        e_value=1e-10, bit_score=50.0,
    )
    return Read(header=">q2 len=8", sequence="ACGCCTTT", quality="ABCDEFGH", alignments=[aln])
