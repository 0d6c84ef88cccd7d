# tests/sequences/test_fastx.py
import pytest

from smrlib.sequences.base import ListReferenceStore, to_alphabet
from smrlib.sequences.fastx import ReadSpan, scan_fastx, load_references


FASTA = b">r1 a\nACGT\nAC\n>r2\nGGG\n"
FASTQ = b"@a\nACG\n+\nIII\n@b\nTT\n+\nII"

# ---------- scanning ----------

def test_fasta_multiline_spans():
    recs = scan_fastx(FASTA)
    assert [r.span for r in recs] == [ReadSpan(0, 14), ReadSpan(14, 22)]
    assert [r.sequence for r in recs] == ["ACGTAC", "GGG"]
    assert recs[0].header == ">r1 a"
    assert recs[0].quality is None
    assert FASTA[slice(*recs[1].span)] == b">r2\nGGG\n"

def test_fastq_spans_without_final_newline():
    recs = scan_fastx(FASTQ)
    assert [r.span for r in recs] == [(0, 13), (13, 23)]
    assert (recs[1].sequence, recs[1].quality) == ("TT", "II")
    start, end = recs[1].span
    assert FASTQ[start:end] == b"@b\nTT\n+\nII"

def test_spans_cover_whole_buffer():
    recs = scan_fastx(FASTA)
    assert b"".join(FASTA[s:e] for s, e in (r.span for r in recs)) == FASTA

def test_empty_buffer():
    assert scan_fastx(b"") == []
    assert scan_fastx(b"\n\n") == []

@pytest.mark.parametrize("buf", [
    b"ACGT\n",
    b"@a\nACG\n",
    b"@a\nACG\nIII\nIII\n",
])
def test_bad_input(buf):
    with pytest.raises(ValueError):
        scan_fastx(buf)

# ---------- references ----------

def test_load_references(tmp_path):
    p = tmp_path / "refs.fa"
    p.write_text(">s1 first\nACGT\nacgt\n>s2\nNNN\n")
    store = load_references(str(p))
    assert len(store) == 2
    assert store.get(0).id == "s1"
    assert store.get(0).sequence == "ACGTacgt"
    assert len(store.get(1)) == 3

def test_store_unknown_id():
    store = ListReferenceStore.from_pairs([("x", "A")])
    assert store.add("y", "CC") == 1
    with pytest.raises(KeyError):
        store.get(2)
    with pytest.raises(KeyError):
        store.get(-1)

# ---------- alphabet ----------

def test_to_alphabet():
    assert to_alphabet("acgtnRYk-") == "ACGTNNNNN"

@pytest.mark.parametrize("raw", ["AC1?G T", "acgt\tx", "ÄCGß", "..--**"])
def test_to_alphabet_is_closed_and_length_preserving(raw):
    out = to_alphabet(raw)
    assert len(out) == len(raw)
    assert set(out) <= set("ACGTN")

def test_to_alphabet_digits_and_spaces():
    assert to_alphabet("AC1?G T") == "ACNNGNT"
