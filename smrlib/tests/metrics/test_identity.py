# tests/metrics/test_identity.py
import pytest

from smrlib.errors import ZeroLengthReadError
from smrlib.formats.cigar import cigar_from_string, iter_ops, CigarOp
from smrlib.metrics.identity import compute_metrics, ensure_metrics, query_coverage
from smrlib.models.alignment import Alignment, DerivedMetrics


def _mk(text, read_begin=0, read_end=None, ref_begin=0, ref_end=None):
    words = cigar_from_string(text)
    ops = list(iter_ops(words))
    if read_end is None:
        read_end = read_begin + sum(n for op, n in ops if op.consumes_read) - 1
    if ref_end is None:
        ref_end = ref_begin + sum(n for op, n in ops if op.consumes_ref) - 1
    return Alignment(
        ref_seq_id=0, read_begin=read_begin, read_end=read_end,
        ref_begin=ref_begin, ref_end=ref_end, score=0, cigar=words,
    )

# ---------- counting ----------

def test_single_mismatch():
    m = compute_metrics(_mk("5M"), "ACGTA", "ACGAA")
    assert m == DerivedMetrics(mismatches=1, gaps=0, identity=4)
    assert m.percent_identity == 80.0
    assert m.edit_distance == 1

def test_insertion_counts_gap_only():
    aln = _mk("3M2I3M")
    m = compute_metrics(aln, "ACGTTT", "ACGCCTTT")
    assert (m.mismatches, m.gaps, m.identity) == (0, 2, 6)
    assert aln.length == 8
    assert m.percent_identity == 100.0

def test_deletion_counts_gap_only():
    m = compute_metrics(_mk("2M2D2M"), "ACGTAC", "ACAC")
    assert (m.mismatches, m.gaps, m.identity) == (0, 2, 4)

def test_offsets_are_honoured():
    # read[2:6] against ref[3:7]
    aln = _mk("4M", read_begin=2, ref_begin=3)
    m = compute_metrics(aln, "TTTGATCTT", "CCGATGAA")
    assert (m.identity, m.mismatches) == (3, 1)

def test_alphabet_normalisation():
    # lower case folds to upper; IUPAC codes collapse to N and compare equal
    m = compute_metrics(_mk("5M"), "acgNa", "ACGRA")
    assert m.identity == 5 and m.mismatches == 0

@pytest.mark.parametrize("text, ref, read", [
    ("5M", "ACGTA", "TTTTT"),
    ("2M1I3M1D2M", "ACGTTAGC", "ACAGTTGC"),
    ("1I4M", "GGGG", "AGGCG"),
])
def test_identity_plus_mismatches_is_match_total(text, ref, read):
    aln = _mk(text)
    m = compute_metrics(aln, ref, read)
    match_total = sum(n for op, n in iter_ops(aln.cigar) if op is CigarOp.MATCH)
    assert m.identity + m.mismatches == match_total == m.aligned_columns

def test_all_indel_alignment_has_zero_identity():
    aln = Alignment(ref_seq_id=0, read_begin=0, read_end=2, ref_begin=0, ref_end=0,
                    score=0, cigar=cigar_from_string("3I"))
    m = compute_metrics(aln, "A", "CCC")
    assert m.percent_identity == 0.0
    assert m.gaps == 3

def test_percent_identity_rounds_to_three_decimals():
    assert DerivedMetrics(mismatches=1, gaps=0, identity=2).percent_identity == 66.667

def test_match_past_sequence_end():
    with pytest.raises(ValueError):
        compute_metrics(_mk("6M"), "ACGTA", "ACGTAA")

def test_unknown_opcode_follows_strictness():
    aln = _mk("2M")
    aln.cigar.append((1 << 4) | 5)
    with pytest.raises(ValueError):
        compute_metrics(aln, "ACG", "AC")
    m = compute_metrics(aln, "ACG", "AC", strict=False)
    assert (m.identity, m.gaps) == (2, 1)

# ---------- caching ----------

def test_ensure_metrics_caches():
    aln = _mk("5M")
    first = ensure_metrics(aln, "ACGTA", "ACGAA")
    assert aln.metrics is first
    # sequences are not looked at again once cached
    again = ensure_metrics(aln, "TTTTT", "GGGGG")
    assert again is first

# ---------- coverage ----------

def test_query_coverage():
    assert query_coverage(_mk("6M", read_begin=2), 10) == 60.0
    assert query_coverage(_mk("2M"), 3) == 66.667

def test_query_coverage_zero_length_read():
    with pytest.raises(ZeroLengthReadError):
        query_coverage(_mk("2M"), 0)
