# tests/formats/test_sam.py
import json

from smrlib import Read, OutputOptions
from smrlib.formats import biom, sam


def test_header(refs):
    assert sam.header(refs) == (
        "@HD\tVN:1.0\tSO:unsorted\n"
        "@SQ\tSN:refA\tLN:5\n"
        "@SQ\tSN:refB\tLN:6\n"
        "@SQ\tSN:refC\tLN:10\n"
    )

def test_forward_record(gapped_read, refs):
    rec = sam.to_record(gapped_read, gapped_read.alignments[0], refs)
    assert rec.format() == "q2\t0\trefB\t1\t255\t3M2I3M\t*\t0\t0\tACGCCTTT\tABCDEFGH\tAS:i:30\tNM:i:2\n"

def test_reverse_record_reverses_quality(gapped_read, refs):
    aln = gapped_read.alignments[0]
    aln.strand = "-"
    rec = sam.to_record(gapped_read, aln, refs)
    assert rec.flag == 16
    assert rec.qual == "HGFEDCBA"
    # SEQ is written as held by the read
    assert rec.seq == "ACGCCTTT"

def test_missing_quality_is_star(gapped_read, refs):
    gapped_read.quality = None
    rec = sam.to_record(gapped_read, gapped_read.alignments[0], refs)
    assert rec.qual == "*"

def test_unaligned_record():
    read = Read(header=">q9 nothing", sequence="ACGT")
    assert sam.unaligned_record(read).format() == "q9\t4\t*\t0\t0\t*\t*\t0\t0\t*\t*\n"

def test_encode_read_respects_print_all(refs):
    read = Read(header="q9", sequence="ACGT")
    assert sam.encode_read(read, refs, OutputOptions(sam=True)) == ""
    assert sam.encode_read(read, refs, OutputOptions(sam=True, print_all_reads=True)).startswith("q9\t4\t")

def test_encode_with_and_without_header(gapped_read, refs):
    opts = OutputOptions(sam=True)
    text = sam.encode([gapped_read], refs, options=opts)
    assert text.startswith("@HD\t")
    assert text.endswith("NM:i:2\n")
    bare = sam.encode([gapped_read], refs, options=opts, with_header=False)
    assert bare.startswith("q2\t0\t")

# ---------- BIOM stub ----------

def test_biom_header_is_json():
    doc = json.loads(biom.encode(generated_by="unit test"))
    assert doc["format"] == "Biological Observation Matrix 1.0.0"
    assert doc["generated_by"] == "unit test"
    assert doc["shape"] == [0, 0]
    assert biom.BIOM_HEADER["generated_by"] == "smrlib"
