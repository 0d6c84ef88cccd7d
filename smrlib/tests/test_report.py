# tests/test_report.py
import json
import logging

from smrlib import OutputOptions, OutputPaths, OutputStreams, Read
from smrlib.report import AlignmentReporter, report_alignments, write_biom


def _paths(tmp_path, **kinds):
    return OutputPaths(**{k: str(tmp_path / name) for k, name in kinds.items()})


def test_tabular_and_sam(tmp_path, refs, gapped_read):
    opts = OutputOptions.from_blast_spec("1 cigar", sam=True, print_all_reads=True)
    reads = [gapped_read, Read(header="none", sequence="ACGT")]
    with OutputStreams(_paths(tmp_path, blast="out.blast", sam="out.sam")) as streams:
        assert report_alignments(reads, refs, opts, streams) == 2

    blast = (tmp_path / "out.blast").read_text().splitlines()
    assert blast == [
        "q2\trefB\t100.000\t8\t0\t2\t1\t8\t1\t6\t1e-10\t50\t3M2I3M",
        "none\t*\t0\t0\t0\t0\t0\t0\t0\t0\t0\t0\t*",
    ]
    sam = (tmp_path / "out.sam").read_text().splitlines()
    assert sam[0] == "@HD\tVN:1.0\tSO:unsorted"
    assert sum(ln.startswith("@HD") for ln in sam) == 1
    assert sam[4].startswith("q2\t0\trefB\t")
    assert sam[5] == "none\t4\t*\t0\t0\t*\t*\t0\t0\t*\t*"

def test_pairwise(tmp_path, refs, gapped_read):
    opts = OutputOptions.from_blast_spec("0")
    with OutputStreams(_paths(tmp_path, blast="out.txt")) as streams:
        reporter = AlignmentReporter(refs, opts, streams)
        reporter.write_read(gapped_read)
        reporter.write_read(Read(header="none", sequence="ACGT"))
    text = (tmp_path / "out.txt").read_text()
    assert text.startswith("Sequence ID: refB\nQuery ID: q2\n")
    assert "Target:        1    ACG--TTT    6\n" in text
    assert "none" not in text

def test_nothing_configured(tmp_path, refs, gapped_read, caplog):
    with caplog.at_level(logging.WARNING, logger="smrlib.report"):
        with OutputStreams(OutputPaths()) as streams:
            assert report_alignments([gapped_read], refs, OutputOptions(), streams) == 0
    assert "no alignment output format" in caplog.text

def test_write_biom(tmp_path):
    with OutputStreams(_paths(tmp_path, biom="otu.biom")) as streams:
        write_biom(streams)
    doc = json.loads((tmp_path / "otu.biom").read_text())
    assert doc["type"] == "OTU table"

def test_write_biom_disabled(tmp_path):
    with OutputStreams(OutputPaths()) as streams:
        write_biom(streams)
