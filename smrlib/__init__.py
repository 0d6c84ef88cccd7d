# smrlib/__init__.py
from .models.alignment import Alignment, DerivedMetrics, Read
from .models.read_collection import ReadCollection
from .config import OutputOptions, OutputPaths
from .errors import SmrError, OutputStreamUnavailable, CigarError, MalformedCigarOpcode, ZeroLengthReadError

# Convenience re-exports for direct functional use (optional)
from .formats.cigar import CigarOp, pack_op, iter_ops, cigar_string
from .metrics.identity import compute_metrics, ensure_metrics, query_coverage
from .sequences.base import ReferenceEntry, ListReferenceStore
from .output.streams import OutputStreams
from .partition import ReadPartitioner
