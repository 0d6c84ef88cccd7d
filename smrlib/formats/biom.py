# smrlib/formats/biom.py
from __future__ import annotations

import json

from ..utils.sink import Sink, emit

# Static BIOM 1.0 header; no observation matrix is computed.
BIOM_HEADER = {
    "id": None,
    "format": "Biological Observation Matrix 1.0.0",
    "format_url": "http://biom-format.org/documentation/format_versions/biom-1.0.html",
    "type": "OTU table",
    "generated_by": "smrlib",
    "date": "",
    "rows": [],
    "matrix_type": "sparse",
    "matrix_element_type": "int",
    "shape": [0, 0],
    "data": [],
}


def encode(*, sink: Sink = None, generated_by: str = "smrlib") -> str:
    doc = dict(BIOM_HEADER, generated_by=generated_by)
    return emit(json.dumps(doc) + "\n", sink)
