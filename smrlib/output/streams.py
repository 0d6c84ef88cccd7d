# smrlib/output/streams.py
from __future__ import annotations

import logging
from typing import BinaryIO, Dict, Optional, Union

from ..config import STREAM_KINDS, OutputPaths
from ..errors import OutputStreamUnavailable

logger = logging.getLogger(__name__)

__all__ = ["OutputStreams"]


class OutputStreams:
    """
    One append-mode binary handle per configured output kind
    (aligned, other, denovo, blast, sam, biom), opened once for the run.

        with OutputStreams(paths) as streams:
            streams.write("aligned", b">r1\\nACGT\\n")

    All handles are closed when the block exits, also on error. Writing to a
    kind that is not configured or whose handle is not open raises
    OutputStreamUnavailable.
    """

    def __init__(self, paths: OutputPaths):
        self.paths = paths
        self._handles: Dict[str, BinaryIO] = {}

    # ---------- lifecycle ----------

    def open(self) -> "OutputStreams":
        for kind, path in self.paths.items():
            if path is None:
                continue
            try:
                self._handles[kind] = open(path, "ab")
            except OSError as exc:
                self.close()
                raise OutputStreamUnavailable(kind, path) from exc
            logger.debug("opened %s output %s", kind, path)
        return self

    def close(self) -> None:
        handles, self._handles = self._handles, {}
        for kind, fh in handles.items():
            if not fh.closed:
                fh.close()
                logger.debug("closed %s output", kind)

    def __enter__(self) -> "OutputStreams":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------- writes ----------

    def enabled(self, kind: str) -> bool:
        if kind not in STREAM_KINDS:
            raise ValueError(f"unknown output kind {kind!r}")
        return getattr(self.paths, kind) is not None

    def path(self, kind: str) -> Optional[str]:
        return getattr(self.paths, kind)

    def write(self, kind: str, data: Union[bytes, str]) -> None:
        if not self.enabled(kind):
            raise OutputStreamUnavailable(kind, None, "is not configured")
        fh = self._handles.get(kind)
        if fh is None or fh.closed:
            raise OutputStreamUnavailable(kind, self.path(kind), "is not open for writing")
        if isinstance(data, str):
            data = data.encode("utf-8")
        fh.write(data)
