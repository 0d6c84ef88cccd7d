# smrlib/utils/sink.py
from __future__ import annotations

import io
import os
from typing import Iterator, Optional, Sequence, TextIO, Union

Source = Union[str, TextIO, Sequence[str]]   # path | text blob | file-like | sequence of lines
Sink = Optional[Union[str, TextIO]]          # path | file-like | None (return string)


def iter_lines(source: Source) -> Iterator[str]:
    """
    Yield lines from:
      - path (str, existing file path),
      - text blob (str containing newlines),
      - file-like (TextIO),
      - sequence[str]
    """
    if isinstance(source, str):
        if os.path.exists(source) and os.path.isfile(source):
            with open(source, "r", encoding="utf-8", errors="ignore") as f:
                for line in f:
                    yield line
        else:
            for line in io.StringIO(source):
                yield line
    elif hasattr(source, "read"):
        for line in source:  # type: ignore[assignment]
            yield line
    else:
        for line in source:
            yield line


def emit(text: str, sink: Sink) -> str:
    """Return `text`; also write it to `sink` (path is overwritten, file-like is appended to)."""
    if sink is None:
        return text
    if isinstance(sink, str):
        with open(sink, "w", encoding="utf-8", newline="") as fp:
            fp.write(text)
        return text
    if not hasattr(sink, "write"):
        raise TypeError("sink must be a path string, a file-like with .write, or None")
    sink.write(text)
    return text
