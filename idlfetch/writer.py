"""
IDL Document Writer for idlfetch.

Writes a decoded document as pretty JSON. Output is stable: two-space
indent, sorted keys, UTF-8, trailing newline. The file is written to a
temporary sibling and renamed into place, so a failed write never
leaves a partial document behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Union

from .errors import ErrorKind, IdlError


logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".json"


def output_path_for(program_id: str, directory: Union[str, Path] = ".") -> Path:
    """Return ``<directory>/<program_id>.json``."""
    return Path(directory) / f"{program_id}{OUTPUT_SUFFIX}"


def render_document(document: Any) -> str:
    """Serialize a document to its stable pretty text form."""
    return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def write_document(document: Any, path: Union[str, Path]) -> Path:
    """
    Write ``document`` to ``path``, replacing any existing file.

    Raises:
        IdlError: IO if any filesystem operation fails
    """
    target = Path(path)
    data = render_document(document).encode("utf-8")
    tmp_name = None

    try:
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(data)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as e:
        raise IdlError(
            ErrorKind.IO,
            f"IO error: cannot write {target}: {e}",
            cause=e,
            path=str(target),
        ) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.info("Wrote %d bytes to %s", len(data), target)
    return target
