"""File boundary for tessera documents.

The parser itself never touches the filesystem and never raises. Reading a
file is the one place a hard failure can happen; it is reported as
DocumentReadError so callers have a single exception to handle.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from tessera.config import ParseConfig
from tessera.errors import DocumentReadError
from tessera.nodes import Document
from tessera.parser import parse
from tessera.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ENCODING = "utf-8"


def read_source(path: str | PathLike[str], *, encoding: str = DEFAULT_ENCODING) -> str:
    """Read a document's text.

    Args:
        path: File to read
        encoding: Text encoding (default UTF-8)

    Returns:
        File contents

    Raises:
        DocumentReadError: The file is missing, unreadable or not valid text
            in ``encoding``
    """
    file_path = Path(path)
    try:
        return file_path.read_text(encoding=encoding)
    except FileNotFoundError as e:
        logger.error("Document not found: %s", file_path)
        raise DocumentReadError(str(file_path), "file not found") from e
    except UnicodeDecodeError as e:
        logger.error("Document %s is not valid %s: %s", file_path, encoding, e)
        raise DocumentReadError(str(file_path), f"not valid {encoding} text") from e
    except OSError as e:
        logger.error("Failed to read %s: %s", file_path, e)
        raise DocumentReadError(str(file_path), e.strerror or str(e)) from e


def read_document(
    path: str | PathLike[str],
    *,
    encoding: str = DEFAULT_ENCODING,
    config: ParseConfig | None = None,
) -> Document:
    """Read and parse a document file.

    Parse errors are recorded on the returned Document; only I/O problems
    raise.

    Args:
        path: File to read
        encoding: Text encoding (default UTF-8)
        config: Optional ParseConfig for this parse

    Returns:
        Parsed Document with ``source_file`` set to ``path``

    Raises:
        DocumentReadError: The file could not be read
    """
    source = read_source(path, encoding=encoding)
    document = parse(source, config=config, source_file=str(path))
    if document.error_count:
        logger.info("%s parsed with %d error(s)", path, document.error_count)
    return document


__all__ = ["DEFAULT_ENCODING", "read_document", "read_source"]
