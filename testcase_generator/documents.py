"""
Document Reader

Extracts plain text from a requirements document. The reader is chosen by
file suffix; every failure surfaces as a DocumentError subclass.
"""

from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, List, Union
import logging

import docx
import fitz  # PyMuPDF

from .exceptions import DocumentNotFoundError, DocumentReadError, UnsupportedDocumentError

logger = logging.getLogger(__name__)


def read_txt_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError(str(path), f"Error reading TXT file: {e}") from e


def read_docx_file(path: Path) -> str:
    """Paragraph text first, then table rows (cells joined by tabs)."""
    try:
        document = docx.Document(str(path))
    except Exception as e:
        # python-docx raises a mix of zipfile, lxml and its own errors
        raise DocumentReadError(str(path), f"Error reading DOCX file: {e}") from e

    lines = [para.text for para in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append("\t".join(cells))

    return "\n".join(lines)


def read_pdf_file(path: Path) -> str:
    try:
        with fitz.open(str(path)) as pdf:
            return "\n".join(page.get_text("text") for page in pdf)
    except Exception as e:
        raise DocumentReadError(str(path), f"Error reading PDF file: {e}") from e


READERS: Dict[str, Callable[[Path], str]] = {
    ".txt": read_txt_file,
    ".docx": read_docx_file,
    ".pdf": read_pdf_file,
}

SUPPORTED_EXTENSIONS: List[str] = list(READERS)


def read_document(file_path: Union[str, Path]) -> str:
    """
    Read a TXT, DOCX or PDF document and return its text.

    Raises:
        DocumentNotFoundError: If the path does not point to a file
        UnsupportedDocumentError: If the suffix has no reader
        DocumentReadError: If extraction fails or yields no text
    """
    path = Path(file_path).expanduser()

    if not path.is_file():
        raise DocumentNotFoundError(str(path))

    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedDocumentError(str(path), SUPPORTED_EXTENSIONS)

    logger.info(f"Reading {path.suffix.lower().lstrip('.').upper()} document: {path}")
    text = reader(path)

    if not text or not text.strip():
        raise DocumentReadError(str(path), f"No text could be extracted from {path}")

    logger.debug(f"Extracted {len(text)} characters from {path}")
    return text
