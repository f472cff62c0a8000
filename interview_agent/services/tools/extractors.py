"""
Resume text extraction.

Resumes normally arrive as OCR output in a plain-text file; PDF files are
read with pypdf.
"""

# Standard Library Imports
import logging
from pathlib import Path

# Third-Party Imports
import pypdf
from pypdf.errors import PdfReadError

from interview_agent.core.exceptions import ResumeReadError

logger = logging.getLogger(__name__)


def _read_pdf(path_obj: Path) -> str:
    with open(path_obj, 'rb') as file:
        reader = pypdf.PdfReader(file)
        text_parts = [page.extract_text() or "" for page in reader.pages]
    logger.info(f"Extracted text from {len(text_parts)} PDF pages in {path_obj.name}")
    return "\n".join(text_parts)


def file_text_extractor(file_path: str) -> str:
    """
    Reads the full text of a resume file (.txt or .pdf).

    Args:
        file_path: The path to the resume file.

    Returns:
        The resume text.

    Raises:
        ResumeReadError: If the file is missing, unreadable, of an unsupported
            type, or contains no text.
    """
    path_obj = Path(file_path).resolve()
    suffix = path_obj.suffix.lower()

    try:
        if suffix == ".pdf":
            text = _read_pdf(path_obj)
        elif suffix == ".txt":
            text = path_obj.read_text(encoding="utf-8", errors="replace")
        else:
            raise ResumeReadError(f"Unsupported file type: {suffix or '(none)'}. Use .txt or .pdf.")
    except FileNotFoundError as e:
        raise ResumeReadError(f"The file at {file_path} was not found.") from e
    except PermissionError as e:
        raise ResumeReadError(f"Permission denied when accessing file: {file_path}") from e
    except PdfReadError as e:
        raise ResumeReadError(f"Could not read PDF {file_path}: {e}") from e

    if not text.strip():
        raise ResumeReadError(f"No text could be extracted from {file_path}.")

    logger.info(f"Read {len(text)} characters of resume text from {file_path}")
    return text
