"""Resume file validation for the interview table pipeline."""

from pathlib import Path
from typing import Dict, Optional, Set
import logging

from interview_agent.core.exceptions import ResumeReadError


class FileValidator:
    """
    Validates resume files before they are read.

    Responsibilities:
    - Check file exists
    - Validate file size (configurable max)
    - Verify file extension
    - Validate PDF content via magic bytes
    """

    VALID_EXTENSIONS: Set[str] = {'.txt', '.pdf'}

    # Magic bytes for MIME type detection
    MIME_SIGNATURES: Dict[str, bytes] = {
        '.pdf': b'%PDF',
    }

    # Default max file size: 10MB
    MAX_FILE_SIZE_BYTES: int = 10 * 1024 * 1024

    def __init__(self, logger: Optional[logging.Logger] = None, max_size_mb: Optional[int] = None):
        """
        Initialize file validator.

        Args:
            logger: Logger instance (optional)
            max_size_mb: Maximum file size in MB (optional, defaults to 10MB)
        """
        self.logger = logger or logging.getLogger(__name__)
        if max_size_mb is not None:
            self.MAX_FILE_SIZE_BYTES = max_size_mb * 1024 * 1024

    def validate(self, file_path: str) -> None:
        """
        Validate resume file.

        Args:
            file_path: Path to file to validate

        Raises:
            ResumeReadError: If the file is missing, empty, too large, has an
                unsupported extension or content that does not match it
        """
        path = Path(file_path)

        if not path.exists():
            raise ResumeReadError(f"Resume file not found: {file_path}")

        if not path.is_file():
            raise ResumeReadError(f"Path is not a file: {file_path}")

        file_size = path.stat().st_size

        if file_size == 0:
            raise ResumeReadError(f"Resume file is empty: {file_path}")

        if file_size > self.MAX_FILE_SIZE_BYTES:
            max_mb = self.MAX_FILE_SIZE_BYTES / (1024 * 1024)
            actual_mb = file_size / (1024 * 1024)
            raise ResumeReadError(
                f"Resume file too large: {actual_mb:.1f}MB exceeds {max_mb:.0f}MB limit"
            )

        extension = path.suffix.lower()
        if extension not in self.VALID_EXTENSIONS:
            raise ResumeReadError(
                f"Invalid file extension: {extension or '(none)'}. "
                f"Supported: {', '.join(sorted(self.VALID_EXTENSIONS))}"
            )

        self._validate_signature(path, extension)

        self.logger.info(f"Resume validation passed: {file_path} ({file_size / 1024:.1f}KB)")

    def _validate_signature(self, path: Path, extension: str) -> None:
        expected_signature = self.MIME_SIGNATURES.get(extension)
        if expected_signature is None:
            return

        try:
            with open(path, 'rb') as f:
                file_header = f.read(len(expected_signature))
        except OSError as e:
            # Reading will be retried (and reported) by the extractor
            self.logger.warning(f"Could not read file for signature check: {e}")
            return

        if not file_header.startswith(expected_signature):
            raise ResumeReadError(
                f"File content does not match {extension} format. "
                f"File may be corrupted or have wrong extension."
            )
