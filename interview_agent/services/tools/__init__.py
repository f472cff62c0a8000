"""Tools module for the interview table pipeline."""
from .extractors import (
    file_text_extractor,
)

__all__ = [
    "file_text_extractor",
]
