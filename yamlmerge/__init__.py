"""
yamlmerge - Patch YAML files without losing their formatting.

Merges the top-level keys of a source YAML file into a destination file while
keeping the destination's quoting, comments and key order.
"""

__version__ = "0.1.0"

from yamlmerge.errors import (
    FileReadError,
    FileWriteError,
    MergeError,
    NotAMappingError,
    ParseError,
)
from yamlmerge.files import merge_files
from yamlmerge.merger import merge_documents

__all__ = [
    "merge_documents",
    "merge_files",
    "MergeError",
    "FileReadError",
    "ParseError",
    "NotAMappingError",
    "FileWriteError",
]
