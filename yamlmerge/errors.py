"""Exceptions raised while merging YAML files."""

from pathlib import Path
from typing import Union

SOURCE = "source"
DESTINATION = "destination"


class MergeError(Exception):
    """Base class for every failure of a merge run."""


class FileReadError(MergeError):
    """A source or destination file could not be read."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to read {self.path}: {cause}")


class ParseError(MergeError):
    """A file was read but is not valid single-document YAML."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to parse YAML in {self.path}: {cause}")


class NotAMappingError(MergeError):
    """The top level of a document is a scalar or a sequence."""

    def __init__(self, side: str):
        if side not in (SOURCE, DESTINATION):
            raise ValueError(f"Unknown document side: {side}")
        self.side = side
        super().__init__(f"{side.capitalize()} YAML is not a mapping")


class FileWriteError(MergeError):
    """The merged document could not be written to the destination."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write merged YAML to {self.path}: {cause}")


class ConfigError(Exception):
    """The settings file is missing, unreadable or malformed."""

    def __init__(self, path: Union[str, Path], cause: Union[str, Exception]):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Invalid config file {self.path}: {cause}")
