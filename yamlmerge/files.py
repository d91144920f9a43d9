"""Read, merge and write YAML files."""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ruamel.yaml.error import YAMLError

from yamlmerge.config import get_settings
from yamlmerge.errors import FileReadError, FileWriteError, ParseError
from yamlmerge.merger import merge_documents
from yamlmerge.yaml_util import dump_yaml, guess_indent, has_document_start, parse_yaml

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a whole file as UTF-8 text."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, e) from e


def parse_text(text: str, path: Path) -> Any:
    """Parse file content, tagging failures with the file they came from."""
    try:
        return parse_yaml(text)
    except YAMLError as e:
        raise ParseError(path, e) from e


def write_text(path: Path, text: str, atomic: bool = False) -> None:
    """Overwrite a file with new content.

    The default truncates the file and writes in place, so a failure halfway
    can leave it empty. With ``atomic`` the content goes to a temporary file
    next to the target, which is then renamed over it.

    Args:
        path: File to overwrite
        text: New content
        atomic: Write through a temporary file and rename

    Raises:
        FileWriteError: if the file cannot be written
    """
    try:
        if not atomic:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
            return

        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            if path.exists():
                shutil.copymode(path, temp_path)
            os.replace(temp_path, path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
    except OSError as e:
        raise FileWriteError(path, e) from e


def merge_files(
    source_path: Union[str, Path],
    dest_path: Union[str, Path],
    settings: Optional[Dict[str, Any]] = None,
    dry_run: bool = False,
) -> str:
    """Merge the source YAML file into the destination file.

    Both files are read and parsed before anything is written; the
    destination is only touched once the merged text is ready. The output
    keeps the destination's block indentation unless ``settings`` names
    an indent explicitly.

    Args:
        source_path: File whose keys win
        dest_path: File to update (its formatting is kept)
        settings: Output settings as in a config file (see yamlmerge.config).
            Missing keys take their defaults.
        dry_run: Return the merged text without writing it

    Returns:
        The merged YAML text

    Raises:
        MergeError: FileReadError, ParseError, NotAMappingError or
            FileWriteError, for the first stage that fails
    """
    source_path = Path(source_path)
    dest_path = Path(dest_path)

    source_text = read_text(source_path)
    dest_text = read_text(dest_path)
    logger.debug("Read %d characters from %s and %d from %s",
                 len(source_text), source_path, len(dest_text), dest_path)

    source = parse_text(source_text, source_path)
    destination = parse_text(dest_text, dest_path)

    # Layout must be read before the merge puts source values in the tree
    settings = get_settings(settings or {}, guess_indent(dest_text, destination))
    merged = merge_documents(source, destination)

    if has_document_start(dest_text):
        settings["explicit_start"] = True
    output = dump_yaml(merged, settings)

    if dry_run:
        logger.info("Dry run, not writing %s", dest_path)
    else:
        write_text(dest_path, output, atomic=bool(settings.get("atomic_write")))
        logger.info("Wrote merged YAML to %s", dest_path)
    return output
