"""Format-preserving merge of one YAML mapping into another."""

import logging
from typing import Any, Dict

from ruamel.yaml.comments import CommentedMap

from yamlmerge.errors import DESTINATION, SOURCE, NotAMappingError
from yamlmerge.yaml_util import (
    NodeKind,
    copy_value_comments,
    lines_after,
    node_kind,
    set_lines_after,
    set_value,
)

logger = logging.getLogger(__name__)


def _replace_entry(destination: CommentedMap, key: Any,
                   source: CommentedMap, source_key: Any) -> None:
    """Put the source value under an existing destination key.

    The value and its comments come from the source. The lines below the old
    value lead into the next destination entry, so they move below the new
    one; the source's own lines below the value are dropped.
    """
    below = lines_after(destination, key)
    set_value(destination, key, source[source_key])
    copy_value_comments(source, source_key, destination, key)
    set_lines_after(destination, key, below)


def _append_entry(destination: CommentedMap, key: Any, source: CommentedMap,
                  leading: str, last: bool) -> None:
    """Add a source entry after the last destination entry.

    ``leading`` holds the source lines above the entry, which ruamel keeps
    on the entry before it. They go below the current last destination
    entry. Unless this is the last source entry, the lines below it lead
    into a source entry that may not follow it here, so they are dropped.
    """
    if leading and len(destination):
        previous = list(destination)[-1]
        set_lines_after(destination, previous, lines_after(destination, previous) + leading)
    destination[key] = source[key]
    comment = source.ca.items.get(key)
    if comment is not None:
        destination.ca.items[key] = comment
    if not last:
        set_lines_after(destination, key, "")


def merge_documents(source: Any, destination: Any) -> CommentedMap:
    """Merge the top-level entries of ``source`` into ``destination``.

    The destination is mutated in place and returned:

    - a source key already in the destination replaces that entry's value.
      The destination key object keeps its quoting and the comments around
      the key stay. The value brings its own formatting from the source,
      end-of-line comment included.
    - a source key missing from the destination is appended after all
      existing entries, as written in the source (key quoting, comments and
      the comment lines above it).

    Keys match on their decoded string, so ``'key2'`` and ``key2`` are the
    same key. Source keys that are not string scalars (numbers, booleans,
    null, complex keys) have nothing to match on and are skipped. Non-string
    keys in the destination are left untouched.

    Args:
        source: Round-trip tree of the source document
        destination: Round-trip tree of the destination document

    Returns:
        The destination tree

    Raises:
        NotAMappingError: if either top-level node is not a mapping
    """
    if node_kind(source) is not NodeKind.MAPPING:
        raise NotAMappingError(SOURCE)
    if node_kind(destination) is not NodeKind.MAPPING:
        raise NotAMappingError(DESTINATION)

    # Index first, mutate after
    index: Dict[str, Any] = {}
    for key in destination:
        if node_kind(key) is NodeKind.STRING:
            index[str(key)] = key

    source_keys = list(source)
    leading = {
        key: lines_after(source, previous)
        for previous, key in zip(source_keys, source_keys[1:])
    }

    replaced = appended = 0
    for key in source_keys:
        kind = node_kind(key)
        if kind is not NodeKind.STRING:
            logger.debug("Skipping source key %r: %s keys are not merged", key, kind.value)
            continue

        name = str(key)
        if name in index:
            _replace_entry(destination, index[name], source, key)
            replaced += 1
        else:
            _append_entry(destination, key, source, leading.get(key, ""), key is source_keys[-1])
            index[name] = key
            appended += 1

    logger.debug("Merged %d replaced and %d appended keys", replaced, appended)
    return destination
