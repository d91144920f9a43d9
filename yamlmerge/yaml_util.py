"""YAML utilities using ruamel.yaml for comment-preserving round-trip editing."""

import logging
from collections.abc import Mapping, Set
from enum import Enum
from io import StringIO
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.constructor import RoundTripConstructor
from ruamel.yaml.error import CommentMark, YAMLError
from ruamel.yaml.scalarstring import PlainScalarString, ScalarString
from ruamel.yaml.tokens import CommentToken
from ruamel.yaml.util import load_yaml_guess_indent

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Kinds of node a loaded round-trip tree can hold."""

    STRING = "string"
    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SET = "set"


def node_kind(node: Any) -> NodeKind:
    """Classify a loaded node.

    Quoted, literal and folded strings are ``str`` subclasses, so every
    string scalar is ``STRING`` whatever its quoting. Complex keys load as
    ``CommentedKeyMap`` / ``CommentedKeySeq`` and land in ``MAPPING`` /
    ``SEQUENCE``. Aliases are already resolved to the node they point at.
    """
    if isinstance(node, str):
        return NodeKind.STRING
    if isinstance(node, Mapping):
        return NodeKind.MAPPING
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    if isinstance(node, Set):
        return NodeKind.SET
    return NodeKind.SCALAR


def set_value(mapping: CommentedMap, key: Any, value: Any) -> None:
    """Replace the value of an existing key, keeping the key object in place.

    CommentedMap converts a plain string assigned over a quoted one to the
    old quote style. Wrapping it as PlainScalarString keeps the new value's
    own (plain) style.
    """
    if isinstance(value, str) and not isinstance(value, ScalarString):
        value = PlainScalarString(value)
    mapping[key] = value


def _is_block_collection(node: Any) -> bool:
    return (
        isinstance(node, (CommentedMap, CommentedSeq))
        and len(node) > 0
        and not node.fa.flow_style()
    )


def _last_line_owner(parent: Any, key: Any) -> Tuple[Any, Any]:
    """Find the entry whose comment slot is written after ``parent[key]``.

    ruamel stores whatever follows a block collection on its deepest last
    entry, not on the key that holds the collection.
    """
    value = parent[key]
    while _is_block_collection(value):
        parent = value
        key = list(value)[-1] if isinstance(value, CommentedMap) else len(value) - 1
        value = parent[key]
    return parent, key


def _post_index(node: Any) -> int:
    # Mapping slots are [key eol, key pre, value post, value pre]; sequence
    # slots start with the item's post comment
    return 2 if isinstance(node, CommentedMap) else 0


def _post_comment(node: Any, key: Any) -> Optional[CommentToken]:
    slots = node.ca.items.get(key)
    return slots[_post_index(node)] if slots else None


def _set_post_comment(node: Any, key: Any, token: Optional[CommentToken]) -> None:
    if token is None and key not in node.ca.items:
        return
    slots = node.ca.items.setdefault(key, [None, None, None, None])
    slots[_post_index(node)] = token
    value = node[key]
    # A flow collection repeats its end-of-line comment on itself
    if isinstance(value, (CommentedMap, CommentedSeq)) and value.ca.comment:
        value.ca.comment[0] = token


def _split_post_comment(token: Optional[CommentToken]) -> Tuple[str, str]:
    """Split a post comment into its end-of-line part and the lines below.

    A token that starts on the value's own line begins with ``#``; one that
    starts further down begins with a newline and has no end-of-line part.
    """
    if token is None:
        return "", ""
    eol, newline, below = token.value.partition("\n")
    if not eol:
        return "", below
    return eol + newline, below


def lines_after(parent: Any, key: Any) -> str:
    """Return the blank and comment lines written below ``parent[key]``.

    These lead into whatever entry comes next, so they belong to that entry
    rather than to the value they are stored with.
    """
    owner, owner_key = _last_line_owner(parent, key)
    return _split_post_comment(_post_comment(owner, owner_key))[1]


def set_lines_after(parent: Any, key: Any, lines: str) -> None:
    """Replace the blank and comment lines written below ``parent[key]``.

    An end-of-line comment on the value's last line is kept.
    """
    owner, owner_key = _last_line_owner(parent, key)
    token = _post_comment(owner, owner_key)
    eol, _ = _split_post_comment(token)
    if eol or lines:
        column = token.start_mark.column if eol else 0
        token = CommentToken((eol or "\n") + lines, CommentMark(column), None)
    else:
        token = None
    _set_post_comment(owner, owner_key, token)


def copy_value_comments(source: CommentedMap, source_key: Any,
                        target: CommentedMap, key: Any) -> None:
    """Give ``target[key]`` the value comments of ``source[source_key]``.

    The comment slots of the target key itself are left alone.
    """
    source_slots = source.ca.items.get(source_key)
    if source_slots is None and key not in target.ca.items:
        return
    slots = target.ca.items.setdefault(key, [None, None, None, None])
    slots[2:] = source_slots[2:] if source_slots else [None, None]


class LastKeyWinsConstructor(RoundTripConstructor):
    """Round-trip constructor where a repeated key overrides the earlier value.

    The entry stays at the position where the key first appeared. Only the
    value is taken from the later occurrence: its comments are dropped,
    including the blank and comment lines that lead into the entry after
    it, and the first occurrence's comment slots stay.
    """

    def check_mapping_key(self, node, key_node, mapping, key, value):
        if key in mapping:
            logger.debug("Duplicate key %r at %s, keeping last value", key, key_node.start_mark)
            set_value(mapping, key, value)
            return False
        return True


def _make_yaml(settings: Optional[Dict[str, Any]] = None) -> YAML:
    """Create a configured YAML instance for round-trip operations."""
    yml = YAML()
    yml.preserve_quotes = True
    yml.Constructor = LastKeyWinsConstructor
    if settings:
        indent = settings.get("indent")
        if indent:
            yml.indent(
                mapping=indent.get("mapping"),
                sequence=indent.get("sequence"),
                offset=indent.get("offset"),
            )
        if settings.get("width"):
            yml.width = settings["width"]
        if settings.get("explicit_start"):
            yml.explicit_start = True
    return yml


def _is_blank(text: str) -> bool:
    """True if the text holds only whitespace, comments and document markers."""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped in ("---", "..."):
            continue
        return False
    return True


def has_document_start(text: str) -> bool:
    """Check whether the document opens with an explicit ``---`` marker."""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("%"):
            continue
        return stripped == "---" or stripped.startswith("--- ")
    return False


def _nested_mapping_indent(node: Any) -> Optional[int]:
    """Find how far the first block mapping nested in a mapping is indented."""
    if isinstance(node, CommentedMap):
        for key, value in node.items():
            if isinstance(value, CommentedMap) and _is_block_collection(value):
                return value.lc.col - node.lc.key(key)[1]
            found = _nested_mapping_indent(value)
            if found is not None:
                return found
    elif isinstance(node, CommentedSeq):
        for item in node:
            found = _nested_mapping_indent(item)
            if found is not None:
                return found
    return None


def guess_indent(text: str, data: Any) -> Dict[str, int]:
    """Work out the block layout a document was written with.

    Args:
        text: YAML content
        data: The same content, already loaded by parse_yaml

    Returns:
        Indent settings (``mapping``, ``sequence``, ``offset``) for what the
        document shows. A flat document gives an empty dict.
    """
    indent: Dict[str, int] = {}
    mapping = _nested_mapping_indent(data)
    if mapping:
        indent["mapping"] = mapping

    try:
        _, sequence, offset = load_yaml_guess_indent(text)
    except (YAMLError, IndexError) as e:
        # The guesser loads with stock duplicate-key checks and indexes past
        # bare "-" lines
        logger.debug("Could not guess sequence indent: %s", e)
        return indent
    if sequence is not None and offset is not None:
        indent["sequence"] = sequence
        indent["offset"] = offset
    logger.debug("Guessed indent %s", indent)
    return indent


def parse_yaml(text: str) -> Any:
    """Parse a single YAML document into a round-trip tree.

    Args:
        text: YAML content

    Returns:
        The loaded top-level node. Empty or comment-only text gives an empty
        CommentedMap; an explicit null document gives None.

    Raises:
        ruamel.yaml.error.YAMLError: on syntax errors or multi-document input
    """
    data = _make_yaml().load(text)
    if data is None and _is_blank(text):
        return CommentedMap()
    return data


def dump_yaml(data: Any, settings: Optional[Dict[str, Any]] = None) -> str:
    """Serialize a round-trip tree back to YAML text."""
    stream = StringIO()
    _make_yaml(settings).dump(data, stream)
    return stream.getvalue()
