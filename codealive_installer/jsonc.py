"""Format-preserving edits for tolerant JSON config files.

Several coding agents keep their settings in JSON files that allow comments
(``//`` and ``/* */``) and trailing commas. Rewriting such a file through
``json.load``/``json.dump`` would drop the comments and reorder or reformat
the user's settings, so this module parses the text into a tree that keeps
the source offsets of every value and applies edits to the original text.

Only the span of the member being inserted, replaced or removed is touched.
Everything else, including comments, key order, indentation and line
endings, is left byte-for-byte intact.
"""

import json
import logging
import os
import re
import shutil
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from codealive_installer.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Indentation used for inserted values
INDENT = 2

_WHITESPACE = " \t\r\n\ufeff"
_PUNCTUATION = "{}[]:,"
_LITERAL = re.compile(r"[^\s{}\[\]:,\"/]+")
_LINE_INDENT = re.compile(r"[ \t]*")
_FIRST_INDENTED_LINE = re.compile(r"\n([ \t]+)\S")


@dataclass(frozen=True)
class Token:
    """A lexical token with its source span."""

    kind: str  # one of "{}[]:," or "string", "literal", "comment"
    start: int
    end: int


@dataclass
class Member:
    """An object member: key, value and the comma that follows it, if any."""

    key: str
    key_start: int
    value: "Node"
    comma: Token | None = None


@dataclass
class Node:
    """A parsed value with its source span.

    Attributes:
        kind: "object", "array" or "value"
        start: Offset of the first character
        end: Offset just past the last character
        value: Python value for scalars
        members: Object members in source order
        items: Array items in source order
    """

    kind: str
    start: int
    end: int = -1
    value: Any = None
    members: list[Member] = field(default_factory=list)
    items: list["Node"] = field(default_factory=list)

    def find(self, key: str) -> Member | None:
        """Return the member for a key. Duplicate keys resolve to the last one."""
        for member in reversed(self.members):
            if member.key == key:
                return member
        return None

    def to_python(self) -> Any:
        if self.kind == "object":
            return {member.key: member.value.to_python() for member in self.members}
        if self.kind == "array":
            return [item.to_python() for item in self.items]
        return self.value


@dataclass(frozen=True)
class Edit:
    """Replace text[start:end] with text."""

    start: int
    end: int
    text: str


def _error(text: str, offset: int, message: str) -> ConfigError:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return ConfigError(f"{message} at line {line}, column {column}")


def tokenize(text: str) -> list[Token]:
    """Split tolerant JSON text into tokens, comments included.

    Raises:
        ConfigError: On unterminated strings or comments and stray characters
    """
    tokens: list[Token] = []
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]

        if ch in _WHITESPACE:
            i += 1
            continue

        if text.startswith("//", i):
            end = text.find("\n", i)
            end = length if end == -1 else end
            tokens.append(Token("comment", i, end))
            i = end
            continue

        if text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close == -1:
                raise _error(text, i, "Unterminated comment")
            tokens.append(Token("comment", i, close + 2))
            i = close + 2
            continue

        if ch in _PUNCTUATION:
            tokens.append(Token(ch, i, i + 1))
            i += 1
            continue

        if ch == '"':
            j = i + 1
            while j < length:
                c = text[j]
                if c == "\\":
                    j += 2
                    continue
                if c == '"':
                    break
                if c == "\n":
                    raise _error(text, i, "Unterminated string")
                j += 1
            else:
                raise _error(text, i, "Unterminated string")
            tokens.append(Token("string", i, j + 1))
            i = j + 1
            continue

        match = _LITERAL.match(text, i)
        if match is None:
            raise _error(text, i, f"Unexpected character {ch!r}")
        tokens.append(Token("literal", i, match.end()))
        i = match.end()

    return tokens


class _Parser:
    """Recursive-descent parser over the non-comment tokens."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = [t for t in tokenize(text) if t.kind != "comment"]
        self.pos = 0

    def parse_document(self) -> Node | None:
        if not self.tokens:
            return None
        node = self.parse_value()
        if self.pos < len(self.tokens):
            raise _error(
                self.text, self.tokens[self.pos].start, "Unexpected content after document"
            )
        return node

    def next(self) -> Token:
        if self.pos >= len(self.tokens):
            raise _error(self.text, len(self.text), "Unexpected end of input")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def parse_value(self) -> Node:
        token = self.next()
        if token.kind == "{":
            return self.parse_object(token)
        if token.kind == "[":
            return self.parse_array(token)
        if token.kind == "string":
            return Node("value", token.start, token.end, value=self.decode_string(token))
        if token.kind == "literal":
            return Node("value", token.start, token.end, value=self.decode_literal(token))
        raise _error(self.text, token.start, f"Unexpected {token.kind!r}")

    def parse_object(self, open_token: Token) -> Node:
        node = Node("object", open_token.start)
        while True:
            token = self.next()
            if token.kind == "}":
                node.end = token.end
                return node
            if token.kind != "string":
                raise _error(self.text, token.start, "Expected property name")
            colon = self.next()
            if colon.kind != ":":
                raise _error(self.text, colon.start, "Expected ':'")
            member = Member(
                key=self.decode_string(token),
                key_start=token.start,
                value=self.parse_value(),
            )
            node.members.append(member)

            token = self.next()
            if token.kind == ",":
                member.comma = token
                continue
            if token.kind == "}":
                node.end = token.end
                return node
            raise _error(self.text, token.start, "Expected ',' or '}'")

    def parse_array(self, open_token: Token) -> Node:
        node = Node("array", open_token.start)
        while True:
            if self.pos < len(self.tokens) and self.tokens[self.pos].kind == "]":
                node.end = self.next().end
                return node
            node.items.append(self.parse_value())
            token = self.next()
            if token.kind == "]":
                node.end = token.end
                return node
            if token.kind != ",":
                raise _error(self.text, token.start, "Expected ',' or ']'")

    def decode_string(self, token: Token) -> str:
        try:
            return json.loads(self.text[token.start:token.end], strict=False)
        except json.JSONDecodeError as e:
            raise _error(self.text, token.start, f"Invalid string ({e.msg})") from e

    def decode_literal(self, token: Token) -> Any:
        raw = self.text[token.start:token.end]
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise _error(self.text, token.start, f"Invalid value {raw!r}") from e


def parse_tree(text: str) -> Node | None:
    """Parse text into a span-annotated tree. Returns None for blank text."""
    return _Parser(text).parse_document()


def parse(text: str) -> Any:
    """Parse tolerant JSON into Python values.

    Args:
        text: Document text, possibly with comments and trailing commas

    Returns:
        The parsed value, or None if the text holds no value

    Raises:
        ConfigError: If the text is not valid tolerant JSON
    """
    tree = parse_tree(text)
    return None if tree is None else tree.to_python()


def read(path: Path) -> str:
    """Read a config file. A missing file reads as an empty string."""
    if not path.exists():
        return ""
    try:
        # newline="" keeps CRLF files intact on the way back out
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def write(path: Path, text: str) -> None:
    """Replace a config file's content.

    Parent directories are created as needed. The text goes to a temporary
    sibling first and is moved into place with os.replace, so readers see
    either the old or the new file. A symlinked config is written through
    to its target and the link is kept.

    Raises:
        ConfigError: If the file cannot be written
    """
    target = Path(os.path.realpath(path))
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if target.exists():
                shutil.copymode(target, tmp_path)
            os.replace(tmp_path, target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ConfigError(f"Cannot write {path}: {e}") from e
    logger.debug("Wrote %s", path)


def apply_edits(text: str, edits: Sequence[Edit]) -> str:
    """Apply non-overlapping edits.

    Edits at the same offset are inserted in the order given.
    """
    ordered = sorted(enumerate(edits), key=lambda pair: (pair[1].start, pair[0]), reverse=True)
    for _, edit in ordered:
        text = text[:edit.start] + edit.text + text[edit.end:]
    return text


def upsert(text: str, path: Sequence[str], value: Any) -> str:
    """Set the value at a key path, creating intermediate objects.

    Args:
        text: Current document text (may be empty)
        path: Object keys from the root, e.g. ["mcpServers", "codealive"]
        value: JSON-serializable value to store

    Returns:
        The edited text

    Raises:
        ConfigError: If the text cannot be parsed or its root is not an object

    Examples:
        >>> upsert('{\\n  // keep me\\n  "a": 1\\n}', ["b", "c"], 2)
        '{\\n  // keep me\\n  "a": 1,\\n  "b": {\\n    "c": 2\\n  }\\n}'
    """
    if not path:
        raise ValueError("path cannot be empty")

    eol = _line_ending(text)
    root = parse_tree(text)
    if root is None:
        document = _serialize(_nest(path, value), "", "\n") + "\n"
        if text.strip():
            # Comment-only file: keep the comments above the new document
            return text.rstrip() + eol + document.replace("\n", eol)
        return document
    if root.kind != "object":
        raise ConfigError("Config root is not a JSON object")

    node = root
    for depth, key in enumerate(path):
        remaining = path[depth + 1:]
        member = node.find(key)
        if member is None:
            return apply_edits(text, _insert_member(text, node, key, _nest(remaining, value)))
        if not remaining:
            return apply_edits(text, [_replace_value(text, member, value)])
        if member.value.kind != "object":
            return apply_edits(text, [_replace_value(text, member, _nest(remaining, value))])
        node = member.value

    return text  # unreachable, the loop always returns


def remove(text: str, path: Sequence[str]) -> str:
    """Delete the member at a key path.

    Comments and whitespace outside the member are kept. A comment on the
    same line after the member is treated as part of it.

    Args:
        text: Current document text
        path: Object keys from the root

    Returns:
        The edited text, or the input unchanged if the key or any parent
        object does not exist

    Raises:
        ConfigError: If the text cannot be parsed
    """
    if not path:
        raise ValueError("path cannot be empty")

    root = parse_tree(text)
    if root is None or root.kind != "object":
        return text

    node = root
    for key in path[:-1]:
        member = node.find(key)
        if member is None or member.value.kind != "object":
            return text
        node = member.value

    target = node.find(path[-1])
    if target is None:
        return text
    index = max(i for i, m in enumerate(node.members) if m is target)
    return apply_edits(text, _remove_member(text, node, index))


def _nest(path: Sequence[str], value: Any) -> Any:
    for key in reversed(path):
        value = {key: value}
    return value


def _line_ending(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _line_indent(text: str, offset: int) -> str:
    """Leading whitespace of the line containing offset."""
    line_start = text.rfind("\n", 0, offset) + 1
    match = _LINE_INDENT.match(text, line_start)
    return match.group(0) if match else ""


def _indent_unit(text: str) -> str:
    """Indentation step used by the document, two spaces if it has none."""
    match = _FIRST_INDENTED_LINE.search(text)
    if match is None:
        return " " * INDENT
    indent = match.group(1)
    return "\t" if indent.startswith("\t") else indent


def _serialize(value: Any, base_indent: str, eol: str, unit: str = " " * INDENT) -> str:
    return json.dumps(value, indent=unit, ensure_ascii=False).replace("\n", eol + base_indent)


def _end_of_line_comments(text: str, offset: int) -> int:
    """Move offset past comments that follow it on the same line."""
    end = offset
    i = offset
    while True:
        while i < len(text) and text[i] in " \t":
            i += 1
        if text.startswith("//", i):
            newline = text.find("\n", i)
            if newline == -1:
                return len(text)
            return newline - 1 if text[newline - 1] == "\r" else newline
        if text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close == -1 or "\n" in text[i:close]:
                return end
            i = end = close + 2
            continue
        return end


def _replace_value(text: str, member: Member, value: Any) -> Edit:
    indent = _line_indent(text, member.key_start)
    return Edit(
        member.value.start,
        member.value.end,
        _serialize(value, indent, _line_ending(text), _indent_unit(text)),
    )


def _insert_member(text: str, obj: Node, key: str, value: Any) -> list[Edit]:
    eol = _line_ending(text)
    unit = _indent_unit(text)
    encoded_key = json.dumps(key, ensure_ascii=False)

    if not obj.members:
        open_indent = _line_indent(text, obj.start)
        child_indent = open_indent + unit
        entry = f"{encoded_key}: {_serialize(value, child_indent, eol, unit)}"
        inner_start, inner_end = obj.start + 1, obj.end - 1
        if not text[inner_start:inner_end].strip():
            return [Edit(inner_start, inner_end, eol + child_indent + entry + eol + open_indent)]
        # Keep comments that live inside an otherwise empty object
        return [Edit(inner_start, inner_start, eol + child_indent + entry)]

    last = obj.members[-1]
    if "\n" not in text[obj.start:obj.end]:
        # Single-line objects stay on one line
        entry = f"{encoded_key}: {json.dumps(value, ensure_ascii=False)}"
        if last.comma is None:
            return [Edit(last.value.end, last.value.end, f", {entry}")]
        return [Edit(last.comma.end, last.comma.end, f" {entry}")]

    if "\n" in text[obj.start:last.key_start]:
        indent = _line_indent(text, last.key_start)
    else:
        indent = _line_indent(text, obj.start) + unit
    entry = f"{encoded_key}: {_serialize(value, indent, eol, unit)}"

    edits: list[Edit] = []
    if last.comma is None:
        edits.append(Edit(last.value.end, last.value.end, ","))
        anchor = last.value.end
    else:
        anchor = last.comma.end
    anchor = _end_of_line_comments(text, anchor)
    edits.append(Edit(anchor, anchor, eol + indent + entry))
    return edits


def _blank_line_start(text: str, offset: int) -> int:
    """Start of the line break before offset if only indentation precedes it."""
    newline = text.rfind("\n", 0, offset)
    if newline == -1 or text[newline + 1:offset].strip():
        return offset
    if newline > 0 and text[newline - 1] == "\r":
        return newline - 1
    return newline


def _next_content(text: str, offset: int) -> int:
    while offset < len(text) and text[offset] in _WHITESPACE:
        offset += 1
    return offset


def _remove_member(text: str, obj: Node, index: int) -> list[Edit]:
    members = obj.members
    member = members[index]
    end = member.comma.end if member.comma is not None else member.value.end
    end = _end_of_line_comments(text, end)

    if index + 1 < len(members):
        # The next member (or a comment above it) moves into this member's place
        return [Edit(member.key_start, _next_content(text, end), "")]

    if len(members) == 1:
        inner = text[obj.start + 1:member.key_start] + text[end:obj.end - 1]
        if not inner.strip():
            return [Edit(obj.start + 1, obj.end - 1, "")]
        return [Edit(_blank_line_start(text, member.key_start), end, "")]

    edits: list[Edit] = []
    previous = members[index - 1]
    if previous.comma is not None and member.comma is None:
        edits.append(Edit(previous.comma.start, previous.comma.end, ""))
    edits.append(Edit(_blank_line_start(text, member.key_start), end, ""))
    return edits
