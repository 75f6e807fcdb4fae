"""SessionInfoParser — converts iRacing session-info text into nested dicts/lists.

The simulator publishes session info as YAML-looking text that is not valid
YAML (indentation drifts between sections, list items mix ``- key: value``
with bare dashes). Instead of a YAML grammar this module runs a stack-based
reducer that decides every ambiguous shape by peeking at the next non-blank
line. Lines that do not fit the current container are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from iracing_feed.session.scalar import classify

SessionNode = Union[str, int, float, bool, None, dict[str, "SessionNode"], list["SessionNode"]]

# Matches C isspace(): what the SDK considers whitespace when trimming.
_WHITESPACE = " \t\n\v\f\r"


@dataclass(frozen=True)
class RawLine:
    """One line of session text with its leading-whitespace width."""

    indent: int
    text: str
    """Content with surrounding whitespace removed. Empty for blank lines."""

    @property
    def is_blank(self) -> bool:
        return not self.text

    @property
    def is_list_item(self) -> bool:
        return self.text.startswith("-")


@dataclass
class _Frame:
    indent: int
    is_list: bool
    container: dict | list
    is_item: bool = False
    """Mapping wrapping a ``- key: value`` list item; ``indent`` is the dash column."""

    def closed_by(self, line: RawLine) -> bool:
        if self.indent < 0:
            return False
        if self.is_item:
            return line.indent <= self.indent
        if self.is_list:
            # Dashes may sit at the parent key's column; a key there ends the list.
            return line.indent < self.indent or (
                line.indent == self.indent and not line.is_list_item
            )
        return line.indent < self.indent


def _leading_indent(line: str) -> int:
    indent = 0
    for ch in line:
        if ch not in (" ", "\t"):
            break
        indent += 1
    return indent


def split_lines(text: str) -> list[RawLine]:
    """Split *text* on ``\\n`` after removing every carriage return."""
    return [
        RawLine(indent=_leading_indent(line), text=line.strip(_WHITESPACE))
        for line in text.replace("\r", "").split("\n")
    ]


def _peek(lines: list[RawLine], start: int) -> RawLine | None:
    """Return the first non-blank line at or after *start*."""
    for index in range(start, len(lines)):
        if not lines[index].is_blank:
            return lines[index]
    return None


def _open_child(next_line: RawLine | None, indent: int) -> _Frame:
    """Frame for the container an empty value introduces; its key starts at column *indent*.

    The next non-blank line decides its kind: a dash opens a list, anything
    else a mapping. A dash left of the key line belongs to an enclosing list,
    so the value is an empty mapping.
    """
    if next_line is None:
        return _Frame(indent + 1, False, {})
    if next_line.is_list_item and next_line.indent >= indent:
        return _Frame(next_line.indent, True, [])
    if next_line.indent > indent:
        return _Frame(next_line.indent, False, {})
    return _Frame(indent + 1, False, {})


def _split_key_value(text: str) -> tuple[str, str] | None:
    key, sep, value = text.partition(":")
    if not sep:
        return None
    return key.strip(_WHITESPACE), value.strip(_WHITESPACE)


def parse_session_info(text: str) -> dict[str, SessionNode]:
    """Parse session-info *text* into a dict. Never raises on malformed input."""
    lines = split_lines(text)
    root: dict[str, SessionNode] = {}
    stack = [_Frame(indent=-1, is_list=False, container=root)]

    for i, line in enumerate(lines):
        if line.is_blank:
            continue

        indent = line.indent
        while stack[-1].closed_by(line):
            stack.pop()
        current = stack[-1]

        if line.is_list_item:
            if not current.is_list:
                continue
            items = current.container
            item_text = line.text[1:].strip(_WHITESPACE)

            if not item_text:
                # The item starts past the dash; a dash at the same column is a sibling.
                next_line = _peek(lines, i + 1)
                child = _open_child(next_line, indent + 1)
                items.append(child.container)
                stack.append(child)
                continue

            pair = _split_key_value(item_text)
            if pair is None:
                items.append(classify(item_text))
                continue

            key, raw_value = pair
            wrapper: dict[str, SessionNode] = {}
            next_line = _peek(lines, i + 1)
            if not raw_value:
                child = _open_child(next_line, indent + 1)
                wrapper[key] = child.container
                items.append(wrapper)
                stack.append(_Frame(indent, False, wrapper, is_item=True))
                stack.append(child)
            else:
                wrapper[key] = classify(raw_value)
                items.append(wrapper)
                # Continuation lines of this item belong to the wrapper mapping.
                if next_line is not None and next_line.indent > indent:
                    stack.append(_Frame(indent, False, wrapper, is_item=True))
            continue

        if current.is_list:
            continue

        pair = _split_key_value(line.text)
        if pair is None:
            continue
        key, raw_value = pair
        mapping = current.container
        if not raw_value:
            next_line = _peek(lines, i + 1)
            child = _open_child(next_line, indent)
            mapping[key] = child.container
            stack.append(child)
        else:
            mapping[key] = classify(raw_value)

    return root


class SessionInfoParser:
    """Parses the simulator's session-info text into a nested dict.

    Stateless; one instance may be shared between threads.
    """

    def parse(self, text: str | None) -> dict[str, SessionNode] | None:
        """Return the parsed tree for *text*, or None when there is no text."""
        if not text:
            return None
        return parse_session_info(text)
