"""Positioned JSON parsing.

The standard library parser only reports where it gave up, which is not enough
to highlight the offending token. This parser keeps character offsets on every
node and reports errors the way editors expect them::

    Unexpected token <,>
    Unexpected symbol <'>
    Unexpected end of input
"""

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from theme_lens.core.errors import JSONParseError

_WHITESPACE = frozenset(" \t\n\r")
_PUNCTUATION = frozenset("{}[]:,")
_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_LITERALS: dict[str, Any] = {"true": True, "false": False, "null": None}


@dataclass(kw_only=True)
class JSONNode:
    start: int
    end: int


@dataclass(kw_only=True)
class JSONLiteral(JSONNode):
    value: Any
    raw: str


@dataclass(kw_only=True)
class JSONIdentifier(JSONNode):
    value: str


@dataclass(kw_only=True)
class JSONArray(JSONNode):
    children: list["JSONValue"] = field(default_factory=list)


@dataclass(kw_only=True)
class JSONProperty(JSONNode):
    key: JSONIdentifier
    value: "JSONValue"


@dataclass(kw_only=True)
class JSONObject(JSONNode):
    children: list[JSONProperty] = field(default_factory=list)

    def get(self, key: str) -> JSONProperty | None:
        for prop in reversed(self.children):
            if prop.key.value == key:
                return prop
        return None


JSONValue = Union[JSONObject, JSONArray, JSONLiteral]


@dataclass(frozen=True)
class _Token:
    kind: str
    value: Any
    start: int
    end: int


def parse_json(source: str) -> JSONValue:
    """Parse ``source`` into a positioned tree, raising ``JSONParseError``."""
    tokens = _tokenize(source)
    return _Parser(source, tokens).parse()


def to_value(node: JSONValue) -> Any:
    if isinstance(node, JSONLiteral):
        return node.value
    root = _empty_container(node)
    stack: list[tuple[JSONObject | JSONArray, Any]] = [(node, root)]
    while stack:
        current, target = stack.pop()
        if isinstance(current, JSONObject):
            items: Iterable[tuple[Any, JSONValue]] = ((prop.key.value, prop.value) for prop in current.children)
        else:
            items = enumerate(current.children)
        for key, child in items:
            if isinstance(child, JSONLiteral):
                target[key] = child.value
            else:
                target[key] = _empty_container(child)
                stack.append((child, target[key]))
    return root


def _empty_container(node: JSONObject | JSONArray) -> Any:
    return {} if isinstance(node, JSONObject) else [None] * len(node.children)


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch in _WHITESPACE:
            i += 1
            continue
        if ch in _PUNCTUATION:
            tokens.append(_Token(ch, ch, i, i + 1))
            i += 1
            continue
        if ch == '"':
            end = _scan_string(source, i)
            try:
                value = json.loads(source[i:end]) if end is not None else None
            except ValueError:
                end = None
            if end is None:
                raise JSONParseError(f"Unexpected symbol <{ch}>", i, i + 1)
            tokens.append(_Token("string", value, i, end))
            i = end
            continue
        match = _NUMBER_RE.match(source, i)
        if match is not None:
            tokens.append(_Token("number", json.loads(match.group()), i, match.end()))
            i = match.end()
            continue
        literal = next((word for word in _LITERALS if source.startswith(word, i)), None)
        if literal is not None:
            tokens.append(_Token("literal", _LITERALS[literal], i, i + len(literal)))
            i += len(literal)
            continue
        raise JSONParseError(f"Unexpected symbol <{ch}>", i, i + 1)
    return tokens


def _scan_string(source: str, start: int) -> int | None:
    """Return the offset just past the closing quote, or None if unterminated."""
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        if ch == "\n":
            return None
        i += 1
    return None


class _Parser:
    """Shift-reduce over the token list; nesting depth lives on ``_stack``, not the call stack."""

    def __init__(self, source: str, tokens: list[_Token]) -> None:
        self._source = source
        self._tokens = tokens
        self._index = 0
        self._stack: list[JSONObject | JSONArray] = []
        self._keys: list[JSONIdentifier] = []

    def parse(self) -> JSONValue:
        token = self._next()
        while True:
            value = self._open(token)
            if value is None:
                token = self._next()
                if isinstance(self._stack[-1], JSONObject):
                    token = self._property_start(token)
                continue
            token, value = self._reduce(value)
            if token is None:
                if self._index < len(self._tokens):
                    raise self._unexpected(self._tokens[self._index])
                return value

    def _next(self) -> _Token:
        if self._index >= len(self._tokens):
            raise self._end_of_input()
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _peek(self, kind: str) -> bool:
        return self._index < len(self._tokens) and self._tokens[self._index].kind == kind

    def _open(self, token: _Token) -> JSONValue | None:
        """Return a complete value, or None after pushing a non-empty container."""
        if token.kind == "{":
            node: JSONObject | JSONArray = JSONObject(start=token.start, end=token.end)
            closing = "}"
        elif token.kind == "[":
            node = JSONArray(start=token.start, end=token.end)
            closing = "]"
        elif token.kind in ("string", "number", "literal"):
            return JSONLiteral(
                value=token.value,
                raw=self._source[token.start : token.end],
                start=token.start,
                end=token.end,
            )
        else:
            raise self._unexpected(token)
        if self._peek(closing):
            node.end = self._next().end
            return node
        self._stack.append(node)
        return None

    def _property_start(self, token: _Token) -> _Token:
        """Consume ``"key":`` and return the first token of the value."""
        if token.kind != "string":
            raise self._unexpected(token)
        self._keys.append(JSONIdentifier(value=token.value, start=token.start, end=token.end))
        colon = self._next()
        if colon.kind != ":":
            raise self._unexpected(colon)
        return self._next()

    def _reduce(self, value: JSONValue) -> tuple[_Token | None, JSONValue]:
        """Attach ``value`` to its container, closing finished containers.

        Returns the first token of the next sibling value, or None with the
        top-level value once it is complete.
        """
        while self._stack:
            parent = self._stack[-1]
            if isinstance(parent, JSONObject):
                key = self._keys.pop()
                parent.children.append(JSONProperty(key=key, value=value, start=key.start, end=value.end))
                closing = "}"
            else:
                parent.children.append(value)
                closing = "]"
            token = self._next()
            if token.kind == ",":
                token = self._next()
                return (self._property_start(token) if isinstance(parent, JSONObject) else token), value
            if token.kind != closing:
                raise self._unexpected(token)
            parent.end = token.end
            value = self._stack.pop()
        return None, value

    def _unexpected(self, token: _Token) -> JSONParseError:
        raw = self._source[token.start : token.end]
        return JSONParseError(f"Unexpected token <{raw}>", token.start, token.end)

    def _end_of_input(self) -> JSONParseError:
        # Point at the character right after the last token, or the last
        # character when nothing follows it.
        start = self._tokens[-1].end if self._tokens else 0
        if start >= len(self._source):
            start = max(len(self._source) - 1, 0)
        return JSONParseError("Unexpected end of input", start, min(start + 1, len(self._source)))
