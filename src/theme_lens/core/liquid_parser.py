"""Liquid template parser.

``parse_liquid`` builds a :class:`Document` out of a template. In strict mode
structural errors (unclosed delimiters, unbalanced block tags) raise
``LiquidSyntaxError``. In tolerant mode, used for text cut at the cursor,
unclosed blocks are closed at the end of the text and a trailing unclosed
``{{``/``{%`` becomes a partial node.

Markup that does not fit the expression grammar is kept as a plain string, the
way unknown tags are.
"""

import re
from dataclasses import dataclass

from theme_lens.core.errors import LiquidSyntaxError
from theme_lens.core.liquid_ast import (
    AssignMarkup,
    Document,
    DocumentChild,
    Expression,
    ForMarkup,
    LiquidFilter,
    LiquidLiteral,
    LiquidRawTag,
    LiquidTag,
    LiquidVariable,
    LiquidVariableOutput,
    Markup,
    NamedArgument,
    Number,
    Range,
    String,
    TextNode,
    VariableLookup,
)

RAW_TAGS = frozenset({"raw", "comment", "schema", "style", "stylesheet", "javascript"})
BLOCK_TAGS = frozenset({"if", "unless", "case", "for", "tablerow", "capture", "form", "paginate"})
LITERAL_KEYWORDS = frozenset({"true", "false", "nil", "null", "empty", "blank"})

_OPENER_RE = re.compile(r"\{\{-?|\{%-?")
_TAG_NAME_RE = re.compile(r"\s*(#|\w*)")
_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<string>'[^']*'|"[^"]*")
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<range>\.\.)
  | (?P<id>[A-Za-z_][\w-]*\??)
  | (?P<punct>[.\[\]|:,()=])
    """,
    re.VERBOSE,
)


def parse_liquid(source: str, tolerant: bool = False) -> Document:
    return _TemplateParser(source, tolerant).parse()


def parse_variable_markup(text: str, offset: int, partial: bool = False) -> LiquidVariable | str:
    try:
        parser = _ExpressionParser(_lex(text, offset), offset + len(text), partial)
        variable = parser.liquid_variable()
        parser.finish()
        return variable
    except _MarkupError:
        return text.strip()


def parse_tag_markup(name: str, text: str, offset: int, partial: bool = False) -> Markup:
    try:
        parser = _ExpressionParser(_lex(text, offset), offset + len(text), partial)
        markup: Markup
        if name == "assign":
            markup = parser.assign()
        elif name == "echo":
            markup = parser.liquid_variable()
        elif name in ("for", "tablerow"):
            markup = parser.for_markup()
        else:
            return text.strip()
        parser.finish()
        return markup
    except _MarkupError:
        return text.strip()


# ---------------------------------------------------------------------------
# Template structure
# ---------------------------------------------------------------------------


class _TemplateParser:
    def __init__(self, source: str, tolerant: bool) -> None:
        self.source = source
        self.tolerant = tolerant
        self.document = Document(source=source, start=0, end=len(source))
        self.stack: list[LiquidTag] = []

    def parse(self) -> Document:
        source = self.source
        pos = 0
        while pos < len(source):
            match = _OPENER_RE.search(source, pos)
            if match is None:
                self._append(TextNode(value=source[pos:], start=pos, end=len(source)))
                break
            if match.start() > pos:
                self._append(TextNode(value=source[pos : match.start()], start=pos, end=match.start()))
            if match.group().startswith("{{"):
                pos = self._output(match.start(), match.end())
            else:
                pos = self._tag(match.start(), match.end())

        if self.stack:
            if not self.tolerant:
                block = self.stack[-1]
                raise LiquidSyntaxError(f"Missing '{{% end{block.name} %}}'", block.start, block.block_start or block.end)
            for block in self.stack:
                block.block_end = len(source)
                block.end = len(source)
        return self.document

    def _append(self, node: DocumentChild) -> None:
        if self.stack:
            children = self.stack[-1].children
            assert children is not None
            children.append(node)
        else:
            self.document.children.append(node)

    def _closing(self, delimiter: str, inner_start: int) -> tuple[int, int] | None:
        close = self.source.find(delimiter, inner_start)
        if close == -1:
            return None
        inner_end = close - 1 if close - 1 >= inner_start and self.source[close - 1] == "-" else close
        return inner_end, close + len(delimiter)

    def _output(self, start: int, inner_start: int) -> int:
        closing = self._closing("}}", inner_start)
        if closing is None:
            if not self.tolerant:
                raise LiquidSyntaxError("Unclosed variable output, expected '}}'", start, len(self.source))
            text = self.source[inner_start:]
            markup = parse_variable_markup(text, inner_start, partial=True)
            self._append(LiquidVariableOutput(markup=markup, start=start, end=len(self.source)))
            return len(self.source)
        inner_end, end = closing
        markup = parse_variable_markup(self.source[inner_start:inner_end], inner_start)
        self._append(LiquidVariableOutput(markup=markup, start=start, end=end))
        return end

    def _tag(self, start: int, inner_start: int) -> int:
        closing = self._closing("%}", inner_start)
        if closing is None:
            if not self.tolerant:
                raise LiquidSyntaxError("Unclosed tag, expected '%}'", start, len(self.source))
            self._append(self._partial_tag(start, inner_start))
            return len(self.source)

        inner_end, end = closing
        content = self.source[inner_start:inner_end]
        name_match = _TAG_NAME_RE.match(content)
        assert name_match is not None
        name = name_match.group(1)
        if not name:
            if not self.tolerant:
                raise LiquidSyntaxError("Missing tag name", start, end)
            return end
        markup_start = inner_start + name_match.end()
        markup_text = self.source[markup_start:inner_end]

        if name in RAW_TAGS:
            return self._raw_tag(name, start, end)

        if name.startswith("end") and name[3:] in BLOCK_TAGS:
            if not self.stack or self.stack[-1].name != name[3:]:
                if not self.tolerant:
                    raise LiquidSyntaxError(f"Unexpected '{{% {name} %}}'", start, end)
                return end
            block = self.stack.pop()
            block.block_end = start
            block.end = end
            return end

        tag = LiquidTag(name=name, markup=parse_tag_markup(name, markup_text, markup_start), start=start, end=end)
        self._append(tag)
        if name in BLOCK_TAGS:
            tag.children = []
            tag.block_start = end
            self.stack.append(tag)
        return end

    def _raw_tag(self, name: str, start: int, body_start: int) -> int:
        end_re = re.compile(r"\{%-?\s*end" + re.escape(name) + r"\s*-?%\}")
        end_match = end_re.search(self.source, body_start)
        if end_match is None:
            if not self.tolerant:
                raise LiquidSyntaxError(f"Missing '{{% end{name} %}}'", start, body_start)
            body_end = end = len(self.source)
        else:
            body_end, end = end_match.start(), end_match.end()
        self._append(
            LiquidRawTag(
                name=name,
                body=self.source[body_start:body_end],
                body_start=body_start,
                body_end=body_end,
                start=start,
                end=end,
            )
        )
        return end

    def _partial_tag(self, start: int, inner_start: int) -> LiquidTag:
        content = self.source[inner_start:]
        name_match = _TAG_NAME_RE.match(content)
        assert name_match is not None
        name = name_match.group(1)
        markup_start = inner_start + name_match.end()
        markup_text = self.source[markup_start:]
        markup: Markup = ""
        if markup_text:
            markup = parse_tag_markup(name, markup_text, markup_start, partial=True)
        return LiquidTag(name=name, markup=markup, start=start, end=len(self.source))


# ---------------------------------------------------------------------------
# Markup expressions
# ---------------------------------------------------------------------------


class _MarkupError(Exception):
    pass


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    start: int
    end: int


def _lex(text: str, offset: int) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise _MarkupError(text[pos:])
        kind = match.lastgroup
        assert kind is not None
        if kind != "ws":
            tokens.append(_Token(kind, match.group(), offset + match.start(), offset + match.end()))
        pos = match.end()
    return tokens


class _ExpressionParser:
    def __init__(self, tokens: list[_Token], end: int, partial: bool) -> None:
        self.tokens = tokens
        self.index = 0
        self.end = end
        self.partial = partial

    def peek(self, ahead: int = 0) -> _Token | None:
        i = self.index + ahead
        return self.tokens[i] if i < len(self.tokens) else None

    def accept(self, kind: str, text: str | None = None) -> _Token | None:
        token = self.peek()
        if token is None or token.kind != kind or (text is not None and token.text != text):
            return None
        self.index += 1
        return token

    def expect(self, kind: str, text: str | None = None) -> _Token:
        token = self.accept(kind, text)
        if token is None:
            raise _MarkupError(f"expected {text or kind}")
        return token

    def finish(self) -> None:
        if self.index < len(self.tokens):
            raise _MarkupError("unexpected trailing markup")

    def at_cursor(self) -> bool:
        return self.partial and self.peek() is None

    # -- grammar --

    def liquid_variable(self) -> LiquidVariable:
        expression = self.expression()
        filters: list[LiquidFilter] = []
        end = expression.end
        while self.accept("punct", "|"):
            liquid_filter = self.filter()
            filters.append(liquid_filter)
            end = liquid_filter.end
        return LiquidVariable(expression=expression, filters=filters, start=expression.start, end=end)

    def filter(self) -> LiquidFilter:
        name = self.accept("id")
        if name is None:
            if self.at_cursor():
                return LiquidFilter(name="", start=self.end, end=self.end)
            raise _MarkupError("expected filter name")
        args: list[Expression | NamedArgument] = []
        end = name.end
        if self.accept("punct", ":"):
            while True:
                arg = self.argument()
                args.append(arg)
                end = arg.end
                if not self.accept("punct", ","):
                    break
        return LiquidFilter(name=name.text, args=args, start=name.start, end=end)

    def argument(self) -> Expression | NamedArgument:
        token, following = self.peek(), self.peek(1)
        if token is not None and token.kind == "id" and following is not None and following.text == ":":
            self.index += 2
            value = self.expression()
            return NamedArgument(name=token.text, value=value, start=token.start, end=value.end)
        return self.expression()

    def expression(self) -> Expression:
        token = self.peek()
        if token is None:
            if self.partial:
                return VariableLookup(name="", start=self.end, end=self.end)
            raise _MarkupError("expected expression")
        if token.kind == "string":
            self.index += 1
            return String(value=token.text[1:-1], single_quoted=token.text[0] == "'", start=token.start, end=token.end)
        if token.kind == "number":
            self.index += 1
            return Number(value=token.text, start=token.start, end=token.end)
        if token.kind == "punct" and token.text == "(":
            self.index += 1
            first = self.expression()
            self.expect("range")
            last = self.expression()
            closing = self.expect("punct", ")")
            return Range(first=first, last=last, start=token.start, end=closing.end)
        following = self.peek(1)
        if (
            token.kind == "id"
            and token.text in LITERAL_KEYWORDS
            and (following is None or following.text not in (".", "["))
        ):
            self.index += 1
            return LiquidLiteral(keyword=token.text, start=token.start, end=token.end)
        if token.kind == "id" or token.text == "[":
            return self.variable_lookup()
        raise _MarkupError(f"unexpected {token.text}")

    def variable_lookup(self) -> VariableLookup:
        first = self.peek()
        assert first is not None
        name: str | None = None
        end = first.start
        if first.kind == "id":
            self.index += 1
            name = first.text
            end = first.end
        lookups: list[Expression] = []
        while True:
            if dot := self.accept("punct", "."):
                prop = self.accept("id")
                if prop is not None:
                    lookups.append(String(value=prop.text, start=prop.start, end=prop.end))
                    end = prop.end
                elif self.at_cursor():
                    lookups.append(String(value="", start=dot.end, end=dot.end))
                    end = dot.end
                else:
                    raise _MarkupError("expected property name")
            elif self.accept("punct", "["):
                inner = self.expression()
                closing = self.expect("punct", "]")
                lookups.append(inner)
                end = closing.end
            else:
                break
        if name is None and not lookups:
            raise _MarkupError("expected variable")
        return VariableLookup(name=name, lookups=lookups, start=first.start, end=end)

    def assign(self) -> AssignMarkup:
        name = self.expect("id")
        self.expect("punct", "=")
        value = self.liquid_variable()
        return AssignMarkup(name=name.text, value=value, start=name.start, end=value.end)

    def for_markup(self) -> ForMarkup:
        variable = self.expect("id")
        self.expect("id", "in")
        collection = self.expression()
        # limit:, offset:, reversed and friends do not affect bindings
        self.index = len(self.tokens)
        return ForMarkup(variable_name=variable.text, collection=collection, start=variable.start, end=collection.end)
