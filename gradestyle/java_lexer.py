"""
java_lexer.py — PEG tokenizer for Java source files
====================================================

The lexical structure of Java is described as a parsimonious grammar whose
top rule is a flat sequence of token alternatives.  A ``NodeVisitor`` turns
the resulting parse tree into :class:`Token` records carrying start and end
line numbers; whitespace is dropped, comments are kept (documentation
comments have their own kind so that their line spans can be measured).

Usage::

    from gradestyle.java_lexer import tokenize

    tokens = tokenize(source_text, path="Foo.java")
    code = [t for t in tokens if not t.is_comment]

Input that no token alternative matches (an unterminated string literal, a
stray ``#`` or a backtick) raises :class:`~gradestyle.errors.SourceParseError`
naming the offending line.
"""

from __future__ import annotations

import bisect
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import NodeVisitor

from .errors import ErrorCodes, SourceParseError


# ═══════════════════════════════════════════════════════════════════════════
#  Grammar
# ═══════════════════════════════════════════════════════════════════════════

# Alternatives are ordered: documentation comments before block comments,
# text blocks before string literals, numbers before operators (".5").
JAVA_TOKEN_GRAMMAR = Grammar(r'''
    unit            = item*
    item            = ws / doc_comment / block_comment / line_comment
                    / text_block / string / char / number / identifier
                    / operator

    ws              = ~r"\s+"
    doc_comment     = ~r"/\*\*(?!/)[\s\S]*?\*/"
    block_comment   = ~r"/\*[\s\S]*?\*/"
    line_comment    = ~r"//[^\r\n]*"
    text_block      = ~r'"""[\s\S]*?(?<!\\)"""'
    string          = ~r'"(?:\\.|[^"\\\r\n])*"'
    char            = ~r"'(?:\\.|[^'\\\r\n])+'"
    number          = ~r"(?:0[xX][0-9a-fA-F_]*\.?[0-9a-fA-F_]*[pP][+-]?\d[\d_]*[fFdD]?|0[xX][0-9a-fA-F_]+[lL]?|0[bB][01_]+[lL]?|(?:\d[\d_]*\.(?:\d[\d_]*)?|\.\d[\d_]*|\d[\d_]*)(?:[eE][+-]?\d[\d_]*)?[lLfFdD]?)"
    identifier      = ~r"(?:[^\W\d]|\$)[\w$]*"
    operator        = ~r"->|::|\.\.\.|\+\+|--|&&|\|\||<<=|<<|[=!<>+\-*/&|^%]=|[{}()\[\];,.@=<>!~?:+\-*/&|^%]"
''')


# ═══════════════════════════════════════════════════════════════════════════
#  Tokens
# ═══════════════════════════════════════════════════════════════════════════

class TokenKind(enum.Enum):
    DOC_COMMENT = "doc_comment"
    BLOCK_COMMENT = "block_comment"
    LINE_COMMENT = "line_comment"
    STRING = "string"
    CHAR = "char"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    OPERATOR = "operator"


_COMMENT_KINDS = frozenset({
    TokenKind.DOC_COMMENT,
    TokenKind.BLOCK_COMMENT,
    TokenKind.LINE_COMMENT,
})

_LITERAL_KINDS = frozenset({TokenKind.STRING, TokenKind.CHAR, TokenKind.NUMBER})


@dataclass(frozen=True)
class Token:
    """One lexical token with its 1-based line range."""
    kind: TokenKind
    text: str
    line: int
    end_line: int

    @property
    def is_comment(self) -> bool:
        return self.kind in _COMMENT_KINDS

    @property
    def is_literal(self) -> bool:
        return self.kind in _LITERAL_KINDS

    @property
    def line_count(self) -> int:
        return self.end_line - self.line + 1

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, L{self.line})"


class _LineIndex:
    """Maps character offsets to 1-based line numbers."""

    def __init__(self, text: str) -> None:
        self._newlines = [i for i, ch in enumerate(text) if ch == "\n"]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_left(self._newlines, offset) + 1


class _TokenCollector(NodeVisitor):
    """Folds the ``unit`` parse tree into a flat token list."""

    def __init__(self, text: str) -> None:
        self._lines = _LineIndex(text)

    def _token(self, kind: TokenKind, node) -> Token:
        start = self._lines.line_of(node.start)
        end = self._lines.line_of(max(node.start, node.end - 1))
        return Token(kind, node.text, start, end)

    def visit_unit(self, node, visited_children) -> List[Token]:
        return [tok for tok in visited_children if tok is not None]

    def visit_item(self, node, visited_children) -> Optional[Token]:
        return visited_children[0]

    def visit_ws(self, node, visited_children) -> None:
        return None

    def visit_doc_comment(self, node, visited_children) -> Token:
        return self._token(TokenKind.DOC_COMMENT, node)

    def visit_block_comment(self, node, visited_children) -> Token:
        return self._token(TokenKind.BLOCK_COMMENT, node)

    def visit_line_comment(self, node, visited_children) -> Token:
        return self._token(TokenKind.LINE_COMMENT, node)

    def visit_text_block(self, node, visited_children) -> Token:
        return self._token(TokenKind.STRING, node)

    def visit_string(self, node, visited_children) -> Token:
        return self._token(TokenKind.STRING, node)

    def visit_char(self, node, visited_children) -> Token:
        return self._token(TokenKind.CHAR, node)

    def visit_number(self, node, visited_children) -> Token:
        return self._token(TokenKind.NUMBER, node)

    def visit_identifier(self, node, visited_children) -> Token:
        return self._token(TokenKind.IDENTIFIER, node)

    def visit_operator(self, node, visited_children) -> Token:
        return self._token(TokenKind.OPERATOR, node)

    def generic_visit(self, node, visited_children):
        return visited_children or node


def tokenize(text: str, path: Union[str, Path, None] = None) -> List[Token]:
    """Split Java *text* into tokens (comments included, whitespace not)."""
    try:
        tree = JAVA_TOKEN_GRAMMAR.parse(text)
    except ParseError as exc:
        line = _LineIndex(text).line_of(exc.pos)
        snippet = text[exc.pos:exc.pos + 20].splitlines()[0] if text[exc.pos:] else ""
        raise SourceParseError(
            f"invalid token near {snippet!r}",
            path=path,
            line=line,
            code=ErrorCodes.INVALID_TOKEN,
        ) from exc
    return _TokenCollector(text).visit(tree)
