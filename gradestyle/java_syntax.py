"""
java_syntax.py — Structural scanner and query model for Java sources
=====================================================================

Turns the token stream produced by :mod:`gradestyle.java_lexer` into a
:class:`CompilationUnit`: a flat, queryable index of the structural units
that the normaliser counts.

Design principles
-----------------
* **Single-pass, recursive-descent** over the tokens.  Declarations,
  statements and bracketed expression runs each have a dedicated
  ``_parse_*`` / ``_scan_*`` helper.
* **Structure, not semantics** – expressions are scanned rather than
  parsed into trees; only the facts the normaliser needs are recorded
  (member accesses, lambda parameters, anonymous class bodies, lambda
  bodies and switch blocks nested inside expressions).
* **Fail-fast with location** – unbalanced brackets, premature end of
  input or a token that cannot start the expected construct raise
  :class:`~gradestyle.errors.SourceParseError` with the line number.

Public API
----------
``parse_source(text, path=None) -> CompilationUnit``
    Scan a complete ``.java`` source string.

``JavaSyntaxService().parse(path) -> CompilationUnit``
    Read and scan one file.

Counting conventions
--------------------
* ``line_span`` runs from the first to the last token, comments included.
* Interface and annotation-type fields are implicitly static.
* ``VARIABLE_DECLARATOR`` counts local declarators (including for-init,
  for-each and try-with-resources variables), not field declarators.
* ``PARAMETER`` counts method, constructor, catch, lambda and record
  component parameters.
* Every dot of a name chain is a field access, as a Java parser builds
  nested field-access nodes for ``a.b.c``; ``Type.class`` literals and
  method references are not accesses.
"""

from __future__ import annotations

import enum
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
    Union,
)

from .errors import ErrorCodes, SourceParseError
from .java_lexer import Token, TokenKind, tokenize

_log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
#  Query model
# ═══════════════════════════════════════════════════════════════════════════

class DeclarationKind(enum.Enum):
    PACKAGE = "package"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION_TYPE = "annotation_type"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    STATIC_FIELD = "static_field"
    INSTANCE_FIELD = "instance_field"
    PARAMETER = "parameter"
    VARIABLE_DECLARATOR = "variable_declarator"


TYPE_DECLARATION_KINDS: FrozenSet[DeclarationKind] = frozenset({
    DeclarationKind.CLASS,
    DeclarationKind.INTERFACE,
    DeclarationKind.ENUM,
    DeclarationKind.RECORD,
    DeclarationKind.ANNOTATION_TYPE,
})


class LoopKind(enum.Enum):
    FOR = "for"
    FOR_EACH = "for_each"
    WHILE = "while"
    DO = "do"


class AccessKind(enum.Enum):
    METHOD = "method"
    FIELD = "field"


class QualifierKind(enum.Enum):
    """What stands to the left of the dot of a member access."""
    NONE = "none"               # foo()
    NAME = "name"               # a.b.foo(), Math.max(), System.out
    THIS = "this"               # this.x, this.foo()
    SUPER = "super"             # super.foo()
    EXPRESSION = "expression"   # foo().bar, "s".length(), arr[0].x


@dataclass(frozen=True)
class Declaration:
    kind: DeclarationKind
    name: str
    line: int
    owner: str = ""             # simple name of the enclosing type
    arity: int = 0              # methods/constructors
    varargs: bool = False
    static: bool = False


@dataclass(frozen=True)
class Loop:
    kind: LoopKind
    line: int


@dataclass(frozen=True)
class DocComment:
    """A ``/** ... */`` comment and the lines it spans."""
    line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.line + 1


@dataclass(frozen=True)
class Import:
    name: str
    static: bool = False
    wildcard: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class MemberAccess:
    """A method invocation or a dotted field access."""
    kind: AccessKind
    name: str
    qualifier: str
    qualifier_kind: QualifierKind
    line: int
    arity: int = -1             # argument count for method invocations

    def __str__(self) -> str:
        call = "()" if self.kind is AccessKind.METHOD else ""
        if self.qualifier:
            return f"{self.qualifier}.{self.name}{call}"
        return f"{self.name}{call}"


@dataclass
class SymbolTable:
    """Names visible anywhere in one compilation unit."""
    values: Set[str] = field(default_factory=set)
    fields: Dict[str, List[bool]] = field(default_factory=lambda: defaultdict(list))


class CompilationUnit:
    """Queryable structural index of one Java source file."""

    def __init__(
        self,
        path: Optional[Path],
        declarations: List[Declaration],
        loops: List[Loop],
        catch_clauses: List[int],
        member_accesses: List[MemberAccess],
        imports: List[Import],
        doc_comments: List[DocComment],
        symbols: SymbolTable,
        line_span: int,
    ) -> None:
        self.path = path
        self.declarations = declarations
        self.loops = loops
        self.catch_clauses = catch_clauses
        self.member_accesses = member_accesses
        self.imports = imports
        self.doc_comments = doc_comments
        self.symbols = symbols
        self.line_span = line_span
        self._resolver = None

    # -- counting ------------------------------------------------------------

    def count_declarations(self, *kinds: DeclarationKind) -> int:
        wanted = set(kinds)
        return sum(1 for d in self.declarations if d.kind in wanted)

    def count_loops(self, *kinds: LoopKind) -> int:
        if not kinds:
            return len(self.loops)
        wanted = set(kinds)
        return sum(1 for loop in self.loops if loop.kind in wanted)

    def count_catch_clauses(self) -> int:
        return len(self.catch_clauses)

    def doc_comment_lines(self) -> int:
        return sum(c.line_count for c in self.doc_comments)

    # -- static classification -------------------------------------------------

    @property
    def resolver(self):
        """Lazily built :class:`~gradestyle.static_access.StaticAccessResolver`."""
        if self._resolver is None:
            from .static_access import StaticAccessResolver
            self._resolver = StaticAccessResolver(self)
        return self._resolver

    def classify(self, access: MemberAccess):
        return self.resolver.resolve(access)

    def count_static_accesses(self) -> int:
        return self.resolver.count_static()

    # -- lookups -------------------------------------------------------------

    def declarations_of(self, *kinds: DeclarationKind) -> List[Declaration]:
        wanted = set(kinds)
        return [d for d in self.declarations if d.kind in wanted]

    @property
    def package(self) -> Optional[str]:
        for d in self.declarations:
            if d.kind is DeclarationKind.PACKAGE:
                return d.name
        return None

    @property
    def type_names(self) -> Set[str]:
        return {d.name for d in self.declarations if d.kind in TYPE_DECLARATION_KINDS}

    def __repr__(self) -> str:
        return (
            f"CompilationUnit({self.path}, {len(self.declarations)} declarations, "
            f"{len(self.member_accesses)} accesses, {self.line_span} lines)"
        )


# ═══════════════════════════════════════════════════════════════════════════
#  Vocabulary
# ═══════════════════════════════════════════════════════════════════════════

_KEYWORDS = frozenset("""
    abstract assert boolean break byte case catch char class const continue
    default do double else enum extends final finally float for goto if
    implements import instanceof int interface long native new package private
    protected public return short static strictfp super switch synchronized
    this throw throws transient try void volatile while true false null
""".split())

_PRIMITIVES = frozenset({
    "boolean", "byte", "char", "short", "int", "long", "float", "double", "void",
})

_MEMBER_MODIFIERS = frozenset({
    "public", "protected", "private", "static", "final", "abstract", "native",
    "synchronized", "transient", "volatile", "strictfp", "default", "sealed",
})

_LOCAL_MODIFIERS = frozenset({"final", "abstract", "static", "strictfp"})

_TYPE_KEYWORDS = {
    "class": DeclarationKind.CLASS,
    "interface": DeclarationKind.INTERFACE,
    "enum": DeclarationKind.ENUM,
}

# Tokens allowed between the angle brackets of a type argument list.
_TYPE_ARGUMENT_TOKENS = frozenset({
    ".", ",", "?", "&", "[", "]", "@", "extends", "super",
})

# Tokens after a generic argument list that confirm it was one.
_AFTER_TYPE_ARGUMENTS = frozenset({"(", "[", "::", "{", ")", ">"})

# Tokens that can start the operand of a cast.
_CAST_OPERAND_OPERATORS = frozenset({"(", "!", "~"})
_OPERAND_KEYWORDS = frozenset({"this", "super", "new", "true", "false", "null", "switch"})

_CLOSERS = frozenset({")", "]", "}"})
_PAIRS = {"(": ")", "[": "]", "{": "}"}


# ═══════════════════════════════════════════════════════════════════════════
#  Parser
# ═══════════════════════════════════════════════════════════════════════════

class _Parser:
    """Recursive-descent scanner over the code tokens of one file."""

    def __init__(self, tokens: List[Token], path: Optional[Path]) -> None:
        self._toks = [t for t in tokens if not t.is_comment]
        self._i = 0
        self._path = path
        self._types: List[Tuple[str, DeclarationKind]] = []
        self.declarations: List[Declaration] = []
        self.loops: List[Loop] = []
        self.catch_clauses: List[int] = []
        self.accesses: List[MemberAccess] = []
        self.imports: List[Import] = []
        self.symbols = SymbolTable()

    # -- token helpers ---------------------------------------------------

    def _peek(self, k: int = 0) -> Optional[Token]:
        j = self._i + k
        return self._toks[j] if 0 <= j < len(self._toks) else None

    def _text(self, k: int = 0) -> str:
        tok = self._peek(k)
        return tok.text if tok is not None else ""

    def _text_at(self, j: int) -> str:
        return self._toks[j].text if 0 <= j < len(self._toks) else ""

    def _at(self, text: str, k: int = 0) -> bool:
        tok = self._peek(k)
        return tok is not None and tok.kind is not TokenKind.STRING and tok.text == text

    def _eof(self) -> bool:
        return self._i >= len(self._toks)

    def _line(self) -> int:
        tok = self._peek()
        if tok is not None:
            return tok.line
        return self._toks[-1].end_line if self._toks else 0

    def _is_ident_at(self, j: int) -> bool:
        if not 0 <= j < len(self._toks):
            return False
        tok = self._toks[j]
        return tok.kind is TokenKind.IDENTIFIER and tok.text not in _KEYWORDS

    def _is_ident(self, k: int = 0) -> bool:
        return self._is_ident_at(self._i + k)

    def _error(self, message: str) -> SourceParseError:
        if self._eof():
            return SourceParseError(
                "unexpected end of file", self._path, self._line(),
                ErrorCodes.UNEXPECTED_EOF,
            )
        return SourceParseError(message, self._path, self._line())

    def _next(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise self._error("unexpected end of file")
        self._i += 1
        return tok

    def _expect(self, text: str) -> Token:
        if not self._at(text):
            raise self._error(f"expected {text!r}, found {self._text()!r}")
        return self._next()

    def _ident(self) -> Token:
        if not self._is_ident():
            raise self._error(f"expected identifier, found {self._text()!r}")
        return self._next()

    def _qualified_name(self) -> str:
        parts = [self._ident().text]
        while self._at(".") and self._is_ident(1):
            self._next()
            parts.append(self._next().text)
        return ".".join(parts)

    # -- recording -------------------------------------------------------

    def _owner(self) -> str:
        return self._types[-1][0] if self._types else ""

    def _owner_kind(self) -> Optional[DeclarationKind]:
        return self._types[-1][1] if self._types else None

    def _declare(self, kind: DeclarationKind, name: str, line: int, **extra) -> None:
        self.declarations.append(Declaration(kind, name, line, self._owner(), **extra))

    def _declare_value(self, kind: DeclarationKind, tok: Token) -> None:
        self._declare(kind, tok.text, tok.line)
        self.symbols.values.add(tok.text)

    def _access(
        self,
        kind: AccessKind,
        name: str,
        qualifier: str,
        qualifier_kind: QualifierKind,
        line: int,
        arity: int = -1,
    ) -> None:
        self.accesses.append(MemberAccess(kind, name, qualifier, qualifier_kind, line, arity))

    # -- lookahead -------------------------------------------------------

    def _match_index(self, j: int) -> int:
        """Index of the bracket closing the one at *j*."""
        stack = []
        n = len(self._toks)
        while j < n:
            t = self._toks[j]
            if t.kind is TokenKind.OPERATOR:
                if t.text in _PAIRS:
                    stack.append(_PAIRS[t.text])
                elif t.text in _CLOSERS:
                    if not stack or stack.pop() != t.text:
                        raise SourceParseError(
                            f"unbalanced {t.text!r}", self._path, t.line,
                            ErrorCodes.UNEXPECTED_TOKEN,
                        )
                    if not stack:
                        return j
            j += 1
        raise SourceParseError(
            "unbalanced brackets", self._path, self._line(), ErrorCodes.UNEXPECTED_EOF,
        )

    def _type_arguments_end(self, j: int) -> Optional[int]:
        """Index after the ``<...>`` starting at *j*, if it reads as type arguments."""
        depth = 0
        n = len(self._toks)
        while j < n:
            t = self._toks[j]
            if t.text == "<" and t.kind is TokenKind.OPERATOR:
                depth += 1
            elif t.text == ">" and t.kind is TokenKind.OPERATOR:
                depth -= 1
                if depth == 0:
                    return j + 1
            elif not (
                t.kind is TokenKind.IDENTIFIER
                or (t.kind is TokenKind.OPERATOR and t.text in _TYPE_ARGUMENT_TOKENS)
            ):
                return None
            j += 1
        return None

    def _type_end(self, j: int) -> Optional[int]:
        """Index after a type starting at *j*, or ``None``."""
        if self._text_at(j) in _PRIMITIVES:
            j += 1
        elif self._is_ident_at(j):
            j += 1
            while True:
                if self._text_at(j) == "<":
                    end = self._type_arguments_end(j)
                    if end is None:
                        return None
                    j = end
                if self._text_at(j) == "." and self._is_ident_at(j + 1):
                    j += 2
                    continue
                break
        else:
            return None
        while self._text_at(j) == "[" and self._text_at(j + 1) == "]":
            j += 2
        return j

    def _looks_like_local_declaration(self) -> bool:
        if self._text() == "yield":
            return False
        end = self._type_end(self._i)
        if end is None or self._text_at(self._i) == "void":
            return False
        return self._is_ident_at(end) and self._text_at(end + 1) in ("=", ";", ",", ":", "[")

    def _is_for_each(self) -> bool:
        """At the token after ``for (``: is there a ``:`` before any ``;``?"""
        j = self._i
        depth = 0
        pending_ternary = 0
        n = len(self._toks)
        while j < n:
            t = self._toks[j]
            if t.kind is TokenKind.OPERATOR:
                if t.text in _PAIRS:
                    depth += 1
                elif t.text in _CLOSERS:
                    if depth == 0:
                        return False
                    depth -= 1
                elif depth == 0:
                    if t.text == ";":
                        return False
                    if t.text == "?":
                        pending_ternary += 1
                    elif t.text == ":":
                        if not pending_ternary:
                            return True
                        pending_ternary -= 1
            j += 1
        return False

    def _count_arguments(self) -> int:
        """At ``(``: number of comma-separated arguments inside."""
        start = self._i
        end = self._match_index(start)
        if end == start + 1:
            return 0
        count = 1
        j = start + 1
        while j < end:
            t = self._toks[j]
            if t.kind is TokenKind.OPERATOR:
                if t.text in _PAIRS:
                    j = self._match_index(j) + 1
                    continue
                if t.text == "<":
                    close = self._type_arguments_end(j)
                    if close is not None and self._text_at(close) in _AFTER_TYPE_ARGUMENTS:
                        j = close
                        continue
                if t.text == ",":
                    count += 1
            j += 1
        return count

    # -- compilation unit ------------------------------------------------

    def parse_unit(self) -> None:
        self._skip_annotations()
        if self._at("package"):
            line = self._next().line
            name = self._qualified_name()
            self._expect(";")
            self._declare(DeclarationKind.PACKAGE, name, line)
        while self._at("import") or self._at(";"):
            if self._at(";"):
                self._next()
                continue
            self._parse_import()
        while not self._eof():
            if self._at(";"):
                self._next()
                continue
            if self._text() in ("module", "open") and not self._is_type_declaration_ahead():
                self._skip_module_declaration()
                continue
            line = self._line()
            modifiers = self._parse_modifiers(_MEMBER_MODIFIERS)
            if not self._parse_type_declaration(modifiers, line):
                raise self._error(f"expected type declaration, found {self._text()!r}")

    def _parse_import(self) -> None:
        self._expect("import")
        static = False
        if self._at("static"):
            self._next()
            static = True
        name = self._qualified_name()
        wildcard = False
        if self._at(".") and self._at("*", 1):
            self._next()
            self._next()
            wildcard = True
        self._expect(";")
        self.imports.append(Import(name, static, wildcard))

    def _is_type_declaration_ahead(self) -> bool:
        j = self._i
        while self._text_at(j) in _MEMBER_MODIFIERS:
            j += 1
        return self._text_at(j) in _TYPE_KEYWORDS or self._text_at(j) == "@"

    def _skip_module_declaration(self) -> None:
        while not self._at("{"):
            self._next()
        self._i = self._match_index(self._i) + 1

    # -- modifiers and annotations ---------------------------------------

    def _skip_annotations(self) -> None:
        while self._at("@") and not self._at("interface", 1):
            self._next()
            self._qualified_name()
            if self._at("("):
                self._i = self._match_index(self._i) + 1

    def _parse_modifiers(self, allowed: FrozenSet[str]) -> Set[str]:
        modifiers: Set[str] = set()
        while True:
            t = self._text()
            if t in allowed and self._peek().kind is TokenKind.IDENTIFIER:
                modifiers.add(t)
                self._next()
            elif t == "non" and self._at("-", 1) and self._at("sealed", 2):
                self._i += 3
            elif t == "@" and not self._at("interface", 1):
                self._skip_annotations()
            else:
                return modifiers

    # -- types -----------------------------------------------------------

    def _parse_type(self) -> None:
        self._skip_annotations()
        if self._text() in _PRIMITIVES:
            self._next()
        else:
            self._ident()
            if self._at("<"):
                self._skip_type_arguments()
            while self._at(".") and (self._is_ident(1) or self._at("@", 1)):
                self._next()
                self._skip_annotations()
                self._ident()
                if self._at("<"):
                    self._skip_type_arguments()
        while self._at("[") and self._at("]", 1):
            self._next()
            self._next()

    def _skip_type_arguments(self) -> None:
        self._expect("<")
        depth = 1
        while depth:
            t = self._next()
            if t.kind is not TokenKind.OPERATOR:
                continue
            if t.text == "<":
                depth += 1
            elif t.text == ">":
                depth -= 1
            elif t.text in (";", "{", "}"):
                raise SourceParseError(
                    f"unterminated type arguments before {t.text!r}", self._path, t.line,
                )

    def _skip_throws(self) -> None:
        if self._at("throws"):
            self._next()
            self._parse_type()
            while self._at(","):
                self._next()
                self._parse_type()

    # -- type declarations -----------------------------------------------

    def _parse_type_declaration(self, modifiers: Set[str], line: int) -> bool:
        t = self._text()
        if t in _TYPE_KEYWORDS:
            self._next()
            kind = _TYPE_KEYWORDS[t]
        elif t == "@" and self._at("interface", 1):
            self._next()
            self._next()
            kind = DeclarationKind.ANNOTATION_TYPE
        elif t == "record" and self._is_ident(1) and self._text(2) in ("(", "<"):
            self._next()
            kind = DeclarationKind.RECORD
        else:
            return False

        name = self._ident().text
        self._declare(kind, name, line)
        self._types.append((name, kind))
        try:
            if kind is DeclarationKind.RECORD:
                if self._at("<"):
                    self._skip_type_arguments()
                self._parse_parameters()
            while not self._at("{"):
                self._next()
            if kind is DeclarationKind.ENUM:
                self._parse_enum_body()
            else:
                self._parse_class_body()
        finally:
            self._types.pop()
        return True

    def _parse_class_body(self) -> None:
        self._expect("{")
        while not self._at("}"):
            self._parse_member()
        self._expect("}")

    def _parse_anonymous_body(self) -> None:
        self._types.append(("", DeclarationKind.CLASS))
        try:
            self._parse_class_body()
        finally:
            self._types.pop()

    def _parse_enum_body(self) -> None:
        self._expect("{")
        while not self._at(";") and not self._at("}"):
            self._skip_annotations()
            if self._at(","):
                self._next()
                continue
            self.symbols.values.add(self._ident().text)
            if self._at("("):
                self._scan_parenthesized()
            if self._at("{"):
                self._parse_anonymous_body()
        if self._at(";"):
            self._next()
        while not self._at("}"):
            self._parse_member()
        self._expect("}")

    def _parse_member(self) -> None:
        if self._at(";"):
            self._next()
            return
        line = self._line()
        if self._at("{"):
            self._parse_block()
            return
        if self._at("static") and self._at("{", 1):
            self._next()
            self._parse_block()
            return

        modifiers = self._parse_modifiers(_MEMBER_MODIFIERS)
        if self._parse_type_declaration(modifiers, line):
            return
        if self._at("<"):
            self._skip_type_arguments()

        owner, owner_kind = self._owner(), self._owner_kind()
        if self._is_ident() and self._text() == owner:
            if self._at("(", 1):
                self._next()
                arity, varargs = self._parse_parameters()
                self._declare(DeclarationKind.CONSTRUCTOR, owner, line,
                              arity=arity, varargs=varargs)
                self._skip_throws()
                self._parse_block()
                return
            if owner_kind is DeclarationKind.RECORD and self._at("{", 1):
                # compact canonical constructor
                self._next()
                self._parse_block()
                return

        self._parse_type()
        name = self._ident()
        if self._at("("):
            self._parse_method_rest(name, modifiers, line, owner_kind)
            return

        static = "static" in modifiers or owner_kind in (
            DeclarationKind.INTERFACE, DeclarationKind.ANNOTATION_TYPE,
        )
        kind = DeclarationKind.STATIC_FIELD if static else DeclarationKind.INSTANCE_FIELD
        self._declare(kind, name.text, line)
        self._field_declarator(name, static)
        while self._at(","):
            self._next()
            self._field_declarator(self._ident(), static)
        self._expect(";")

    def _parse_method_rest(
        self,
        name: Token,
        modifiers: Set[str],
        line: int,
        owner_kind: Optional[DeclarationKind],
    ) -> None:
        arity, varargs = self._parse_parameters()
        while self._at("[") and self._at("]", 1):
            self._next()
            self._next()
        self._skip_throws()
        if owner_kind is DeclarationKind.ANNOTATION_TYPE:
            # annotation element, not a method
            if self._at("default"):
                self._next()
                self._scan_element_value()
            self._expect(";")
            return
        self._declare(DeclarationKind.METHOD, name.text, line,
                      arity=arity, varargs=varargs, static="static" in modifiers)
        if self._at(";"):
            self._next()
        else:
            self._parse_block()

    def _scan_element_value(self) -> None:
        if self._at("{"):
            self._scan_array_initializer()
        elif self._at("@"):
            self._skip_annotations()
        else:
            self._scan_expression({";"})

    def _field_declarator(self, name: Token, static: bool) -> None:
        self.symbols.values.add(name.text)
        self.symbols.fields[name.text].append(static)
        self._finish_declarator()

    def _finish_declarator(self) -> None:
        while self._at("[") and self._at("]", 1):
            self._next()
            self._next()
        if self._at("="):
            self._next()
            if self._at("{"):
                self._scan_array_initializer()
            else:
                self._scan_expression({",", ";"})

    def _parse_parameters(self) -> Tuple[int, bool]:
        self._expect("(")
        arity = 0
        varargs = False
        while not self._at(")"):
            self._parse_modifiers(_LOCAL_MODIFIERS)
            self._parse_type()
            if self._at("..."):
                self._next()
                varargs = True
            if self._at("this"):
                # receiver parameter
                self._next()
            else:
                self._declare_value(DeclarationKind.PARAMETER, self._ident())
                arity += 1
            while self._at("[") and self._at("]", 1):
                self._next()
                self._next()
            if self._at(","):
                self._next()
            elif not self._at(")"):
                raise self._error(f"expected ',' or ')', found {self._text()!r}")
        self._expect(")")
        return arity, varargs

    # -- statements ------------------------------------------------------

    def _parse_block(self) -> None:
        self._expect("{")
        while not self._at("}"):
            self._parse_statement()
        self._expect("}")

    def _parse_statement(self) -> None:
        t = self._text()
        line = self._line()
        if self._eof():
            raise self._error("unexpected end of file")

        if t == "{":
            self._parse_block()
        elif t == ";":
            self._next()
        elif t == "if":
            self._next()
            self._scan_parenthesized()
            self._parse_statement()
            if self._at("else"):
                self._next()
                self._parse_statement()
        elif t == "for":
            self._parse_for()
        elif t == "while":
            self._next()
            self._scan_parenthesized()
            self.loops.append(Loop(LoopKind.WHILE, line))
            self._parse_statement()
        elif t == "do":
            self._next()
            self.loops.append(Loop(LoopKind.DO, line))
            self._parse_statement()
            self._expect("while")
            self._scan_parenthesized()
            self._expect(";")
        elif t == "try":
            self._parse_try()
        elif t == "switch":
            self._next()
            self._scan_parenthesized()
            self._parse_switch_block()
        elif t == "synchronized" and self._at("(", 1):
            self._next()
            self._scan_parenthesized()
            self._parse_block()
        elif t in ("return", "throw"):
            self._next()
            self._scan_expression({";"})
            self._expect(";")
        elif t in ("break", "continue"):
            self._next()
            if self._is_ident():
                self._next()
            self._expect(";")
        elif t == "assert":
            self._next()
            self._scan_expression({";"})
            self._expect(";")
        elif self._is_ident() and self._at(":", 1):
            # labelled statement
            self._next()
            self._next()
            self._parse_statement()
        elif t in _LOCAL_MODIFIERS or (t == "@" and not self._at("interface", 1)):
            modifiers = self._parse_modifiers(_LOCAL_MODIFIERS)
            if not self._parse_type_declaration(modifiers, line):
                self._parse_local_declaration()
                self._expect(";")
        elif self._parse_type_declaration(set(), line):
            pass
        elif self._looks_like_local_declaration():
            self._parse_local_declaration()
            self._expect(";")
        else:
            self._scan_expression({";"})
            self._expect(";")

    def _parse_local_declaration(self) -> None:
        self._parse_type()
        self._local_declarator()
        while self._at(","):
            self._next()
            self._local_declarator()

    def _local_declarator(self) -> None:
        self._declare_value(DeclarationKind.VARIABLE_DECLARATOR, self._ident())
        self._finish_declarator()

    def _parse_for(self) -> None:
        line = self._expect("for").line
        self._expect("(")
        if self._is_for_each():
            self._parse_modifiers(_LOCAL_MODIFIERS)
            self._parse_type()
            self._declare_value(DeclarationKind.VARIABLE_DECLARATOR, self._ident())
            self._expect(":")
            self._scan_expression({")"})
            kind = LoopKind.FOR_EACH
        else:
            if not self._at(";"):
                modifiers = self._parse_modifiers(_LOCAL_MODIFIERS)
                if modifiers or self._looks_like_local_declaration():
                    self._parse_local_declaration()
                else:
                    self._scan_expression({";"})
            self._expect(";")
            if not self._at(";"):
                self._scan_expression({";"})
            self._expect(";")
            if not self._at(")"):
                self._scan_expression({")"})
            kind = LoopKind.FOR
        self._expect(")")
        self.loops.append(Loop(kind, line))
        self._parse_statement()

    def _parse_try(self) -> None:
        self._expect("try")
        if self._at("("):
            self._next()
            while not self._at(")"):
                if self._at(";"):
                    self._next()
                    continue
                modifiers = self._parse_modifiers(_LOCAL_MODIFIERS)
                if modifiers or self._looks_like_local_declaration():
                    self._parse_type()
                    self._declare_value(DeclarationKind.VARIABLE_DECLARATOR, self._ident())
                    self._expect("=")
                self._scan_expression({";", ")"})
                if not self._at(";") and not self._at(")"):
                    raise self._error(f"expected ';' or ')', found {self._text()!r}")
            self._expect(")")
        self._parse_block()
        while self._at("catch"):
            line = self._next().line
            self._expect("(")
            self._parse_modifiers(_LOCAL_MODIFIERS)
            self._parse_type()
            while self._at("|"):
                self._next()
                self._parse_type()
            self._declare_value(DeclarationKind.PARAMETER, self._ident())
            self._expect(")")
            self.catch_clauses.append(line)
            self._parse_block()
        if self._at("finally"):
            self._next()
            self._parse_block()

    def _parse_switch_block(self) -> None:
        self._expect("{")
        while not self._at("}"):
            if self._at("case") or self._at("default"):
                is_default = self._at("default")
                self._next()
                if not is_default:
                    self._scan_expression({":", "->"})
                if self._at("->"):
                    self._next()
                    if self._at("{"):
                        self._parse_block()
                    elif self._at("throw"):
                        self._parse_statement()
                    else:
                        self._scan_expression({";"})
                        self._expect(";")
                else:
                    self._expect(":")
            else:
                self._parse_statement()
        self._expect("}")

    # -- expressions -----------------------------------------------------

    def _scan_parenthesized(self) -> None:
        self._expect("(")
        self._scan_expression(set())
        self._expect(")")

    def _scan_array_initializer(self) -> None:
        self._expect("{")
        while not self._at("}"):
            if self._at(","):
                self._next()
            elif self._at("{"):
                self._scan_array_initializer()
            else:
                self._scan_expression({",", "}"})
                if not self._at(",") and not self._at("}"):
                    raise self._error(f"expected ',' or '}}', found {self._text()!r}")
        self._expect("}")

    def _scan_expression(self, stop: Set[str]) -> None:
        """Consume one expression run up to a *stop* token or an unmatched closer."""
        after_arrow = False
        while True:
            tok = self._peek()
            if tok is None:
                raise self._error("unexpected end of file")
            t = tok.text
            is_op = tok.kind is TokenKind.OPERATOR
            if is_op and (t in stop or t in _CLOSERS):
                return

            if is_op and t == "(":
                if self._lambda_parameters_ahead():
                    continue
                if self._cast_ahead():
                    continue
                self._scan_parenthesized()
            elif is_op and t == "[":
                self._next()
                self._scan_expression(set())
                self._expect("]")
            elif is_op and t == "{":
                if after_arrow:
                    self._parse_block()
                else:
                    self._scan_array_initializer()
            elif is_op and t == "->":
                self._next()
                after_arrow = True
                continue
            elif is_op and t == "::":
                self._next()
                if self._at("<"):
                    self._skip_type_arguments()
                self._next()
            elif is_op and t == ".":
                self._scan_selector()
            elif t == "new" and tok.kind is TokenKind.IDENTIFIER:
                self._scan_creation()
            elif t == "switch" and tok.kind is TokenKind.IDENTIFIER:
                self._next()
                self._scan_parenthesized()
                self._parse_switch_block()
            elif t in ("this", "super") and tok.kind is TokenKind.IDENTIFIER:
                self._scan_this_or_super()
            elif t == "instanceof" and tok.kind is TokenKind.IDENTIFIER:
                self._next()
                self._parse_modifiers(_LOCAL_MODIFIERS)
                self._parse_type()
                if self._is_ident():
                    # pattern binding
                    self.symbols.values.add(self._next().text)
            elif self._is_ident():
                if self._at("->", 1) and "->" not in stop:
                    self._declare_value(DeclarationKind.PARAMETER, self._next())
                else:
                    self._scan_name_chain()
            else:
                self._next()
            after_arrow = False

    def _lambda_parameters_ahead(self) -> bool:
        """At ``(``: if this opens lambda parameters, declare them and skip."""
        start = self._i
        end = self._match_index(start)
        if self._text_at(end + 1) != "->":
            return False
        group: List[Token] = []
        angle = 0
        for j in range(start + 1, end + 1):
            t = self._toks[j]
            if t.kind is TokenKind.OPERATOR and t.text == "<":
                angle += 1
            elif t.kind is TokenKind.OPERATOR and t.text == ">":
                angle -= 1
            if angle == 0 and t.text in (",", ")") and t.kind is TokenKind.OPERATOR:
                names = [g for g in group if g.kind is TokenKind.IDENTIFIER
                         and g.text not in _KEYWORDS and g.text not in _LOCAL_MODIFIERS]
                if names:
                    self._declare_value(DeclarationKind.PARAMETER, names[-1])
                group = []
            else:
                group.append(t)
        self._i = end + 1
        return True

    def _cast_ahead(self) -> bool:
        """At ``(``: if this opens a cast, skip the parenthesised type."""
        start = self._i
        type_end = self._type_end(start + 1)
        if type_end is None:
            return False
        while self._text_at(type_end) == "&":
            type_end = self._type_end(type_end + 1)
            if type_end is None:
                return False
        if self._text_at(type_end) != ")":
            return False
        if type_end + 1 >= len(self._toks):
            return False
        follower = self._toks[type_end + 1]
        primitive = self._text_at(start + 1) in _PRIMITIVES
        if follower.is_literal:
            ok = True
        elif follower.kind is TokenKind.IDENTIFIER:
            ok = follower.text not in _KEYWORDS or follower.text in _OPERAND_KEYWORDS
        else:
            ok = follower.text in _CAST_OPERAND_OPERATORS or (
                primitive and follower.text in ("-", "+", "++", "--")
            )
        if ok:
            self._i = type_end + 1
        return ok

    def _scan_name_chain(self) -> None:
        first = self._next()
        segments = [first.text]
        while self._at("."):
            if self._is_ident(1):
                self._next()
                segments.append(self._next().text)
            elif self._at("<", 1):
                end = self._type_arguments_end(self._i + 1)
                if end is None or not self._is_ident_at(end):
                    break
                self._i = end
                segments.append(self._next().text)
            else:
                break

        if self._at(".") and self._at("class", 1):
            # class literal
            self._next()
            self._next()
            return

        is_call = self._at("(")
        last_field = len(segments) - 1 if is_call else len(segments)
        for k in range(1, last_field):
            self._access(AccessKind.FIELD, segments[k], ".".join(segments[:k]),
                         QualifierKind.NAME, first.line)
        if is_call:
            qualifier = ".".join(segments[:-1])
            self._access(
                AccessKind.METHOD, segments[-1], qualifier,
                QualifierKind.NAME if qualifier else QualifierKind.NONE,
                first.line, self._count_arguments(),
            )
            self._scan_parenthesized()
        elif self._at(".") and self._at("this", 1):
            # Outer.this
            self._next()
            self._scan_this_or_super()

    def _scan_this_or_super(self) -> None:
        tok = self._next()
        qualifier_kind = QualifierKind.THIS if tok.text == "this" else QualifierKind.SUPER
        if self._at("("):
            # explicit constructor invocation
            self._scan_parenthesized()
            return
        if not self._at("."):
            return
        if self._at("<", 1):
            self._next()
            self._skip_type_arguments()
        elif self._is_ident(1):
            self._next()
        else:
            return
        name = self._ident()
        if self._at("("):
            self._access(AccessKind.METHOD, name.text, tok.text, qualifier_kind,
                         name.line, self._count_arguments())
            self._scan_parenthesized()
        else:
            self._access(AccessKind.FIELD, name.text, tok.text, qualifier_kind, name.line)

    def _scan_selector(self) -> None:
        """A ``.member`` applied to the value of the preceding expression."""
        self._expect(".")
        if self._at("<"):
            self._skip_type_arguments()
        if self._at("new"):
            return
        if self._at("class"):
            self._next()
            return
        if self._at("this") or self._at("super"):
            # Outer.this.x, Iface.super.m()
            self._scan_this_or_super()
            return
        name = self._ident()
        if self._at("("):
            self._access(AccessKind.METHOD, name.text, "", QualifierKind.EXPRESSION,
                         name.line, self._count_arguments())
            self._scan_parenthesized()
        else:
            self._access(AccessKind.FIELD, name.text, "", QualifierKind.EXPRESSION, name.line)

    def _scan_creation(self) -> None:
        self._expect("new")
        if self._at("<"):
            self._skip_type_arguments()
        self._skip_annotations()
        if self._text() in _PRIMITIVES:
            self._next()
        else:
            self._ident()
            if self._at("<"):
                self._skip_type_arguments()
            while self._at(".") and self._is_ident(1):
                self._next()
                self._next()
                if self._at("<"):
                    self._skip_type_arguments()
        if self._at("("):
            self._scan_parenthesized()
            if self._at("{"):
                self._parse_anonymous_body()
            return
        while self._at("["):
            self._next()
            if not self._at("]"):
                self._scan_expression(set())
            self._expect("]")
        if self._at("{"):
            self._scan_array_initializer()


# ═══════════════════════════════════════════════════════════════════════════
#  Entry points
# ═══════════════════════════════════════════════════════════════════════════

def parse_source(text: str, path: Union[str, Path, None] = None) -> CompilationUnit:
    """Scan Java *text* into a :class:`CompilationUnit`."""
    where = Path(path) if path is not None else None
    tokens = tokenize(text, where)
    parser = _Parser(tokens, where)
    parser.parse_unit()

    doc_comments = [
        DocComment(t.line, t.end_line) for t in tokens if t.kind is TokenKind.DOC_COMMENT
    ]
    line_span = tokens[-1].end_line - tokens[0].line + 1 if tokens else 0
    return CompilationUnit(
        path=where,
        declarations=parser.declarations,
        loops=parser.loops,
        catch_clauses=parser.catch_clauses,
        member_accesses=parser.accesses,
        imports=parser.imports,
        doc_comments=doc_comments,
        symbols=parser.symbols,
        line_span=line_span,
    )


class JavaSyntaxService:
    """Reads and scans Java source files."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def parse(self, path: Union[str, Path]) -> CompilationUnit:
        path = Path(path)
        try:
            text = path.read_text(encoding=self.encoding, errors="replace")
        except OSError as exc:
            raise SourceParseError(
                f"cannot read file: {exc.strerror or exc}", path,
                code=ErrorCodes.UNREADABLE_SOURCE,
            ) from exc
        unit = parse_source(text, path)
        _log.debug("scanned %s", unit)
        return unit

    def parse_all(self, paths: Iterable[Union[str, Path]]) -> List[CompilationUnit]:
        return [self.parse(p) for p in paths]
