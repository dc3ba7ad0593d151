"""
static_access.py — Best-effort static/non-static classification of accesses
===========================================================================

Classifies every :class:`~gradestyle.java_syntax.MemberAccess` of a
compilation unit using only what the unit itself declares and imports.
There is no classpath: names that cannot be decided locally come back as
``UNKNOWN`` with a :class:`~gradestyle.errors.ResolutionFailure` value
explaining why, and the counting code treats them as non-static.

Qualifier paths are classified segment by segment:

* a known variable, parameter, field or enum constant is a **value**;
* a declared or imported type, or an UpperCamel name that is not a value,
  is a **type**;
* after a type, another type-like segment is a nested type and anything
  else is a (static) field, hence a value;
* anything else (package segments, inherited fields) is unknown.
"""

from __future__ import annotations

import enum
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .errors import ResolutionFailure
from .java_syntax import (
    AccessKind,
    CompilationUnit,
    Declaration,
    DeclarationKind,
    MemberAccess,
    QualifierKind,
)

_log = logging.getLogger(__name__)


class AccessTarget(enum.Enum):
    STATIC = "static"
    NON_STATIC = "non_static"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Resolution:
    """Outcome of classifying one member access."""
    target: AccessTarget
    failure: Optional[ResolutionFailure] = None

    @property
    def is_static(self) -> bool:
        return self.target is AccessTarget.STATIC


STATIC = Resolution(AccessTarget.STATIC)
NON_STATIC = Resolution(AccessTarget.NON_STATIC)


class _Path(enum.Enum):
    TYPE = "type"
    VALUE = "value"
    UNKNOWN = "unknown"


def looks_like_type(name: str) -> bool:
    """UpperCamel heuristic: ``String`` and ``HttpClient`` yes, ``MAX`` and ``T`` no."""
    return bool(name) and name[0].isupper() and any(c.islower() for c in name)


class StaticAccessResolver:
    """Classifies the member accesses of one :class:`CompilationUnit`."""

    def __init__(self, unit: CompilationUnit) -> None:
        self.unit = unit
        self._values: Set[str] = set(unit.symbols.values)
        self._fields: Dict[str, List[bool]] = unit.symbols.fields
        self._types: Set[str] = set(unit.type_names)
        self._static_imports: Set[str] = set()
        self._methods: Dict[str, List[Declaration]] = defaultdict(list)

        for imp in unit.imports:
            if imp.wildcard:
                continue
            if imp.static:
                self._static_imports.add(imp.simple_name)
            else:
                self._types.add(imp.simple_name)
        for decl in unit.declarations_of(DeclarationKind.METHOD):
            self._methods[decl.name].append(decl)

    # -- public API ------------------------------------------------------

    def resolve(self, access: MemberAccess) -> Resolution:
        kind = access.qualifier_kind
        if kind is QualifierKind.EXPRESSION:
            return NON_STATIC
        if kind is QualifierKind.SUPER:
            return self._unknown(access, "member inherited from the superclass")
        if kind in (QualifierKind.NONE, QualifierKind.THIS):
            if access.kind is AccessKind.METHOD:
                return self._resolve_local_method(access)
            return self._resolve_local_field(access)

        qualifier = self._classify_path(access.qualifier.split("."))
        if qualifier is _Path.TYPE:
            if access.kind is AccessKind.FIELD and self._is_type(access.name):
                return self._unknown(access, "nested type reference")
            return STATIC
        if qualifier is _Path.VALUE:
            return NON_STATIC
        return self._unknown(access, f"qualifier {access.qualifier!r} is not declared here")

    def classify_all(self) -> Iterator[Tuple[MemberAccess, Resolution]]:
        for access in self.unit.member_accesses:
            yield access, self.resolve(access)

    def count_static(self) -> int:
        count = 0
        for access, resolution in self.classify_all():
            if resolution.is_static:
                count += 1
            elif resolution.failure is not None:
                _log.debug("%s: %s", self.unit.path or "<source>", resolution.failure)
        return count

    # -- lookups ---------------------------------------------------------

    def _unknown(self, access: MemberAccess, reason: str) -> Resolution:
        return Resolution(
            AccessTarget.UNKNOWN,
            ResolutionFailure(reason, str(access), access.line),
        )

    def _is_type(self, name: str) -> bool:
        return name in self._types or (name not in self._values and looks_like_type(name))

    def _classify_path(self, segments: List[str]) -> _Path:
        head = segments[0]
        if head in self._values:
            state = _Path.VALUE
        elif self._is_type(head):
            state = _Path.TYPE
        else:
            state = _Path.UNKNOWN
        for segment in segments[1:]:
            if state is _Path.VALUE:
                break
            if state is _Path.TYPE:
                state = _Path.TYPE if looks_like_type(segment) or segment in self._types else _Path.VALUE
            elif self._is_type(segment):
                state = _Path.TYPE
        return state

    def _resolve_local_method(self, access: MemberAccess) -> Resolution:
        candidates = [
            d for d in self._methods.get(access.name, ())
            if d.arity == access.arity or (d.varargs and access.arity >= d.arity - 1)
        ]
        if not candidates:
            if access.qualifier_kind is QualifierKind.NONE and access.name in self._static_imports:
                return STATIC
            return self._unknown(access, "method is not declared in this compilation unit")
        flags = {d.static for d in candidates}
        if flags == {True}:
            return STATIC
        if flags == {False}:
            return NON_STATIC
        return self._unknown(access, "static and instance overloads match")

    def _resolve_local_field(self, access: MemberAccess) -> Resolution:
        flags = set(self._fields.get(access.name, ()))
        if flags == {True}:
            return STATIC
        if flags == {False}:
            return NON_STATIC
        if not flags:
            return self._unknown(access, "field is not declared in this compilation unit")
        return self._unknown(access, "field name declared both static and non-static")


def classify_accesses(unit: CompilationUnit) -> Iterator[Tuple[MemberAccess, Resolution]]:
    """Yield ``(access, resolution)`` for every member access of *unit*."""
    return unit.resolver.classify_all()
