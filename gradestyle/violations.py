"""
violations.py — Immutable violation collections and detector report readers
===========================================================================

Detection happens outside this package; what arrives here is the detectors'
output.  Two report shapes are read:

* a JSON list of ``{"rule": ..., "file": ..., "line": ...}`` objects (``kind``
  may stand in for ``rule``; ``end_line``, ``column`` and ``message`` are
  optional), or ``{"violations": [...]}``;
* a checkstyle XML report (``<checkstyle><file name=...><error .../>``).

Rules with no :class:`~gradestyle.taxonomy.ViolationKind` are skipped and
summarised in one WARNING per report.

Usage::

    from gradestyle.violations import load_checkstyle_xml

    violations = load_checkstyle_xml("target/checkstyle-result.xml")
    print(violations.count(Category.FORMATTING))
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

from .categories import Category
from .errors import UnknownRuleError, ViolationReportError
from .taxonomy import ViolationKind, kind_for_rule, kinds_of

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """One detected rule violation."""
    kind: ViolationKind
    file: str
    line: int
    end_line: Optional[int] = None
    column: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        col = f":{self.column}" if self.column is not None else ""
        return f"{self.file}:{self.line}{col}: [{self.kind.value}] {self.message}"


class Violations:
    """Ordered, immutable collection of :class:`Violation`."""

    __slots__ = ("_items",)

    def __init__(self, violations: Iterable[Violation] = ()) -> None:
        self._items: Tuple[Violation, ...] = tuple(violations)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Violations):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __add__(self, other: "Violations") -> "Violations":
        return Violations(self._items + tuple(other))

    def __repr__(self) -> str:
        return f"Violations({len(self._items)})"

    # -- filtering -------------------------------------------------------

    def filter_by_kind(self, kind: ViolationKind) -> "Violations":
        return Violations(v for v in self._items if v.kind is kind)

    def filter_by_category(self, category: Category) -> "Violations":
        kinds = kinds_of(category)
        return Violations(v for v in self._items if v.kind in kinds)

    # -- counting --------------------------------------------------------

    def count(self, category: Category) -> int:
        return len(self.filter_by_category(category))

    def count_kind(self, kind: ViolationKind) -> int:
        return sum(1 for v in self._items if v.kind is kind)

    def by_file(self) -> Dict[str, "Violations"]:
        grouped: Dict[str, List[Violation]] = {}
        for v in self._items:
            grouped.setdefault(v.file, []).append(v)
        return {name: Violations(vs) for name, vs in grouped.items()}


# ===================================================================
# Report readers
# ===================================================================

def _optional_int(value: Any, field_name: str, where: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ViolationReportError(f"{where}: {field_name} is not an integer: {value!r}")


def _warn_skipped(skipped: Counter, source: str) -> None:
    if skipped:
        rules = ", ".join(f"{rule} ({n})" for rule, n in sorted(skipped.items()))
        _log.warning(
            "%s: skipped %d violation(s) of unknown rules: %s",
            source, sum(skipped.values()), rules,
        )


def parse_violations(entries: Any, source: str = "<data>") -> Violations:
    """Build a collection from already-decoded JSON report data."""
    if isinstance(entries, dict):
        entries = entries.get("violations")
    if not isinstance(entries, list):
        raise ViolationReportError(f"{source}: expected a list of violations")

    out: List[Violation] = []
    skipped: Counter = Counter()
    for index, entry in enumerate(entries):
        where = f"{source}[{index}]"
        if not isinstance(entry, dict):
            raise ViolationReportError(f"{where}: expected an object")
        rule = entry.get("rule", entry.get("kind"))
        if not isinstance(rule, str) or "file" not in entry:
            raise ViolationReportError(f"{where}: 'rule' and 'file' are required")
        try:
            kind = kind_for_rule(rule)
        except UnknownRuleError:
            skipped[rule] += 1
            continue
        line = _optional_int(entry.get("line"), "line", where)
        out.append(Violation(
            kind=kind,
            file=str(entry["file"]),
            line=line or 0,
            end_line=_optional_int(entry.get("end_line"), "end_line", where),
            column=_optional_int(entry.get("column"), "column", where),
            message=str(entry.get("message", "")),
        ))
    _warn_skipped(skipped, source)
    return Violations(out)


def load_violations_json(path: Union[str, Path]) -> Violations:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except OSError as exc:
        raise ViolationReportError(f"{path}: cannot read report: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise ViolationReportError(f"{path}:{exc.lineno}: invalid JSON: {exc.msg}") from exc
    violations = parse_violations(data, str(path))
    _log.info("read %d violation(s) from %s", len(violations), path)
    return violations


def load_checkstyle_xml(path: Union[str, Path]) -> Violations:
    """Read a checkstyle XML report.

    Each ``<error>`` names its check in ``source``; the check's class name
    (``...naming.TypeNameCheck``) is mapped to a kind.
    """
    path = Path(path)
    try:
        root = ET.parse(path).getroot()
    except OSError as exc:
        raise ViolationReportError(f"{path}: cannot read report: {exc.strerror or exc}") from exc
    except ET.ParseError as exc:
        raise ViolationReportError(f"{path}: invalid XML: {exc}") from exc
    if root.tag != "checkstyle":
        raise ViolationReportError(f"{path}: root element is <{root.tag}>, expected <checkstyle>")

    out: List[Violation] = []
    skipped: Counter = Counter()
    for file_elem in root.iter("file"):
        name = file_elem.get("name", "")
        for error in file_elem.iter("error"):
            source = error.get("source", "")
            where = f"{path}: {name}"
            try:
                kind = kind_for_rule(source)
            except UnknownRuleError:
                skipped[source.rsplit(".", 1)[-1] or "<none>"] += 1
                continue
            out.append(Violation(
                kind=kind,
                file=name,
                line=_optional_int(error.get("line"), "line", where) or 0,
                column=_optional_int(error.get("column"), "column", where),
                message=error.get("message", ""),
            ))
    _warn_skipped(skipped, str(path))
    _log.info("read %d violation(s) from %s", len(out), path)
    return Violations(out)
