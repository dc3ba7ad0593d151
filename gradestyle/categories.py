"""
categories.py — Report categories and their normalisation rules
================================================================

Every report category owns a *counting rule*: a small strategy object that
says which files it looks at (the population) and how many structural units
one file contributes.  The per-category size used by relative scoring is
the sum of a rule over its population.

Usage::

    from gradestyle.categories import CATEGORY_PROFILES, Category

    profile = CATEGORY_PROFILES[Category.CLASS_NAMES]
    print(profile.display_name)            # "Class Names"
    size = sum(profile.rule.count(unit) for unit in units)
"""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .java_syntax import CompilationUnit, DeclarationKind, LoopKind


# ===================================================================
# 1.  Categories
# ===================================================================

class Category(enum.Enum):
    """The closed set of report categories."""
    FORMATTING = "Formatting"
    CLASS_NAMES = "ClassNames"
    METHOD_NAMES = "MethodNames"
    VARIABLE_NAMES = "VariableNames"
    PACKAGE_NAMES = "PackageNames"
    COMMENTING = "Commenting"
    JAVADOC_CLASS = "JavadocClass"
    JAVADOC_METHOD = "JavadocMethod"
    JAVADOC_CONSTRUCTOR = "JavadocConstructor"
    JAVADOC_FIELD = "JavadocField"
    JAVADOC = "Javadoc"
    PRIVATE_INSTANCES = "PrivateInstances"
    ORDERING = "Ordering"
    USELESS = "Useless"
    STRING_CONCATENATION = "StringConcatenation"
    CLONES = "Clones"
    JAVA_FX = "JavaFX"
    MISSING_OVERRIDE = "MissingOverride"
    FINALIZE_OVERRIDE = "FinalizeOverride"
    UNQUALIFIED_STATIC_ACCESS = "UnqualifiedStaticAccess"
    EMPTY_CATCH_BLOCK = "EmptyCatchBlock"

    @property
    def display_name(self) -> str:
        return CATEGORY_PROFILES[self].display_name

    @classmethod
    def lookup(cls, name: str) -> Optional["Category"]:
        """Find a category by value, member name or display name, ignoring case."""
        key = re.sub(r"[\s_]", "", name).lower()
        for category in cls:
            names = (category.value, category.name, category.display_name)
            if key in {re.sub(r"[\s_]", "", n).lower() for n in names}:
                return category
        return None

    def __str__(self) -> str:
        return self.display_name


def _split_camel(name: str) -> str:
    return re.sub(r"(.)([A-Z])", r"\1 \2", name)


# ===================================================================
# 2.  Counting rules
# ===================================================================

class Population(enum.Enum):
    """Which files of a repository a counting rule reads."""
    SOURCE_TREES = "source_trees"
    UI_DESCRIPTIONS = "ui_descriptions"


class CountingRule(ABC):
    """Contribution of one file to a category's size."""

    population = Population.SOURCE_TREES

    @abstractmethod
    def count(self, unit: CompilationUnit) -> int:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class LineSpanRule(CountingRule):
    """Lines from the first to the last token of the file."""

    def count(self, unit: CompilationUnit) -> int:
        return unit.line_span


class DeclarationRule(CountingRule):
    """Number of declarations of the given kinds."""

    def __init__(self, *kinds: DeclarationKind) -> None:
        self.kinds: Tuple[DeclarationKind, ...] = kinds

    def count(self, unit: CompilationUnit) -> int:
        return unit.count_declarations(*self.kinds)

    def __repr__(self) -> str:
        return f"DeclarationRule({', '.join(k.value for k in self.kinds)})"


class DocCommentLinesRule(CountingRule):
    """Total lines spanned by documentation comments."""

    def count(self, unit: CompilationUnit) -> int:
        return unit.doc_comment_lines()


class StaticAccessRule(CountingRule):
    """Method calls and field accesses that resolve to static members."""

    def count(self, unit: CompilationUnit) -> int:
        return unit.count_static_accesses()


class CatchClauseRule(CountingRule):
    def count(self, unit: CompilationUnit) -> int:
        return unit.count_catch_clauses()


class LoopRule(CountingRule):
    """for, for-each, while and do-while statements."""

    def count(self, unit: CompilationUnit) -> int:
        return unit.count_loops(*LoopKind)


class UiDescriptionRule(CountingRule):
    """Each UI description file counts once; nothing is parsed."""

    population = Population.UI_DESCRIPTIONS

    def count(self, unit: CompilationUnit) -> int:
        return 1


# ===================================================================
# 3.  Profiles
# ===================================================================

@dataclass(frozen=True)
class CategoryProfile:
    display_name: str
    rule: CountingRule


_D = DeclarationKind

_RULES: Dict[Category, CountingRule] = {
    Category.FORMATTING: LineSpanRule(),
    Category.CLASS_NAMES: DeclarationRule(_D.CLASS, _D.INTERFACE, _D.ENUM),
    Category.METHOD_NAMES: DeclarationRule(_D.METHOD),
    Category.VARIABLE_NAMES: DeclarationRule(_D.VARIABLE_DECLARATOR, _D.PARAMETER),
    Category.PACKAGE_NAMES: DeclarationRule(_D.PACKAGE),
    Category.COMMENTING: LineSpanRule(),
    Category.JAVADOC_CLASS: DeclarationRule(_D.CLASS, _D.INTERFACE),
    Category.JAVADOC_METHOD: DeclarationRule(_D.METHOD),
    Category.JAVADOC_CONSTRUCTOR: DeclarationRule(_D.CONSTRUCTOR),
    Category.JAVADOC_FIELD: DeclarationRule(_D.STATIC_FIELD, _D.INSTANCE_FIELD),
    Category.JAVADOC: DocCommentLinesRule(),
    Category.PRIVATE_INSTANCES: DeclarationRule(_D.INSTANCE_FIELD),
    Category.ORDERING: DeclarationRule(
        _D.STATIC_FIELD, _D.INSTANCE_FIELD, _D.CONSTRUCTOR, _D.METHOD,
    ),
    Category.USELESS: LineSpanRule(),
    Category.STRING_CONCATENATION: LoopRule(),
    Category.CLONES: LineSpanRule(),
    Category.JAVA_FX: UiDescriptionRule(),
    Category.MISSING_OVERRIDE: DeclarationRule(_D.METHOD),
    Category.FINALIZE_OVERRIDE: DeclarationRule(_D.METHOD),
    Category.UNQUALIFIED_STATIC_ACCESS: StaticAccessRule(),
    Category.EMPTY_CATCH_BLOCK: CatchClauseRule(),
}

_DISPLAY_OVERRIDES = {
    Category.JAVADOC: "Javadoc Formatting",
}

CATEGORY_PROFILES: Dict[Category, CategoryProfile] = {
    category: CategoryProfile(
        _DISPLAY_OVERRIDES.get(category, _split_camel(category.value)),
        rule,
    )
    for category, rule in _RULES.items()
}
