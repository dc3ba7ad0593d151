"""
taxonomy.py — Violation kinds and the category each one reports under
=====================================================================

A :class:`ViolationKind` is one fine-grained rule of an external detector
(a checkstyle check, a PMD rule, the clone detector or one of the FXML
checks).  Its value is the rule identifier the detector writes into its
report.  Every kind belongs to exactly one :class:`Category`, so category
totals can be summed over kinds without double counting.
"""

from __future__ import annotations

import enum
from typing import Dict, FrozenSet

from .categories import Category
from .errors import UnknownRuleError


class ViolationKind(enum.Enum):
    # Formatting
    INDENTATION = "Indentation"
    LINE_LENGTH = "LineLength"
    WHITESPACE_AROUND = "WhitespaceAround"
    WHITESPACE_AFTER = "WhitespaceAfter"
    NO_WHITESPACE_BEFORE = "NoWhitespaceBefore"
    NO_WHITESPACE_AFTER = "NoWhitespaceAfter"
    LEFT_CURLY = "LeftCurly"
    RIGHT_CURLY = "RightCurly"
    NEED_BRACES = "NeedBraces"
    ONE_STATEMENT_PER_LINE = "OneStatementPerLine"
    MULTIPLE_VARIABLE_DECLARATIONS = "MultipleVariableDeclarations"
    EMPTY_LINE_SEPARATOR = "EmptyLineSeparator"
    OPERATOR_WRAP = "OperatorWrap"
    FILE_TAB_CHARACTER = "FileTabCharacter"

    # Naming
    TYPE_NAME = "TypeName"
    METHOD_NAME = "MethodName"
    LOCAL_VARIABLE_NAME = "LocalVariableName"
    LOCAL_FINAL_VARIABLE_NAME = "LocalFinalVariableName"
    PARAMETER_NAME = "ParameterName"
    LAMBDA_PARAMETER_NAME = "LambdaParameterName"
    CATCH_PARAMETER_NAME = "CatchParameterName"
    MEMBER_NAME = "MemberName"
    STATIC_VARIABLE_NAME = "StaticVariableName"
    CONSTANT_NAME = "ConstantName"
    PACKAGE_NAME = "PackageName"

    # Comments
    TODO_COMMENT = "TodoComment"
    TRAILING_COMMENT = "TrailingComment"
    COMMENTS_INDENTATION = "CommentsIndentation"

    # Javadoc presence
    MISSING_JAVADOC_TYPE = "MissingJavadocType"
    MISSING_JAVADOC_METHOD = "MissingJavadocMethod"
    MISSING_JAVADOC_CONSTRUCTOR = "MissingJavadocConstructor"
    JAVADOC_VARIABLE = "JavadocVariable"

    # Javadoc formatting
    JAVADOC_STYLE = "JavadocStyle"
    JAVADOC_PARAGRAPH = "JavadocParagraph"
    JAVADOC_METHOD = "JavadocMethod"
    JAVADOC_TAG_CONTINUATION_INDENTATION = "JavadocTagContinuationIndentation"
    SUMMARY_JAVADOC = "SummaryJavadoc"
    NON_EMPTY_ATCLAUSE_DESCRIPTION = "NonEmptyAtclauseDescription"
    ATCLAUSE_ORDER = "AtclauseOrder"
    INVALID_JAVADOC_POSITION = "InvalidJavadocPosition"

    # Encapsulation and ordering
    VISIBILITY_MODIFIER = "VisibilityModifier"
    DECLARATION_ORDER = "DeclarationOrder"
    OVERLOAD_METHODS_DECLARATION_ORDER = "OverloadMethodsDeclarationOrder"

    # Dead code
    UNUSED_IMPORTS = "UnusedImports"
    UNUSED_LOCAL_VARIABLE = "UnusedLocalVariable"
    UNUSED_PRIVATE_FIELD = "UnusedPrivateField"
    UNUSED_PRIVATE_METHOD = "UnusedPrivateMethod"
    UNUSED_FORMAL_PARAMETER = "UnusedFormalParameter"
    EMPTY_STATEMENT = "EmptyStatement"

    STRING_CONCATENATION_IN_LOOP = "UseStringBufferForStringAppends"
    DUPLICATE_CODE = "CPD"

    # FXML
    FXML_INLINE_STYLE = "FxmlInlineStyle"
    FXML_MISSING_CONTROLLER = "FxmlMissingController"
    FXML_HARDCODED_TEXT = "FxmlHardcodedText"

    MISSING_OVERRIDE = "MissingOverride"

    # finalize()
    FINALIZE_OVERLOADED = "FinalizeOverloaded"
    FINALIZE_DOES_NOT_CALL_SUPER_FINALIZE = "FinalizeDoesNotCallSuperFinalize"
    FINALIZE_ONLY_CALLS_SUPER_FINALIZE = "FinalizeOnlyCallsSuperFinalize"
    EMPTY_FINALIZER = "EmptyFinalizer"
    AVOID_CALLING_FINALIZE = "AvoidCallingFinalize"
    FINALIZE_SHOULD_BE_PROTECTED = "FinalizeShouldBeProtected"

    UNQUALIFIED_STATIC_METHOD_CALL = "UnqualifiedStaticMethodCall"
    UNQUALIFIED_STATIC_FIELD_ACCESS = "UnqualifiedStaticFieldAccess"

    EMPTY_CATCH_BLOCK = "EmptyCatchBlock"

    @property
    def rule(self) -> str:
        return self.value

    @property
    def category(self) -> Category:
        return category_of(self)


_K = ViolationKind
_C = Category

_KIND_CATEGORY: Dict[ViolationKind, Category] = {
    _K.INDENTATION: _C.FORMATTING,
    _K.LINE_LENGTH: _C.FORMATTING,
    _K.WHITESPACE_AROUND: _C.FORMATTING,
    _K.WHITESPACE_AFTER: _C.FORMATTING,
    _K.NO_WHITESPACE_BEFORE: _C.FORMATTING,
    _K.NO_WHITESPACE_AFTER: _C.FORMATTING,
    _K.LEFT_CURLY: _C.FORMATTING,
    _K.RIGHT_CURLY: _C.FORMATTING,
    _K.NEED_BRACES: _C.FORMATTING,
    _K.ONE_STATEMENT_PER_LINE: _C.FORMATTING,
    _K.MULTIPLE_VARIABLE_DECLARATIONS: _C.FORMATTING,
    _K.EMPTY_LINE_SEPARATOR: _C.FORMATTING,
    _K.OPERATOR_WRAP: _C.FORMATTING,
    _K.FILE_TAB_CHARACTER: _C.FORMATTING,

    _K.TYPE_NAME: _C.CLASS_NAMES,
    _K.METHOD_NAME: _C.METHOD_NAMES,
    _K.LOCAL_VARIABLE_NAME: _C.VARIABLE_NAMES,
    _K.LOCAL_FINAL_VARIABLE_NAME: _C.VARIABLE_NAMES,
    _K.PARAMETER_NAME: _C.VARIABLE_NAMES,
    _K.LAMBDA_PARAMETER_NAME: _C.VARIABLE_NAMES,
    _K.CATCH_PARAMETER_NAME: _C.VARIABLE_NAMES,
    _K.MEMBER_NAME: _C.VARIABLE_NAMES,
    _K.STATIC_VARIABLE_NAME: _C.VARIABLE_NAMES,
    _K.CONSTANT_NAME: _C.VARIABLE_NAMES,
    _K.PACKAGE_NAME: _C.PACKAGE_NAMES,

    _K.TODO_COMMENT: _C.COMMENTING,
    _K.TRAILING_COMMENT: _C.COMMENTING,
    _K.COMMENTS_INDENTATION: _C.COMMENTING,

    _K.MISSING_JAVADOC_TYPE: _C.JAVADOC_CLASS,
    _K.MISSING_JAVADOC_METHOD: _C.JAVADOC_METHOD,
    _K.MISSING_JAVADOC_CONSTRUCTOR: _C.JAVADOC_CONSTRUCTOR,
    _K.JAVADOC_VARIABLE: _C.JAVADOC_FIELD,

    _K.JAVADOC_STYLE: _C.JAVADOC,
    _K.JAVADOC_PARAGRAPH: _C.JAVADOC,
    _K.JAVADOC_METHOD: _C.JAVADOC,
    _K.JAVADOC_TAG_CONTINUATION_INDENTATION: _C.JAVADOC,
    _K.SUMMARY_JAVADOC: _C.JAVADOC,
    _K.NON_EMPTY_ATCLAUSE_DESCRIPTION: _C.JAVADOC,
    _K.ATCLAUSE_ORDER: _C.JAVADOC,
    _K.INVALID_JAVADOC_POSITION: _C.JAVADOC,

    _K.VISIBILITY_MODIFIER: _C.PRIVATE_INSTANCES,
    _K.DECLARATION_ORDER: _C.ORDERING,
    _K.OVERLOAD_METHODS_DECLARATION_ORDER: _C.ORDERING,

    _K.UNUSED_IMPORTS: _C.USELESS,
    _K.UNUSED_LOCAL_VARIABLE: _C.USELESS,
    _K.UNUSED_PRIVATE_FIELD: _C.USELESS,
    _K.UNUSED_PRIVATE_METHOD: _C.USELESS,
    _K.UNUSED_FORMAL_PARAMETER: _C.USELESS,
    _K.EMPTY_STATEMENT: _C.USELESS,

    _K.STRING_CONCATENATION_IN_LOOP: _C.STRING_CONCATENATION,
    _K.DUPLICATE_CODE: _C.CLONES,

    _K.FXML_INLINE_STYLE: _C.JAVA_FX,
    _K.FXML_MISSING_CONTROLLER: _C.JAVA_FX,
    _K.FXML_HARDCODED_TEXT: _C.JAVA_FX,

    _K.MISSING_OVERRIDE: _C.MISSING_OVERRIDE,

    _K.FINALIZE_OVERLOADED: _C.FINALIZE_OVERRIDE,
    _K.FINALIZE_DOES_NOT_CALL_SUPER_FINALIZE: _C.FINALIZE_OVERRIDE,
    _K.FINALIZE_ONLY_CALLS_SUPER_FINALIZE: _C.FINALIZE_OVERRIDE,
    _K.EMPTY_FINALIZER: _C.FINALIZE_OVERRIDE,
    _K.AVOID_CALLING_FINALIZE: _C.FINALIZE_OVERRIDE,
    _K.FINALIZE_SHOULD_BE_PROTECTED: _C.FINALIZE_OVERRIDE,

    _K.UNQUALIFIED_STATIC_METHOD_CALL: _C.UNQUALIFIED_STATIC_ACCESS,
    _K.UNQUALIFIED_STATIC_FIELD_ACCESS: _C.UNQUALIFIED_STATIC_ACCESS,

    _K.EMPTY_CATCH_BLOCK: _C.EMPTY_CATCH_BLOCK,
}

_BY_RULE: Dict[str, ViolationKind] = {k.value.lower(): k for k in ViolationKind}
_BY_RULE.update({k.name.lower(): k for k in ViolationKind})


def category_of(kind: ViolationKind) -> Category:
    """The category *kind* reports under."""
    return _KIND_CATEGORY[kind]


def kinds_of(category: Category) -> FrozenSet[ViolationKind]:
    """All kinds reporting under *category* (possibly empty)."""
    return frozenset(k for k in ViolationKind if _KIND_CATEGORY[k] is category)


def kind_for_rule(rule: str) -> ViolationKind:
    """Look a kind up by detector rule identifier.

    Accepts the bare identifier (``TypeName``), the enum member name
    (``TYPE_NAME``) and checkstyle's qualified class name
    (``com.puppycrawl.tools.checkstyle.checks.naming.TypeNameCheck``).
    """
    key = rule.strip().rsplit(".", 1)[-1]
    kind = _BY_RULE.get(key.lower())
    if kind is None and key.endswith("Check"):
        kind = _BY_RULE.get(key[:-len("Check")].lower())
    if kind is None:
        raise UnknownRuleError(rule)
    return kind
