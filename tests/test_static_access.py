# tests/test_static_access.py
"""
Tests for static/non-static classification of member accesses.
"""

import textwrap

import pytest

from gradestyle.errors import ResolutionFailure
from gradestyle.java_syntax import parse_source
from gradestyle.static_access import (
    AccessTarget,
    StaticAccessResolver,
    classify_accesses,
    looks_like_type,
)


@pytest.fixture(scope="module")
def util(util_java):
    return parse_source(util_java, "Util.java")


@pytest.fixture(scope="module")
def resolved(util):
    return {str(access): resolution for access, resolution in classify_accesses(util)}


class TestLooksLikeType:

    @pytest.mark.parametrize("name", ["String", "HttpClient", "Math"])
    def test_upper_camel(self, name):
        assert looks_like_type(name)

    @pytest.mark.parametrize("name", ["MAX", "T", "out", "", "x"])
    def test_not_upper_camel(self, name):
        assert not looks_like_type(name)


class TestClassification:

    @pytest.mark.parametrize("access", [
        "twice()",              # local static method
        "Math.max()",           # type-qualified call
        "sort()",               # static import
        "System.out",           # static field of a type
        "Util.counter",         # declared type
        "String.valueOf()",
        "Util.twice()",
    ])
    def test_static(self, resolved, access):
        assert resolved[access].target is AccessTarget.STATIC

    @pytest.mark.parametrize("access", [
        "self()",
        "System.out.println()",  # call on the value of a static field
        "this.size",
        "names.size()",
        "trim()",                # call on a call result
    ])
    def test_non_static(self, resolved, access):
        assert resolved[access].target is AccessTarget.NON_STATIC

    def test_undeclared_method_is_unknown(self, resolved):
        resolution = resolved["helper()"]
        assert resolution.target is AccessTarget.UNKNOWN
        assert isinstance(resolution.failure, ResolutionFailure)
        assert resolution.failure.name == "helper()"
        assert "helper()" in str(resolution.failure)

    def test_count_static(self, util):
        assert util.count_static_accesses() == 7

    def test_unit_classify(self, util):
        targets = {str(a): util.classify(a).target for a in util.member_accesses}
        assert targets["Math.max()"] is AccessTarget.STATIC
        assert targets["this.size"] is AccessTarget.NON_STATIC
        assert targets["helper()"] is AccessTarget.UNKNOWN

    def test_resolver_is_built_once(self, util):
        assert util.resolver is util.resolver
        assert isinstance(util.resolver, StaticAccessResolver)


class TestUnknowns:

    def _resolve(self, src):
        unit = parse_source(textwrap.dedent(src))
        return [r for _, r in classify_accesses(unit)], unit

    def test_super_is_unknown(self):
        results, unit = self._resolve("""\
            class A extends B {
                public String toString() { return super.toString(); }
            }
        """)
        assert [r.target for r in results] == [AccessTarget.UNKNOWN]
        assert unit.count_static_accesses() == 0

    def test_mixed_overloads_are_unknown(self):
        results, _ = self._resolve("""\
            class A {
                static void f(int x) {}
                void f(long x) {}
                void g() { f(1); }
            }
        """)
        assert results[0].target is AccessTarget.UNKNOWN

    def test_varargs_overload_matches(self):
        results, _ = self._resolve("""\
            class A {
                static int sum(int... xs) { return 0; }
                void g() { sum(1, 2, 3); sum(); }
            }
        """)
        assert [r.target for r in results] == [AccessTarget.STATIC, AccessTarget.STATIC]

    def test_package_qualifier_is_unknown(self):
        results, _ = self._resolve("""\
            class A {
                void g() { java.util.Collections.sort(null); }
            }
        """)
        # java, util: unknown; Collections: type; sort is then a static call
        assert results[-1].target is AccessTarget.STATIC

    def test_nested_type_reference(self):
        results, _ = self._resolve("""\
            class A {
                Object g() { return Map.Entry.comparingByKey(); }
            }
        """)
        targets = [r.target for r in results]
        assert targets == [AccessTarget.UNKNOWN, AccessTarget.STATIC]

    def test_local_variable_shadows_type_heuristic(self):
        results, _ = self._resolve("""\
            class A {
                void g() { String Name = ""; Name.length(); }
            }
        """)
        assert results[0].target is AccessTarget.NON_STATIC
