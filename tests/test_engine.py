"""Tests for the MethodParser entry point."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import tempfile

from benchheuristics.engine import MethodParser, ParseState

FIXTURE = Path(__file__).parent / "fixtures/io/example/scheduling/PeriodicTaskTest.java"


class TestMethodParser:
    """Tests for MethodParser."""

    def setup_method(self):
        self.parser = MethodParser()

    def test_parse_method(self):
        parsed = self.parser.parse_method(str(FIXTURE), "dispose")

        assert parsed is not None
        assert parsed.method_name == "dispose"
        assert parsed.num_method_calls == 10
        assert parsed.lines_of_code == 23

    def test_idempotent(self):
        first = self.parser.parse_method(FIXTURE, "dispose")
        second = MethodParser().parse_method(FIXTURE, "dispose")

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_not_found(self):
        outcome = self.parser.parse(FIXTURE, "doesNotExist")

        assert outcome.state is ParseState.NOT_FOUND
        assert not outcome.succeeded
        assert outcome.parsed_method is None
        assert self.parser.parse_method(FIXTURE, "doesNotExist") is None

    def test_missing_file(self):
        outcome = self.parser.parse("/nonexistent/FooTest.java", "dispose")

        assert outcome.state is ParseState.PARSE_ERROR
        assert outcome.path == "/nonexistent/FooTest.java"
        assert self.parser.parse_method("/nonexistent/FooTest.java", "dispose") is None

    def test_invalid_source(self):
        with tempfile.NamedTemporaryFile(suffix=".java", delete=False) as f:
            f.write(b"public class Broken { void dispose( { }")
            f.flush()

        outcome = self.parser.parse(f.name, "dispose")
        assert outcome.state is ParseState.PARSE_ERROR
        assert "syntax error" in outcome.error

    def test_parse_source(self):
        outcome = self.parser.parse_source("class A { void f() { g(); } void g() {} }", "f")

        assert outcome.state is ParseState.SUCCEEDED
        assert outcome.parsed_method.num_method_calls == 1
        assert dict(outcome.parsed_method.package_accesses) == {"": 1}

    def test_custom_fallback_package(self):
        parser = MethodParser(fallback_package="<unresolved>")
        outcome = parser.parse_source("class A { void f(Object o) { o.toString().trim(); } }", "f")

        assert dict(outcome.parsed_method.package_accesses) == {"java.lang": 1, "<unresolved>": 1}

    def test_to_dict(self):
        parsed = self.parser.parse_method(FIXTURE, "dispose")
        d = parsed.to_dict()

        assert d["methodName"] == "dispose"
        assert d["numConditionals"] == 2
        assert d["numLoops"] == 1
        assert d["numNestedLoops"] == 0
        assert d["numMethodCalls"] == 10
        assert d["linesOfCode"] == 23
        assert d["packageAccesses"]["org.junit"] == 2

    def test_shared_across_threads(self):
        names = ["dispose", "empty", "simple", "noop"] * 8
        expected = {name: MethodParser().parse_method(FIXTURE, name) for name in set(names)}

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda name: self.parser.parse_method(FIXTURE, name), names))

        assert results == [expected[name] for name in names]
        assert all(parsed is not None for parsed in results)
