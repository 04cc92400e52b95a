"""Tests for ExceptionChainCrawler."""

import jinja2
import pytest
from conftest import raised

from debug_screen.core.crawler import (
    ExceptionChainCrawler,
    abbreviate,
    attached_exceptions,
    format_trace,
    qualified_type_name,
    underlying_cause,
)
from debug_screen.core.frame_parser import FrameParser


class PaymentDeclinedError(Exception):
    """Custom exception used to check type naming."""


@pytest.fixture
def crawler() -> ExceptionChainCrawler:
    """Crawler without source lookups."""
    return ExceptionChainCrawler(FrameParser([]))


def _chain_a_b_c() -> BaseException:
    """A raised from B raised from C."""
    try:
        try:
            try:
                raise KeyError("c")
            except KeyError as c:
                raise TypeError("b") from c
        except TypeError as b:
            raise ValueError("a") from b
    except ValueError as a:
        return a


def _group_with_cause() -> BaseException:
    """ExceptionGroup [S1, S2] raised from B."""
    try:
        try:
            raise RuntimeError("b")
        except RuntimeError as b:
            raise ExceptionGroup("a", [ValueError("s1"), KeyError("s2")]) from b
    except ExceptionGroup as a:
        return a


class TestCrawlOrder:
    """Tests for chain traversal order."""

    def test_single_exception(self, crawler: ExceptionChainCrawler) -> None:
        """Test an exception without cause or group members gives one record."""
        records = crawler.crawl(raised(ValueError("alone")))

        assert len(records) == 1
        assert records[0].suppressed is False
        assert records[0].message == "alone"

    def test_cause_chain(self, crawler: ExceptionChainCrawler) -> None:
        """Test A <- B <- C gives [A, B, C], none suppressed."""
        records = crawler.crawl(_chain_a_b_c())

        assert [r.message for r in records] == ["a", "b", "'c'"]
        assert [r.suppressed for r in records] == [False, False, False]

    def test_group_members_before_cause(self, crawler: ExceptionChainCrawler) -> None:
        """Test [A, S1, S2, B] with only the group members suppressed."""
        records = crawler.crawl(_group_with_cause())

        assert [r.basic_type for r in records] == [
            "ExceptionGroup",
            "ValueError",
            "KeyError",
            "RuntimeError",
        ]
        assert [r.suppressed for r in records] == [False, True, True, False]

    def test_cause_inside_group_member_stays_suppressed(
        self, crawler: ExceptionChainCrawler
    ) -> None:
        """Test records within a grouped branch all stay suppressed."""
        member = _chain_a_b_c()
        group = raised(ExceptionGroup("outer", [member]))

        records = crawler.crawl(group)

        assert [r.message for r in records][1:] == ["a", "b", "'c'"]
        assert [r.suppressed for r in records] == [False, True, True, True]

    def test_nested_groups_are_expanded_depth_first(
        self, crawler: ExceptionChainCrawler
    ) -> None:
        """Test a group inside a group is fully expanded in place."""
        inner = ExceptionGroup("inner", [ValueError("i1")])
        outer = raised(ExceptionGroup("outer", [inner, KeyError("o2")]))

        records = crawler.crawl(outer)

        assert [r.message.split(" (")[0] for r in records] == ["outer", "inner", "i1", "'o2'"]

    def test_implicit_context_is_followed(self, crawler: ExceptionChainCrawler) -> None:
        """Test an exception raised while handling another links to it."""
        try:
            try:
                raise KeyError("first")
            except KeyError:
                raise ValueError("second")  # noqa: B904
        except ValueError as e:
            records = crawler.crawl(e)

        assert [r.basic_type for r in records] == ["ValueError", "KeyError"]

    def test_suppressed_context_is_not_followed(self, crawler: ExceptionChainCrawler) -> None:
        """Test 'raise ... from None' hides the context."""
        try:
            try:
                raise KeyError("first")
            except KeyError:
                raise ValueError("second") from None
        except ValueError as e:
            records = crawler.crawl(e)

        assert len(records) == 1

    def test_cycle_terminates(self, crawler: ExceptionChainCrawler) -> None:
        """Test a cyclic chain is visited once per exception."""
        first = ValueError("first")
        second = KeyError("second")
        first.__cause__ = second
        second.__cause__ = first

        records = crawler.crawl(first)

        assert [r.basic_type for r in records] == ["ValueError", "KeyError"]


class TestRecordFields:
    """Tests for the fields of each record."""

    def test_long_message_is_abbreviated(self, crawler: ExceptionChainCrawler) -> None:
        """Test a 150-character message is cut to 100 with a marker."""
        message = "x" * 150

        record = crawler.crawl(ValueError(message))[0]

        assert len(record.short_message) == 100
        assert record.short_message.endswith("...")
        assert record.message == message

    def test_short_message_is_unchanged(self, crawler: ExceptionChainCrawler) -> None:
        """Test a 50-character message is kept as is."""
        message = "y" * 50

        record = crawler.crawl(ValueError(message))[0]

        assert record.short_message == message

    def test_missing_message_is_empty(self, crawler: ExceptionChainCrawler) -> None:
        """Test an exception without message gives empty strings."""
        record = crawler.crawl(ValueError())[0]

        assert record.message == ""
        assert record.short_message == ""

    def test_show_full_trace_threshold(self, crawler: ExceptionChainCrawler) -> None:
        """Test show_full_trace is true exactly when the trace exceeds 100 chars."""
        short = crawler.crawl(ValueError("x"))[0]
        long = crawler.crawl(raised(ValueError("z" * 120)))[0]

        assert len(short.full_trace) <= 100
        assert short.show_full_trace is False
        assert len(long.full_trace) > 100
        assert long.show_full_trace is True

    def test_builtin_type_names(self, crawler: ExceptionChainCrawler) -> None:
        """Test builtin exceptions are named without their module."""
        record = crawler.crawl(ValueError("v"))[0]

        assert record.type == "ValueError"
        assert record.basic_type == "ValueError"
        assert record.name == ("ValueError",)

    def test_custom_type_names(self, crawler: ExceptionChainCrawler) -> None:
        """Test custom exceptions carry their module path."""
        record = crawler.crawl(PaymentDeclinedError("no funds"))[0]

        expected = f"{PaymentDeclinedError.__module__}.PaymentDeclinedError"
        assert record.type == expected
        assert record.basic_type == "PaymentDeclinedError"
        assert record.name == tuple(expected.split("."))

    def test_traces_are_formatted(self, crawler: ExceptionChainCrawler) -> None:
        """Test both trace fields contain the native formatting."""
        record = crawler.crawl(raised(ValueError("formatted")))[0]

        assert record.full_trace.startswith("Traceback (most recent call last):")
        assert "ValueError: formatted" in record.full_trace
        assert record.plain_exception == record.full_trace

    def test_frames_are_parsed(self, crawler: ExceptionChainCrawler) -> None:
        """Test each record carries its own frames."""
        record = crawler.crawl(raised(ValueError("framed")))[0]

        assert record.innermost_frame is not None
        assert record.innermost_frame.function == "raised"

    def test_custom_limits(self) -> None:
        """Test the message length and collapse threshold are configurable."""
        crawler = ExceptionChainCrawler(
            FrameParser([]), short_message_length=10, trace_collapse_threshold=5
        )

        record = crawler.crawl(ValueError("a fairly long message"))[0]

        assert record.short_message == "a fairl..."
        assert record.show_full_trace is True


class TestHelpers:
    """Tests for module-level helpers."""

    @pytest.mark.parametrize(
        ("text", "width", "expected"),
        [
            ("short", 10, "short"),
            ("exactly-10", 10, "exactly-10"),
            ("eleven-char", 10, "eleven-..."),
            ("abcdef", 3, "abc"),
        ],
    )
    def test_abbreviate(self, text: str, width: int, expected: str) -> None:
        """Test abbreviation keeps the result within the width."""
        assert abbreviate(text, width) == expected

    def test_qualified_type_name_for_nested_class(self) -> None:
        """Test nested classes use their qualified name."""

        class Inner(Exception):
            pass

        assert qualified_type_name(Inner()).endswith("test_qualified_type_name_for_nested_class.<locals>.Inner")

    def test_attached_exceptions(self) -> None:
        """Test only exception groups have attached exceptions."""
        members = [ValueError("1"), KeyError("2")]

        assert attached_exceptions(ExceptionGroup("g", members)) == tuple(members)
        assert attached_exceptions(ValueError("plain")) == ()

    def test_underlying_cause_prefers_explicit_cause(self) -> None:
        """Test __cause__ wins over __context__."""
        error = ValueError("e")
        cause = KeyError("cause")
        context = TypeError("context")
        error.__cause__ = cause
        error.__context__ = context

        assert underlying_cause(error) is cause

    def test_template_syntax_error_formatting(self) -> None:
        """Test template syntax errors point at the template line."""
        source = "<p>ok</p>\n{% if %}\n"
        try:
            jinja2.Environment().from_string(source)
        except jinja2.TemplateSyntaxError as e:
            trace = format_trace(e)

        assert "TemplateSyntaxError" in trace
        assert 'Template "<template>", line 2' in trace
        assert "{% if %}" in trace
        assert "Traceback" not in trace
