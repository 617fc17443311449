"""Tests for context block rendering."""

from research_assistant.schemas.internal import SourceType
from research_assistant.services.context_builder import (
    CONTEXT_HEADER,
    build_context,
    group_by_source,
)
from tests.fakes import make_result


def test_empty_results_give_empty_context():
    assert build_context([]) == ""


def test_single_web_result():
    result = make_result("Bitcoin", url="https://bitcoin.org", snippet="Peer-to-peer cash")

    assert build_context([result]) == (
        "Here's what I found from multiple sources:\n\n"
        "## Web Results\n\n"
        "[1] Bitcoin\nPeer-to-peer cash\nSource: https://bitcoin.org\n\n"
    )


def test_content_preferred_over_snippet():
    result = make_result("Repo", snippet="short", content="long description")

    assert "[1] Repo\nlong description\n" in build_context([result])


def test_sections_follow_first_appearance_and_number_within_group():
    results = [
        make_result("Coin", SourceType.MARKET_DATA),
        make_result("Page A"),
        make_result("Page B"),
        make_result("Coin 2", SourceType.MARKET_DATA),
        make_result("owner/repo", SourceType.CODE_HOST),
    ]

    context = build_context(results)

    assert context.startswith(CONTEXT_HEADER)
    crypto = context.index("## Crypto Results")
    web = context.index("## Web Results")
    github = context.index("## Github Results")
    assert crypto < web < github
    assert "[1] Coin\n" in context and "[2] Coin 2\n" in context
    assert "[1] Page A\n" in context and "[2] Page B\n" in context
    assert "[1] owner/repo\n" in context


def test_group_by_source_keeps_order():
    results = [
        make_result("a", SourceType.SOCIAL),
        make_result("b"),
        make_result("c", SourceType.SOCIAL),
    ]

    groups = group_by_source(results)

    assert list(groups) == [SourceType.SOCIAL, SourceType.WEB]
    assert [r.title for r in groups[SourceType.SOCIAL]] == ["a", "c"]


def test_twitter_label():
    assert "## Twitter Results" in build_context([make_result("t", SourceType.SOCIAL)])
