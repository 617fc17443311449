"""Renders aggregated results into the context block injected into the prompt."""

from research_assistant.schemas.internal import RetrievalResult, SourceType

CONTEXT_HEADER = "Here's what I found from multiple sources:\n\n"


def group_by_source(results: list[RetrievalResult]) -> dict[SourceType, list[RetrievalResult]]:
    """Group results by source, keeping first-seen group order and in-group order."""
    groups: dict[SourceType, list[RetrievalResult]] = {}
    for result in results:
        groups.setdefault(result.source, []).append(result)
    return groups


def build_context(results: list[RetrievalResult]) -> str:
    """Build the context block, one labeled section per source.

    Returns an empty string for no results so callers can leave the
    context section out of the prompt entirely.
    """
    if not results:
        return ""

    parts = [CONTEXT_HEADER]
    for source, group in group_by_source(results).items():
        parts.append(f"## {source.label} Results\n\n")
        for i, result in enumerate(group, 1):
            parts.append(f"[{i}] {result.title}\n{result.body}\nSource: {result.url}\n\n")

    return "".join(parts)
