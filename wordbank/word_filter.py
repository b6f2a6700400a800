"""
In-memory filtering for word list views.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from wordbank.schemas import Word, WordStatus


def filter_words(
    words: Iterable[Word],
    status: Optional[Union[WordStatus, str]] = None,
    tags: Optional[Iterable[str]] = None,
    search_query: Optional[str] = None,
    needs_review: Optional[bool] = None
) -> list[Word]:
    """
    Filter words by status, tags, free text and review flag.

    Args:
        words: Words to filter (order is preserved)
        status: Keep only this status
        tags: Keep words carrying ALL of these tag ids
        search_query: Case-insensitive match on lemma, definitions, examples
        needs_review: Keep only words with this flag value

    Returns:
        Filtered list of words
    """
    filtered = list(words)

    if status:
        wanted = WordStatus(status).value
        filtered = [w for w in filtered if w.status == wanted]

    required_tags = set(tags or ())
    if required_tags:
        filtered = [w for w in filtered if required_tags.issubset(w.tags)]

    query = (search_query or "").strip().lower()
    if query:
        filtered = [
            w for w in filtered
            if query in w.lemma.lower()
            or query in w.definition_zh.lower()
            or query in w.definition_en.lower()
            or any(query in example.lower() for example in w.examples)
        ]

    if needs_review is not None:
        filtered = [w for w in filtered if w.needs_review == needs_review]

    return filtered


def get_filtered_count(words: Iterable[Word], **options) -> int:
    return len(filter_words(words, **options))
