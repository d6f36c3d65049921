"""
Keyword search over raw sample contents.

Reads files straight from the corpus, so it works before (or without)
any embeddings being indexed.
"""

from __future__ import annotations

import logging
import re

from sample_search.core.protocols import KeywordResult, WordMatch
from sample_search.indexing.corpus import Corpus
from sample_search.observability import SEARCH_KIND, SEARCH_RESULT_COUNT, get_tracer

logger = logging.getLogger(__name__)

_WORD_SEPARATORS = re.compile(r"[\s.,;:!?()\[\]{}\"'\-_]+")

MIN_WORD_LENGTH = 4


def extract_search_words(message: str) -> list[str]:
    """Distinct lower-cased words of at least MIN_WORD_LENGTH characters."""
    words = []
    for word in _WORD_SEPARATORS.split(message):
        word = word.lower()
        if len(word) >= MIN_WORD_LENGTH and word not in words:
            words.append(word)
    return words


def count_occurrences(content: str, word: str) -> int:
    """Case-insensitive, non-overlapping occurrence count."""
    return content.lower().count(word.lower())


class KeywordSearcher:
    """Scores samples by how often the query's words appear in them."""

    def __init__(self, corpus: Corpus):
        self._corpus = corpus

    def search(self, message: str) -> list[KeywordResult]:
        """
        Search samples for the words in `message`.

        Returns:
            Hits ordered by score (descending), then identifier

        Raises:
            CorpusNotFoundError: the samples directory is missing
        """
        words = extract_search_words(message)
        if not words:
            return []

        with get_tracer().start_span("keyword_search", attributes={SEARCH_KIND: "keyword"}) as span:
            results = []
            for identifier, content in self._corpus.iter_documents():
                matches = [
                    WordMatch(word=word, count=count_occurrences(content, word))
                    for word in words
                ]
                matches = [m for m in matches if m.count > 0]
                score = sum(m.count for m in matches)
                if score > 0:
                    results.append(KeywordResult(identifier=identifier, score=score, matching_words=matches))

            results.sort(key=lambda r: (-r.score, r.identifier))
            span.set_attribute(SEARCH_RESULT_COUNT, len(results))

        logger.debug(f"Keyword search for {words} matched {len(results)} samples")
        return results
