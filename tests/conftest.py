"""
Shared fixtures.

TopicEmbeddings is a deterministic stand-in for a real model: each
dimension counts words belonging to one topic, so texts about the same
topic point the same way and cosine similarity behaves predictably.
"""

import re

import numpy as np
import pytest

from sample_search.observability import reset_config, reset_tracer


TOPICS = {
    "fruit": {"apple", "apples", "orange", "oranges", "fruit", "citrus", "salad", "recipes"},
    "data": {"vector", "vectors", "database", "databases", "index", "query"},
    "csla": {"business", "rule", "rules", "property", "portal", "authorization"},
}


class TopicEmbeddings:
    """Embeds text as per-topic word counts."""

    def __init__(self, fail_on: set[str] | None = None, error: Exception | None = None):
        self.calls: list[str] = []
        self._fail_on = fail_on or set()
        self._error = error

    def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if self._error is not None and any(marker in text for marker in self._fail_on):
            raise self._error
        words = re.findall(r"[a-z]+", text.lower())
        return np.array(
            [sum(1 for w in words if w in vocab) for vocab in TOPICS.values()],
            dtype=np.float32,
        )

    def embed_batch(self, texts: list[str]) -> list[np.ndarray]:
        return [self.embed(t) for t in texts]


@pytest.fixture
def topic_embeddings():
    return TopicEmbeddings()


@pytest.fixture
def samples_dir(tmp_path):
    """A small corpus with common and version-tagged samples."""
    root = tmp_path / "samples"
    (root / "v9").mkdir(parents=True)
    (root / "v10").mkdir()
    (root / "guides").mkdir()

    (root / "BusinessClass.cs").write_text(
        "public class Customer : BusinessBase<Customer> { // business rules and property info }",
        encoding="utf-8",
    )
    (root / "guides" / "DataPortal.md").write_text(
        "# Data portal\nThe data portal routes calls. Portal configuration lives here.",
        encoding="utf-8",
    )
    (root / "v9" / "Authorization.cs").write_text(
        "// authorization rules for version nine",
        encoding="utf-8",
    )
    (root / "v10" / "Authorization.cs").write_text(
        "// authorization rules for version ten, authorization everywhere",
        encoding="utf-8",
    )
    (root / "notes.txt").write_text("not a sample", encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def reset_observability():
    """Keep tracing disabled and the singletons clean between tests."""
    reset_tracer()
    reset_config()
    yield
    reset_tracer()
    reset_config()
