"""
Tests for service configuration and the SearchService wiring.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sample_search import config as service_config
from sample_search.config import ServiceConfig
from sample_search.core.errors import CorpusNotFoundError
from sample_search.embeddings import MockEmbeddings
from sample_search.service import SearchService
from conftest import TopicEmbeddings


@pytest.fixture(autouse=True)
def reset_service_config():
    service_config.reset_config()
    yield
    service_config.reset_config()


class TestServiceConfig:

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = ServiceConfig.from_env()

        assert config.samples_path == Path("samples")
        assert config.top_k == 10
        assert config.min_score == 0.5
        assert config.max_workers == 4
        assert config.embedding.backend == "ollama"

    def test_from_env(self):
        env = {
            "SAMPLES_PATH": "/data/samples",
            "SEARCH_TOP_K": "3",
            "SEARCH_MIN_SCORE": "0.25",
            "INDEX_MAX_WORKERS": "8",
            "EMBEDDING_BACKEND": "mock",
        }
        with patch.dict("os.environ", env, clear=True):
            config = ServiceConfig.from_env()

        assert config.samples_path == Path("/data/samples")
        assert config.top_k == 3
        assert config.min_score == 0.25
        assert config.max_workers == 8
        assert config.embedding.backend == "mock"

    def test_get_config_singleton(self):
        assert service_config.get_config() is service_config.get_config()


class TestSearchService:

    def test_builds_provider_from_config(self, samples_dir):
        config = ServiceConfig(samples_path=samples_dir)
        config.embedding.backend = "mock"

        service = SearchService(config)

        assert isinstance(service.embeddings, MockEmbeddings)
        assert service.semantic.min_score == 0.5

    def test_store_is_shared(self, samples_dir):
        service = SearchService(ServiceConfig(samples_path=samples_dir), embeddings=TopicEmbeddings())

        run = service.start_indexing()
        assert run.wait(5)

        assert service.store.count() == 4
        assert service.semantic.is_ready() is True
        assert service.status()["document_count"] == 4

    def test_start_indexing_missing_corpus(self, tmp_path):
        service = SearchService(ServiceConfig(samples_path=tmp_path / "missing"), embeddings=TopicEmbeddings())

        with pytest.raises(CorpusNotFoundError):
            service.start_indexing()

    def test_restart_after_completion(self, samples_dir):
        service = SearchService(ServiceConfig(samples_path=samples_dir), embeddings=TopicEmbeddings())

        first = service.start_indexing()
        first.wait(5)
        second = service.start_indexing()
        second.wait(5)

        assert second is not first
        assert service.store.count() == 4

    def test_stop_without_run(self, samples_dir):
        service = SearchService(ServiceConfig(samples_path=samples_dir), embeddings=TopicEmbeddings())
        service.stop(timeout=1)
        assert service.status()["state"] == "not_started"

    def test_close_releases_built_provider(self, samples_dir):
        provider = MagicMock()
        with patch("sample_search.service.get_embedding_provider", return_value=provider):
            service = SearchService(ServiceConfig(samples_path=samples_dir))

        service.close(timeout=1)

        provider.close.assert_called_once()

    def test_close_leaves_injected_provider_open(self, samples_dir):
        embeddings = MagicMock()
        service = SearchService(ServiceConfig(samples_path=samples_dir), embeddings=embeddings)

        service.close(timeout=1)

        embeddings.close.assert_not_called()

    def test_close_cancels_running_index(self, samples_dir):
        service = SearchService(ServiceConfig(samples_path=samples_dir), embeddings=TopicEmbeddings())
        run = service.start_indexing()

        service.close(timeout=5)

        assert run.cancelled is True
        assert run.state.value == "completed"
