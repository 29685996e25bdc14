"""
Configuration file for pytest.

This file configures pytest to properly load environment variables
and provides shared fixtures for tests.
"""

import pytest
import dotenv

from semantix_core.config import config_manager as config_module
from semantix_core.config.config_manager import ConfigManager
from semantix_core.model.vector_document import VectorDocument
from semantix_core.store.document_store import DocumentStore

# Load environment variables from .env file
dotenv.load_dotenv()


@pytest.fixture(autouse=True)
def reset_config_singleton():
    """Give every test a fresh configuration manager."""
    ConfigManager._instance = None
    config_module._config_manager = None
    yield
    ConfigManager._instance = None
    config_module._config_manager = None


@pytest.fixture
def axis_documents():
    """Two orthogonal unit documents, d1 along x and d2 along y."""
    return [
        VectorDocument("d1", "East", {"axis": "x"}, [1.0, 0.0]),
        VectorDocument("d2", "North", {"axis": "y"}, [0.0, 1.0]),
    ]


@pytest.fixture
def sample_documents():
    """A small three-dimensional collection with distinct directions."""
    return [
        VectorDocument("alpha", "Alpha", {"lang": "en"}, [1.0, 0.0, 0.0]),
        VectorDocument("beta", "Beta", {"lang": "de"}, [0.9, 0.1, 0.0]),
        VectorDocument("gamma", "Gamma", {}, [0.0, 1.0, 0.0]),
        VectorDocument("delta", "Delta", {"lang": "fr"}, [-1.0, 0.0, 0.0]),
        VectorDocument("epsilon", "Epsilon", {}, [0.5, 0.5, 0.7]),
    ]


@pytest.fixture
def populated_store(sample_documents):
    store = DocumentStore()
    for doc in sample_documents:
        store.upsert(doc)
    return store
