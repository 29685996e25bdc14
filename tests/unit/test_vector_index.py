"""
Tests for the VectorIndex facade.
"""

import os
from unittest.mock import patch

import pytest

from semantix_core.config.config_manager import ConfigManager
from semantix_core.exceptions import DimensionMismatchError, InvalidDocumentError
from semantix_core.index.vector_index import VectorIndex
from semantix_core.index.vector_store_interface import VectorStoreInterface
from semantix_core.model.vector_document import VectorDocument


@pytest.fixture
def index(axis_documents):
    index = VectorIndex()
    for doc in axis_documents:
        index.add(doc)
    return index


class TestVectorIndex:
    """Test cases for VectorIndex."""

    def test_is_a_vector_store(self, index):
        assert isinstance(index, VectorStoreInterface)
        assert str(index) == "VectorIndex(documents=2)"

    def test_add_get_delete(self, index):
        assert index.count() == 2
        assert len(index) == 2
        assert index.get("d1").title == "East"

        assert index.delete("d1") is True
        assert index.delete("d1") is False
        assert index.get("d1") is None
        assert index.count() == 1

    def test_upsert_alias(self, index):
        assert index.upsert(VectorDocument("d1", "Replaced", vector=[1.0, 1.0])) is False
        assert index.get("d1").title == "Replaced"
        assert index.count() == 2

    def test_add_rejects_invalid(self, index):
        with pytest.raises(InvalidDocumentError):
            index.add(VectorDocument("bad", vector=[float("nan")]))

    def test_search(self, index):
        results = index.search([1.0, 0.0], 1)

        assert [(doc.doc_id, round(score, 6)) for doc, score in results] == [("d1", 1.0)]

    def test_clear(self, index):
        index.clear()

        assert index.get_all() == []

    def test_export_import(self, tmp_path, index):
        path = tmp_path / "out" / "docs.json"

        assert index.export(path) == 2
        other = VectorIndex()
        assert other.import_file(path) == 2

        assert sorted(other.get_all(), key=lambda d: d.doc_id) == sorted(
            index.get_all(), key=lambda d: d.doc_id
        )

    @pytest.mark.asyncio
    async def test_async_export_import(self, tmp_path, index):
        path = tmp_path / "docs.json"
        other = VectorIndex()

        await index.export_async(path)
        assert await other.import_file_async(path) == 2
        assert other.count() == 2

    def test_from_config(self, tmp_path):
        env_vars = {"SEMANTIX_SHARD_COUNT": "4", "SEMANTIX_SKIP_INCOMPATIBLE": "true"}
        with patch.dict(os.environ, env_vars, clear=True):
            config = ConfigManager(tmp_path)

        index = VectorIndex.from_config(config)

        assert index.store.shard_count == 4
        assert index.search_index.skip_incompatible is True

    def test_strict_index_fails_on_mixed_dimensions(self):
        index = VectorIndex()
        index.add(VectorDocument("two", vector=[1.0, 0.0]))
        index.add(VectorDocument("three", vector=[1.0, 0.0, 0.0]))

        with pytest.raises(DimensionMismatchError):
            index.search([1.0, 0.0], 2)

    def test_lenient_index_skips_mixed_dimensions(self):
        index = VectorIndex(skip_incompatible=True)
        index.add(VectorDocument("two", vector=[1.0, 0.0]))
        index.add(VectorDocument("three", vector=[1.0, 0.0, 0.0]))

        results = index.search([1.0, 0.0], 2)

        assert [doc.doc_id for doc, _ in results] == ["two"]
