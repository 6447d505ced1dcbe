import pytest
from unittest.mock import AsyncMock, MagicMock
from typing import Any, Dict, List, Optional

from ..core.exceptions import StreamError
from ..models.bulk import BulkResult
from ..services.index_client import IndexClient
from ..services.registry import TypeRegistry

class FakeRepository:
    """Bellek içi kayıt deposu; akışı belirli bir noktada kesebilir"""

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None, fail_at: Optional[int] = None):
        self.collections = collections or {}
        self.fail_at = fail_at
        self.find_calls = []

    async def stream_all(self, collection_name: str):
        for position, record in enumerate(self.collections.get(collection_name, [])):
            if self.fail_at is not None and position == self.fail_at:
                raise StreamError(detail="cursor died")
            yield record

    async def find_one(self, collection_name: str, record_id: Any, id_field: str = "_id"):
        self.find_calls.append((collection_name, record_id))
        for record in self.collections.get(collection_name, []):
            if str(record.get(id_field)) == str(record_id):
                return record
        return None

def make_index_client(bulk_ok: bool = True) -> MagicMock:
    """Bulk çağrılarını kaydeden sahte IndexClient"""
    client = MagicMock(spec=IndexClient)

    async def bulk(items, refresh=False):
        return BulkResult(item_count=len(items), ok=bulk_ok, response={"errors": not bulk_ok, "items": []})

    client.bulk = AsyncMock(side_effect=bulk)
    client.search = AsyncMock(return_value=[])
    return client

@pytest.fixture
def registry():
    return TypeRegistry(default_index="test-index")

@pytest.fixture
def index_client():
    return make_index_client()

@pytest.fixture
def repository():
    return FakeRepository()
