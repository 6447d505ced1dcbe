import pytest
from unittest.mock import AsyncMock, MagicMock
from elasticsearch import ConnectionError as ESConnectionError

from ..core.exceptions import BulkSubmissionError, IndexUnavailableError
from ..models.bulk import DeleteItem, IndexItem
from ..services.index_client import IndexClient

@pytest.fixture
def es():
    client = MagicMock()
    client.bulk = AsyncMock(return_value={"errors": False, "items": []})
    client.search = AsyncMock()
    client.delete_by_query = AsyncMock(return_value={"deleted": 3})
    client.indices.exists = AsyncMock(return_value=False)
    client.indices.create = AsyncMock(return_value={"acknowledged": True})
    client.indices.put_mapping = AsyncMock(return_value={"acknowledged": True})
    client.indices.refresh = AsyncMock(return_value={"_shards": {}})
    client.indices.flush = AsyncMock(return_value={"_shards": {}})
    return client

ITEMS = [
    IndexItem(index="places", type_name="Place", id="1", document={"name": "Cafe"}),
    DeleteItem(index="places", type_name="Place", id="2"),
]

def test_operations_pair_header_and_document(es):
    client = IndexClient(es, type_field="doc_type", legacy_types=False)

    assert client.to_operations(ITEMS) == [
        {"index": {"_index": "places", "_id": "1"}},
        {"name": "Cafe", "doc_type": "Place"},
        {"delete": {"_index": "places", "_id": "2"}},
    ]
    # Orijinal doküman değiştirilmez
    assert ITEMS[0].document == {"name": "Cafe"}

def test_operations_with_legacy_types(es):
    client = IndexClient(es, legacy_types=True)

    assert client.to_operations(ITEMS) == [
        {"index": {"_index": "places", "_id": "1", "_type": "Place"}},
        {"name": "Cafe"},
        {"delete": {"_index": "places", "_id": "2", "_type": "Place"}},
    ]

@pytest.mark.asyncio
async def test_bulk_success(es):
    client = IndexClient(es, legacy_types=False)

    result = await client.bulk(ITEMS, refresh="wait_for")

    assert result.ok
    assert result.item_count == 2
    es.bulk.assert_awaited_once()
    assert es.bulk.call_args.kwargs["refresh"] == "wait_for"

@pytest.mark.asyncio
async def test_bulk_response_with_errors_is_not_ok(es):
    es.bulk.return_value = {"errors": True, "items": [{"index": {"error": {"type": "mapper_parsing_exception"}}}]}
    client = IndexClient(es)

    result = await client.bulk(ITEMS[:1])

    assert not result.ok
    assert result.response["errors"] is True

@pytest.mark.asyncio
async def test_bulk_transport_failure_raises(es):
    es.bulk.side_effect = ESConnectionError("connection refused")
    client = IndexClient(es)

    with pytest.raises(BulkSubmissionError):
        await client.bulk(ITEMS)

@pytest.mark.asyncio
async def test_search_filters_types_and_parses_hits(es):
    es.search.return_value = {
        "hits": {
            "hits": [
                {"_index": "places", "_id": "1", "_score": 1.5, "_source": {"name": "Cafe", "doc_type": "Place"}},
                {"_index": "places", "_id": "2", "_score": 0.5, "_source": {"name": "Bar"}},
            ]
        }
    }
    client = IndexClient(es, type_field="doc_type", legacy_types=False)

    hits = await client.search(index=["places"], query={"match": {"name": "cafe"}}, types=["Place"], from_=5, size=2)

    kwargs = es.search.call_args.kwargs
    assert kwargs["query"] == {
        "bool": {
            "must": [{"match": {"name": "cafe"}}],
            "filter": [{"terms": {"doc_type": ["Place"]}}]
        }
    }
    assert kwargs["from_"] == 5
    assert kwargs["size"] == 2
    assert [(h.id, h.type_name, h.score) for h in hits] == [("1", "Place", 1.5), ("2", None, 0.5)]

@pytest.mark.asyncio
async def test_search_without_types_passes_query_through(es):
    es.search.return_value = {"hits": {"hits": []}}
    client = IndexClient(es)

    assert await client.search(index="places", query={"match_all": {}}) == []
    assert es.search.call_args.kwargs["query"] == {"match_all": {}}

@pytest.mark.asyncio
async def test_put_mapping_creates_missing_index(es, registry):
    descriptor = registry.register("Place", {"loc": "geojson"}, index="places")
    client = IndexClient(es, type_field="doc_type", legacy_types=False)

    await client.put_mapping(descriptor)

    es.indices.create.assert_awaited_once_with(
        index="places",
        mappings={"properties": {"location": {"type": "geo_point"}, "doc_type": {"type": "keyword"}}}
    )
    es.indices.put_mapping.assert_not_called()

@pytest.mark.asyncio
async def test_put_mapping_updates_existing_index(es, registry):
    es.indices.exists.return_value = True
    descriptor = registry.register("Place", {"name": "copy"}, index="places")
    client = IndexClient(es, legacy_types=True)

    await client.put_mapping(descriptor)

    es.indices.put_mapping.assert_awaited_once_with(index="places", properties={})

@pytest.mark.asyncio
async def test_admin_pass_through(es):
    client = IndexClient(es)

    await client.refresh("places")
    await client.flush("places")
    assert await client.truncate("places") == {"deleted": 3}

    es.indices.refresh.assert_awaited_once_with(index="places")
    es.indices.flush.assert_awaited_once_with(index="places")
    es.delete_by_query.assert_awaited_once_with(index="places", query={"match_all": {}})

@pytest.mark.asyncio
async def test_ping(es):
    es.options.return_value.ping = AsyncMock(return_value=True)
    client = IndexClient(es)

    assert await client.ping() is True

@pytest.mark.asyncio
async def test_missing_connection_raises():
    client = IndexClient(None)
    with pytest.raises(IndexUnavailableError):
        await client.bulk(ITEMS)
