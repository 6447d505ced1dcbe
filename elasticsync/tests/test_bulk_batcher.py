import pytest

from ..core.exceptions import BulkSubmissionError, ConfigurationError
from ..models.bulk import DeleteItem, IndexItem
from ..services.bulk_batcher import BulkBatcher

def _item(n):
    return IndexItem(index="test-index", type_name="Place", id=str(n), document={"n": n})

@pytest.mark.asyncio
async def test_auto_flush_at_batch_size(index_client):
    batcher = BulkBatcher(index_client, batch_size=3)
    items = [_item(n) for n in range(3)]

    assert await batcher.add(items[0]) is None
    assert await batcher.add(items[1]) is None
    result = await batcher.add(items[2])

    assert result.ok
    assert result.item_count == 3
    index_client.bulk.assert_called_once()
    assert index_client.bulk.call_args.args[0] == items
    assert len(batcher) == 0

@pytest.mark.asyncio
async def test_explicit_flush_of_partial_batch(index_client):
    batcher = BulkBatcher(index_client, batch_size=3)
    for n in range(2):
        await batcher.add(_item(n))

    index_client.bulk.assert_not_called()
    result = await batcher.flush()

    assert result.item_count == 2
    index_client.bulk.assert_called_once()
    assert [i.id for i in index_client.bulk.call_args.args[0]] == ["0", "1"]

@pytest.mark.asyncio
async def test_flush_empty_buffer_is_noop(index_client):
    batcher = BulkBatcher(index_client, batch_size=3)

    assert await batcher.flush() is None
    index_client.bulk.assert_not_called()
    assert batcher.stats.submissions == 0

@pytest.mark.asyncio
async def test_flushes_preserve_submission_order(index_client):
    batcher = BulkBatcher(index_client, batch_size=2)
    items = [_item(0), DeleteItem(index="test-index", type_name="Place", id="9"), _item(1), _item(2), _item(3)]
    for item in items:
        await batcher.add(item)
    await batcher.flush()

    submitted = [call.args[0] for call in index_client.bulk.call_args_list]
    assert submitted == [items[0:2], items[2:4], items[4:5]]
    assert batcher.stats.submissions == 3

@pytest.mark.asyncio
async def test_submission_error_is_reported_not_raised(index_client):
    index_client.bulk.side_effect = BulkSubmissionError(detail="cluster unavailable")
    batcher = BulkBatcher(index_client, batch_size=10)
    await batcher.add(_item(0))

    result = await batcher.flush()

    assert not result.ok
    assert isinstance(result.error, BulkSubmissionError)
    assert len(batcher) == 0
    assert batcher.stats.failed == [result]

def test_invalid_batch_size(index_client):
    with pytest.raises(ConfigurationError):
        BulkBatcher(index_client, batch_size=0)
