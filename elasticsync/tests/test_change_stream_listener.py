import asyncio
import logging
import pytest
from unittest.mock import MagicMock
from pymongo.errors import PyMongoError

from ..services.change_stream_listener import ChangeStreamListener

@pytest.fixture
def dispatcher():
    return MagicMock()

@pytest.fixture
def place(registry):
    return registry.register("Place", {"name": "copy"})

@pytest.mark.parametrize("operation", ["insert", "update", "replace"])
def test_save_operations_dispatch_on_saved(registry, repository, dispatcher, place, operation):
    listener = ChangeStreamListener(registry, repository, dispatcher)
    record = {"_id": "1", "name": "Cafe"}

    listener.handle_change(place, {"operationType": operation, "fullDocument": record, "documentKey": {"_id": "1"}})

    dispatcher.on_saved.assert_called_once_with(record, place)
    dispatcher.on_removed.assert_not_called()

def test_delete_dispatches_on_removed(registry, repository, dispatcher, place):
    listener = ChangeStreamListener(registry, repository, dispatcher)

    listener.handle_change(place, {"operationType": "delete", "documentKey": {"_id": "1"}})

    dispatcher.on_removed.assert_called_once_with({"_id": "1"}, place)

def test_update_without_full_document_is_skipped(registry, repository, dispatcher, place):
    listener = ChangeStreamListener(registry, repository, dispatcher)

    listener.handle_change(place, {"operationType": "update", "fullDocument": None, "documentKey": {"_id": "1"}})

    dispatcher.on_saved.assert_not_called()

def test_other_operations_are_ignored(registry, repository, dispatcher, place):
    listener = ChangeStreamListener(registry, repository, dispatcher)

    listener.handle_change(place, {"operationType": "drop"})

    dispatcher.on_saved.assert_not_called()
    dispatcher.on_removed.assert_not_called()

class _FakeChangeStream:
    def __init__(self, changes):
        self.changes = list(changes)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.changes:
            change = self.changes.pop(0)
            if isinstance(change, Exception):
                raise change
            return change
        # Gerçek change stream gibi yeni olay beklerken asılı kalır
        await asyncio.Event().wait()

@pytest.mark.asyncio
async def test_start_watches_registered_collections(registry, dispatcher, place):
    repository = MagicMock()
    repository.watch.return_value = _FakeChangeStream([
        {"operationType": "insert", "fullDocument": {"_id": "1", "name": "Cafe"}},
    ])
    listener = ChangeStreamListener(registry, repository, dispatcher)

    await listener.start()
    await asyncio.sleep(0.01)
    await listener.stop()

    repository.watch.assert_called_once_with("Place")
    dispatcher.on_saved.assert_called_once_with({"_id": "1", "name": "Cafe"}, place)
    assert listener.watch_tasks == []

@pytest.mark.asyncio
async def test_watch_is_reopened_after_store_error(registry, dispatcher, place):
    repository = MagicMock()
    repository.watch.side_effect = [
        _FakeChangeStream([PyMongoError("connection reset")]),
        _FakeChangeStream([{"operationType": "insert", "fullDocument": {"_id": "2", "name": "Bar"}}]),
    ]
    listener = ChangeStreamListener(registry, repository, dispatcher, retry_delay=0)

    await listener.start()
    await asyncio.sleep(0.01)
    await listener.stop()

    assert repository.watch.call_count == 2
    dispatcher.on_saved.assert_called_once_with({"_id": "2", "name": "Bar"}, place)

@pytest.mark.asyncio
async def test_unexpected_watch_error_is_logged(registry, dispatcher, place, caplog):
    repository = MagicMock()
    repository.watch.return_value = _FakeChangeStream([RuntimeError("boom")])
    listener = ChangeStreamListener(registry, repository, dispatcher, retry_delay=0)

    with caplog.at_level(logging.CRITICAL):
        await listener.start()
        await asyncio.sleep(0.01)

    task = listener.watch_tasks[0]
    assert task.done()
    assert isinstance(task.exception(), RuntimeError)
    assert any(r.levelno == logging.CRITICAL for r in caplog.records)
    repository.watch.assert_called_once_with("Place")
    await listener.stop()
