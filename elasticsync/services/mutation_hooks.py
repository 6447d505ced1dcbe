import asyncio
from typing import Any, Awaitable, Callable, Optional, Set, Tuple

from ..models.bulk import BulkResult, DeleteItem, IndexItem
from ..models.type_descriptor import TypeDescriptor
from ..utils.config import REFRESH_ON_SAVE
from ..utils.logger import get_logger
from .field_projector import FieldProjector
from .index_client import IndexClient

logger = get_logger(__name__)

Hook = Callable[[Any], "asyncio.Task"]

class MutationHookDispatcher:
    """
    Tek kayıt kaydetme/silme olaylarını index'e yansıtır.

    `on_saved` ve `on_removed` arka planda bir görev başlatır ve hemen döner;
    görev hataları yalnızca loglanır, tetikleyen veri işlemine geri dönmez.
    """

    def __init__(
        self,
        index_client: IndexClient,
        projector: Optional[FieldProjector] = None,
        refresh_on_save: bool = REFRESH_ON_SAVE
    ):
        self.index_client = index_client
        self.projector = projector or FieldProjector()
        self.refresh_on_save = refresh_on_save
        self._tasks: Set[asyncio.Task] = set()

    async def index_record(self, record: Any, descriptor: TypeDescriptor) -> BulkResult:
        """Kaydı dönüştürür ve tek öğelik bulk index isteği gönderir"""
        document = await self.projector.project(record, descriptor.fields)
        item = IndexItem.for_record(descriptor, record, document)
        return await self.index_client.bulk([item], refresh=self.refresh_on_save)

    async def remove_record(self, record: Any, descriptor: TypeDescriptor) -> BulkResult:
        """Kaydın kimliğiyle tek öğelik bulk delete isteği gönderir"""
        item = DeleteItem.for_record(descriptor, record)
        return await self.index_client.bulk([item], refresh=self.refresh_on_save)

    def on_saved(self, record: Any, descriptor: TypeDescriptor) -> asyncio.Task:
        return self._spawn(self.index_record(record, descriptor), "save", descriptor)

    def on_removed(self, record: Any, descriptor: TypeDescriptor) -> asyncio.Task:
        return self._spawn(self.remove_record(record, descriptor), "delete", descriptor)

    def hooks_for(self, descriptor: TypeDescriptor) -> Tuple[Hook, Hook]:
        """Veri kaynağının bildirim mekanizmasına bağlanacak (on_saved, on_removed) çiftini döndürür"""
        def on_saved(record: Any) -> asyncio.Task:
            return self.on_saved(record, descriptor)

        def on_removed(record: Any) -> asyncio.Task:
            return self.on_removed(record, descriptor)

        return on_saved, on_removed

    def _spawn(self, operation: Awaitable[BulkResult], action: str, descriptor: TypeDescriptor) -> asyncio.Task:
        task = asyncio.create_task(self._run(operation, action, descriptor))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, operation: Awaitable[BulkResult], action: str, descriptor: TypeDescriptor) -> Optional[BulkResult]:
        try:
            result = await operation
        except Exception as e:
            logger.error(f"{action} işlemi başarısız ({descriptor.type_name}): {e}", exc_info=True)
            return None

        if result.ok:
            logger.info(f"{action} işlemi başarılı ({descriptor.type_name})")
        else:
            logger.error(f"{action} işlemi index tarafından reddedildi ({descriptor.type_name}): {result.response}")
        return result

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self):
        """Bekleyen tüm hook görevlerinin bitmesini bekler"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
