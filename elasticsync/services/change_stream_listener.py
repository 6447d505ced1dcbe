import asyncio
from typing import Any, Dict, List

from pymongo.errors import PyMongoError

from ..models.type_descriptor import TypeDescriptor
from ..repositories.record_repository import RecordRepository
from ..utils.config import WATCH_RETRY_DELAY
from ..utils.logger import get_logger
from .mutation_hooks import MutationHookDispatcher
from .registry import TypeRegistry

logger = get_logger(__name__)

_SAVE_OPERATIONS = {"insert", "update", "replace"}

class ChangeStreamListener:
    """
    MongoDB change stream olaylarını hook dispatcher'a iletir.

    Her kayıtlı tip için ayrı bir izleme görevi çalışır.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        repository: RecordRepository,
        dispatcher: MutationHookDispatcher,
        retry_delay: float = WATCH_RETRY_DELAY
    ):
        self.registry = registry
        self.repository = repository
        self.dispatcher = dispatcher
        self.retry_delay = retry_delay
        self.watch_tasks: List[asyncio.Task] = []

    async def start(self):
        """İzleme görevlerini başlatır"""
        for descriptor in self.registry:
            task = asyncio.create_task(self._watch(descriptor))
            self.watch_tasks.append(task)
            logger.info(f"Change stream izleniyor: {descriptor.collection}")

    async def stop(self):
        """İzleme görevlerini iptal eder"""
        for task in self.watch_tasks:
            task.cancel()
        await asyncio.gather(*self.watch_tasks, return_exceptions=True)
        self.watch_tasks = []

    async def _watch(self, descriptor: TypeDescriptor):
        """Change stream'i izler; veri kaynağı hatasında veya akış bitince yeniden açar"""
        while True:
            try:
                async with self.repository.watch(descriptor.collection) as stream:
                    async for change in stream:
                        self.handle_change(descriptor, change)
                logger.warning(f"Change stream kapandı, yeniden açılacak: {descriptor.collection}")
            except asyncio.CancelledError:
                logger.info(f"Change stream görevi iptal edildi: {descriptor.collection}")
                raise
            except PyMongoError as e:
                logger.error(
                    f"Change stream hatası ({descriptor.collection}), "
                    f"{self.retry_delay} saniye sonra yeniden denenecek: {e}",
                    exc_info=True
                )
            except Exception as e:
                logger.critical(
                    f"Change stream durdu ({descriptor.collection}), değişiklikler index'e aktarılmayacak: {e}",
                    exc_info=True
                )
                raise
            await asyncio.sleep(self.retry_delay)

    def handle_change(self, descriptor: TypeDescriptor, change: Dict[str, Any]):
        """Tek bir change stream olayını ilgili hook'a yönlendirir"""
        operation = change.get("operationType")

        if operation in _SAVE_OPERATIONS:
            record = change.get("fullDocument")
            if record is None:
                # Güncellemeden sonra silinen doküman için tam doküman gelmez
                logger.warning(f"Change stream olayında doküman yok: {descriptor.collection} {change.get('documentKey')}")
                return None
            return self.dispatcher.on_saved(record, descriptor)

        if operation == "delete":
            record = dict(change.get("documentKey") or {})
            if descriptor.id_field not in record:
                logger.warning(
                    f"Silinen kaydın '{descriptor.id_field}' alanı bilinmiyor: {descriptor.collection}"
                )
                return None
            return self.dispatcher.on_removed(record, descriptor)

        logger.debug(f"Change stream olayı atlandı: {operation}")
        return None
