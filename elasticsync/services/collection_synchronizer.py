import asyncio
import time
from typing import List, Optional

from ..core.exceptions import ProjectionError, StreamError, SynchronizationError
from ..models.bulk import IndexItem
from ..models.sync import SyncResult
from ..repositories.record_repository import RecordRepository
from ..utils.config import BULK_SIZE
from ..utils.logger import get_logger
from .bulk_batcher import BulkBatcher
from .field_projector import FieldProjector
from .index_client import IndexClient
from .registry import TypeRegistry

logger = get_logger(__name__)

class CollectionSynchronizer:
    """
    Bir tipin tüm koleksiyonunu index'e aktaran servis.

    Kayıtlar tek tek çekilir: bir sonraki kayıt ancak mevcut kayıt dönüştürülüp
    batcher'a eklendikten (ve gerekirse flush edildikten) sonra istenir.
    Her senkronizasyon kendi batcher'ını kullanır, tipler paralel çalışabilir.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        repository: RecordRepository,
        index_client: IndexClient,
        projector: Optional[FieldProjector] = None,
        batch_size: int = BULK_SIZE
    ):
        self.registry = registry
        self.repository = repository
        self.index_client = index_client
        self.projector = projector or FieldProjector()
        self.batch_size = batch_size

    async def synchronize_type(self, type_name: str) -> SyncResult:
        """
        Tipin tüm kayıtlarını index'e aktarır.

        Raises:
            ConfigurationError: Tip kayıtlı değilse
            StreamError: Kayıt akışı yarıda kesildiyse (kalan buffer gönderilmez)
        """
        descriptor = self.registry.require(type_name)
        batcher = BulkBatcher(self.index_client, batch_size=self.batch_size)
        result = SyncResult(type_name=type_name)
        start_time = time.time()

        logger.info(f"Senkronizasyon başlatılıyor: {type_name} ({descriptor.collection} -> {descriptor.index})")

        records = self.repository.stream_all(descriptor.collection)
        try:
            async for record in records:
                result.record_count += 1
                try:
                    document = await self.projector.project(record, descriptor.fields)
                    item = IndexItem.for_record(descriptor, record, document)
                except ProjectionError as e:
                    result.failed_records += 1
                    logger.error(f"Kayıt dönüştürülemedi ({type_name}): {e.message} - {e.detail}")
                    continue
                await batcher.add(item)
        except StreamError as e:
            logger.error(f"Senkronizasyon başarısız: {type_name}: {e.detail}")
            raise
        finally:
            # Döngü başka bir hatayla kesilse de cursor kapatılır
            await records.aclose()

        await batcher.flush()

        result.bulk_submissions = batcher.stats.submissions
        result.failed_batches = batcher.stats.failed
        elapsed = time.time() - start_time
        logger.info(
            f"{type_name} senkronize edildi: {result.record_count} kayıt, "
            f"{result.bulk_submissions} bulk istek, {len(result.failed_batches)} hatalı, {elapsed:.2f} saniyede"
        )
        return result

    async def synchronize_all(self) -> List[SyncResult]:
        """
        Tüm kayıtlı tipleri paralel senkronize eder.

        Tüm tipler bitene kadar bekler; herhangi bir tip başarısız olduysa
        hataları tek bir SynchronizationError içinde toplar.
        """
        type_names = self.registry.type_names
        outcomes = await asyncio.gather(
            *(self.synchronize_type(name) for name in type_names),
            return_exceptions=True
        )

        errors = []
        results = []
        for name, outcome in zip(type_names, outcomes):
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                logger.error(f"Tip senkronizasyonu başarısız: {name}: {outcome}")
                errors.append(outcome)
            else:
                results.append(outcome)

        if errors:
            raise SynchronizationError(errors)
        return results
