import asyncio
from typing import List, Optional

from ..core.exceptions import BulkSubmissionError, ConfigurationError
from ..models.bulk import BulkItem, BulkResult, BulkStats
from ..utils.config import BULK_SIZE
from ..utils.logger import get_logger
from .index_client import IndexClient

logger = get_logger(__name__)

class BulkBatcher:
    """
    Bulk öğelerini sabit boyutlu gruplarda biriktirir ve gönderir.

    - Buffer `batch_size` öğeye ulaştığında `add` otomatik flush yapar
    - Flush çağrıları eklenme sırasıyla gönderilir
    - Akış sonunda kalan öğeler için `flush` açıkça çağrılmalıdır
    """

    def __init__(self, index_client: IndexClient, batch_size: int = BULK_SIZE, refresh=False):
        if batch_size < 1:
            raise ConfigurationError(
                message="Invalid batch size",
                detail=f"batch_size must be >= 1, got {batch_size}"
            )
        self.index_client = index_client
        self.batch_size = batch_size
        self.refresh = refresh
        self.stats = BulkStats()
        self._buffer: List[BulkItem] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._buffer)

    async def add(self, item: BulkItem) -> Optional[BulkResult]:
        """Öğeyi ekler; eşik aşıldıysa flush sonucunu döndürür"""
        self._buffer.append(item)
        if len(self._buffer) >= self.batch_size:
            logger.debug(f"{len(self._buffer)} bulk öğesi gönderiliyor")
            return await self.flush()
        return None

    async def flush(self) -> Optional[BulkResult]:
        """
        Buffer'ı tek bir bulk isteği olarak gönderir ve temizler.

        Boş buffer'da hiçbir şey yapmaz ve None döner. Gönderim hataları
        fırlatılmaz, loglanır ve BulkResult içinde döner.
        """
        async with self._lock:
            if not self._buffer:
                return None
            batch, self._buffer = self._buffer, []

            try:
                result = await self.index_client.bulk(batch, refresh=self.refresh)
            except BulkSubmissionError as e:
                logger.error(f"Bulk işlemi başarısız ({len(batch)} öğe): {e.detail}")
                result = BulkResult(item_count=len(batch), ok=False, error=e)

            self.stats.results.append(result)
            return result
