import asyncio
import inspect
from typing import Any, Dict, List, Optional

from ..core.exceptions import ConfigurationError, SearchLookupError
from ..models.search import SearchHit, SearchOptions
from ..models.type_descriptor import TypeDescriptor
from ..repositories.record_repository import RecordRepository
from ..utils.config import SEARCH_LOOKUP_CONCURRENCY
from ..utils.logger import get_logger
from .index_client import IndexClient
from .registry import TypeRegistry

logger = get_logger(__name__)

async def default_lookup(
    repository: RecordRepository,
    descriptor: TypeDescriptor,
    hit: SearchHit,
    context: Any = None
) -> Optional[Dict[str, Any]]:
    """Varsayılan strateji: kimliğe göre kaynaktan tek kayıt getirir"""
    return await repository.find_one(descriptor.collection, hit.id, descriptor.id_field)

class SearchResolver:
    """
    Index'te arama yapar ve her hit'i canlı bir kayda çözer.

    - Hit'ler için lookup'lar eşzamanlı başlatılır, hepsi bitene kadar beklenir
    - Bulunamayan kayıtlar ve bilinmeyen tipler loglanır ve atlanır
    - Herhangi bir lookup hatası tüm aramayı başarısız kılar
    """

    def __init__(
        self,
        registry: TypeRegistry,
        repository: RecordRepository,
        index_client: IndexClient,
        lookup_concurrency: int = SEARCH_LOOKUP_CONCURRENCY
    ):
        self.registry = registry
        self.repository = repository
        self.index_client = index_client
        self.lookup_concurrency = lookup_concurrency

    def _resolve_indexes(self, options: SearchOptions) -> List[str]:
        indexes = options.index_names()
        if indexes:
            return indexes
        type_indexes = {
            descriptor.index
            for descriptor in (self.registry.get(name) for name in options.type_names())
            if descriptor is not None
        }
        return sorted(type_indexes) or [self.registry.default_index]

    async def search(
        self,
        options: Optional[SearchOptions],
        query: Optional[Dict[str, Any]],
        context: Any = None
    ) -> List[Any]:
        """
        Arama yapar ve hit'leri kayıtlara çözer.

        Args:
            options: index, tip filtresi ve sayfalama
            query: Elasticsearch sorgu gövdesi (olduğu gibi iletilir)
            context: Lookup stratejilerine aktarılan çağrı bağlamı

        Returns:
            List[Any]: Çözülen kayıtlar

        Raises:
            SearchLookupError: Bir lookup stratejisi hata verdiyse
        """
        options = options or SearchOptions()
        hits = await self.index_client.search(
            index=self._resolve_indexes(options),
            query=query,
            types=options.type_names(),
            from_=options.resolved_from(),
            size=options.resolved_size()
        )
        logger.debug(f"elasticsearch ham sonuç: {len(hits)} hit")

        if not hits:
            return []

        semaphore = asyncio.Semaphore(self.lookup_concurrency) if self.lookup_concurrency > 0 else None
        outcomes = await asyncio.gather(
            *(self._resolve_hit(hit, context, semaphore) for hit in hits),
            return_exceptions=True
        )

        records = []
        failures = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                failures.append(outcome)
            elif outcome is not None:
                records.append(outcome)

        if failures:
            for failure in failures[1:]:
                logger.error(f"Ek lookup hatası: {failure}")
            raise failures[0]
        return records

    async def _resolve_hit(self, hit: SearchHit, context: Any, semaphore: Optional[asyncio.Semaphore]) -> Any:
        descriptor = self.registry.descriptor_for_hit(hit)
        if descriptor is None:
            error = ConfigurationError(
                message="search failed: model is not defined",
                detail=f"No registered type for hit {hit.index}/{hit.type_name}/{hit.id}"
            )
            logger.error(f"{error.message} - {error.detail}")
            return None

        if semaphore is None:
            return await self._lookup(descriptor, hit, context)
        async with semaphore:
            return await self._lookup(descriptor, hit, context)

    async def _lookup(self, descriptor: TypeDescriptor, hit: SearchHit, context: Any) -> Any:
        strategy = descriptor.lookup or default_lookup
        try:
            record = strategy(self.repository, descriptor, hit, context)
            if inspect.isawaitable(record):
                record = await record
        except SearchLookupError:
            raise
        except Exception as e:
            raise SearchLookupError(detail=f"{descriptor.type_name}/{hit.id}: {e}") from e

        if record is None:
            logger.warning(f"Arama sonucu kaynakta bulunamadı: {descriptor.type_name}/{hit.id}")
        return record
