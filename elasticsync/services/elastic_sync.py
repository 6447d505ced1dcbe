from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional

from ..models.search import SearchOptions
from ..models.sync import SyncResult
from ..models.type_descriptor import TypeDescriptor
from ..repositories.record_repository import RecordRepository
from ..utils.async_mongodb_connector import get_mongodb_database, close_mongodb_client
from ..utils.config import (
    BULK_SIZE, DEFAULT_INDEX, REFRESH_ON_SAVE, SEARCH_LOOKUP_CONCURRENCY, TYPE_FIELD,
    ES_API_VERSION_TYPES
)
from ..utils.database import connect_elasticsearch, close_elasticsearch
from ..utils.logger import get_logger
from ..core.exceptions import IndexUnavailableError
from .change_stream_listener import ChangeStreamListener
from .collection_synchronizer import CollectionSynchronizer
from .field_projector import FieldProjector
from .index_client import IndexClient
from .mutation_hooks import MutationHookDispatcher
from .registry import TypeRegistry
from .search_resolver import SearchResolver

logger = get_logger(__name__)

class TypeHooks(NamedTuple):
    """Kayıt sonrası veri kaynağına bağlanacak hook'lar"""
    descriptor: TypeDescriptor
    on_saved: Callable[[Any], Any]
    on_removed: Callable[[Any], Any]

class ElasticSync:
    """
    MongoDB koleksiyonlarını Elasticsearch ile senkron tutan ana servis.

    Kayıt defteri, senkronizasyon, mutation hook'ları ve arama çözümleyicisini
    tek bir nesnede birleştirir.
    """

    def __init__(
        self,
        index_client: IndexClient,
        repository: RecordRepository,
        registry: Optional[TypeRegistry] = None,
        batch_size: int = BULK_SIZE,
        refresh_on_save: bool = REFRESH_ON_SAVE,
        lookup_concurrency: int = SEARCH_LOOKUP_CONCURRENCY
    ):
        self.index_client = index_client
        self.repository = repository
        self.registry = registry if registry is not None else TypeRegistry()
        projector = FieldProjector()
        self.synchronizer = CollectionSynchronizer(
            self.registry, repository, index_client, projector=projector, batch_size=batch_size
        )
        self.dispatcher = MutationHookDispatcher(index_client, projector=projector, refresh_on_save=refresh_on_save)
        self.resolver = SearchResolver(self.registry, repository, index_client, lookup_concurrency=lookup_concurrency)
        self.listener: Optional[ChangeStreamListener] = None

    @classmethod
    async def connect(
        cls,
        default_index: str = DEFAULT_INDEX,
        type_field: str = TYPE_FIELD,
        legacy_types: bool = ES_API_VERSION_TYPES,
        es_options: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> "ElasticSync":
        """Yapılandırmadan Elasticsearch ve MongoDB bağlantılarını kurar ve index'i pingler"""
        es = connect_elasticsearch(**(es_options or {}))
        database = await get_mongodb_database()
        instance = cls(
            IndexClient(es, type_field=type_field, legacy_types=legacy_types),
            RecordRepository(database),
            registry=TypeRegistry(default_index),
            **kwargs
        )
        if not await instance.ping():
            logger.error("Elasticsearch ping başarısız")
            await close_elasticsearch()
            await close_mongodb_client()
            raise IndexUnavailableError(detail="Ping to the search cluster failed")
        return instance

    async def close(self):
        if self.listener:
            await self.listener.stop()
            self.listener = None
        await self.dispatcher.drain()
        await close_elasticsearch()
        await close_mongodb_client()

    def register(self, type_name: str, fields: Mapping[str, Any], **options) -> TypeHooks:
        """Tipi kaydeder ve veri kaynağına bağlanacak hook'ları döndürür"""
        descriptor = self.registry.register(type_name, fields, **options)
        on_saved, on_removed = self.dispatcher.hooks_for(descriptor)
        return TypeHooks(descriptor, on_saved, on_removed)

    async def synchronize_type(self, type_name: str) -> SyncResult:
        return await self.synchronizer.synchronize_type(type_name)

    async def synchronize_all(self) -> List[SyncResult]:
        return await self.synchronizer.synchronize_all()

    async def search(self, options: Optional[SearchOptions], query: Optional[Dict[str, Any]], context: Any = None) -> List[Any]:
        return await self.resolver.search(options, query, context)

    async def watch_changes(self) -> ChangeStreamListener:
        """Kayıtlı tüm koleksiyonlar için change stream dinleyicisini başlatır"""
        if self.listener is None:
            self.listener = ChangeStreamListener(self.registry, self.repository, self.dispatcher)
            await self.listener.start()
        return self.listener

    # Yönetim çağrıları (doğrudan index'e iletilir)

    async def put_mapping(self, type_name: str) -> Dict[str, Any]:
        return await self.index_client.put_mapping(self.registry.require(type_name))

    async def refresh(self, index: Optional[str] = None) -> Dict[str, Any]:
        return await self.index_client.refresh(index or self.registry.default_index)

    async def flush(self, index: Optional[str] = None) -> Dict[str, Any]:
        return await self.index_client.flush(index or self.registry.default_index)

    async def truncate(self, index: Optional[str] = None) -> Dict[str, Any]:
        return await self.index_client.truncate(index or self.registry.default_index)

    async def ping(self) -> bool:
        return await self.index_client.ping()
