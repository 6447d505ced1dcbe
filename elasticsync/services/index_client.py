import time
from typing import Any, Dict, List, Optional, Sequence, Union

from elasticsearch import AsyncElasticsearch, ApiError, TransportError

from ..core.exceptions import BulkSubmissionError, IndexUnavailableError
from ..models.bulk import BulkItem, BulkResult, IndexItem
from ..models.search import SearchHit
from ..models.type_descriptor import TypeDescriptor
from ..utils.config import TYPE_FIELD, ES_API_VERSION_TYPES, ES_PING_TIMEOUT
from ..utils.logger import get_logger

logger = get_logger(__name__)

def _body(response: Any) -> Any:
    """ObjectApiResponse nesnelerinden ham gövdeyi çıkarır"""
    return getattr(response, "body", response)

class IndexClient:
    """
    Elasticsearch üzerinde bulk, arama ve yönetim çağrıları.

    Tip adı modern kümelerde dokümanın `type_field` alanında taşınır;
    `legacy_types` açıkken bulk başlığında `_type` gönderilir.
    """

    def __init__(
        self,
        es: Optional[AsyncElasticsearch],
        type_field: str = TYPE_FIELD,
        legacy_types: bool = ES_API_VERSION_TYPES
    ):
        self.es = es
        self.type_field = type_field
        self.legacy_types = legacy_types

    def _client(self) -> AsyncElasticsearch:
        if not self.es:
            logger.error("Elasticsearch bağlantısı yok")
            raise IndexUnavailableError()
        return self.es

    def to_operations(self, items: Sequence[BulkItem]) -> List[Dict[str, Any]]:
        """Bulk öğelerini sıralı başlık/doküman çiftlerine çevirir; delete için gövde yoktur"""
        operations: List[Dict[str, Any]] = []
        for item in items:
            header = {"_index": item.index, "_id": item.id}
            if self.legacy_types:
                header["_type"] = item.type_name
            operations.append({item.action: header})
            if isinstance(item, IndexItem):
                document = dict(item.document)
                if not self.legacy_types and self.type_field:
                    document[self.type_field] = item.type_name
                operations.append(document)
        return operations

    async def bulk(self, items: Sequence[BulkItem], refresh: Union[bool, str] = False) -> BulkResult:
        """
        Öğeleri tek bir bulk isteğinde gönderir.

        Returns:
            BulkResult: Yanıt `errors` içeriyorsa ok=False; öğe bazlı ayrıştırma yapılmaz

        Raises:
            BulkSubmissionError: İstek başarısız olduysa
        """
        es = self._client()
        start_time = time.time()
        try:
            response = await es.bulk(operations=self.to_operations(items), refresh=refresh)
        except (ApiError, TransportError) as e:
            raise BulkSubmissionError(detail=str(e)) from e

        body = _body(response)
        elapsed = (time.time() - start_time) * 1000
        has_errors = bool(body.get("errors", False))
        if has_errors:
            logger.error(f"Bulk yanıtı hata içeriyor ({len(items)} öğe)")
        return BulkResult(item_count=len(items), ok=not has_errors, response=body, took_ms=elapsed)

    def _type_filtered_query(self, query: Optional[Dict[str, Any]], types: List[str]) -> Dict[str, Any]:
        query = query or {"match_all": {}}
        if not types:
            return query
        field = "_type" if self.legacy_types else self.type_field
        return {
            "bool": {
                "must": [query],
                "filter": [{"terms": {field: types}}]
            }
        }

    async def search(
        self,
        index: Union[str, List[str]],
        query: Optional[Dict[str, Any]],
        types: Optional[List[str]] = None,
        from_: int = 0,
        size: int = 10
    ) -> List[SearchHit]:
        """Sorguyu çalıştırır ve sıralı hit listesini döndürür"""
        es = self._client()
        response = await es.search(
            index=index,
            query=self._type_filtered_query(query, types or []),
            from_=from_,
            size=size
        )
        body = _body(response)
        hits = body.get("hits", {}).get("hits", [])
        return [SearchHit.from_es(hit, None if self.legacy_types else self.type_field) for hit in hits]

    async def put_mapping(self, descriptor: TypeDescriptor) -> Dict[str, Any]:
        """Tipin mapping'ini gönderir; index yoksa oluşturur"""
        es = self._client()
        properties = descriptor.mapping_properties()
        if not self.legacy_types and self.type_field:
            properties[self.type_field] = {"type": "keyword"}

        exists = await es.indices.exists(index=descriptor.index)
        if not exists:
            logger.info(f"'{descriptor.index}' indeksi oluşturuluyor")
            response = await es.indices.create(index=descriptor.index, mappings={"properties": properties})
        else:
            response = await es.indices.put_mapping(index=descriptor.index, properties=properties)
        logger.info(f"Mapping gönderildi: {descriptor.type_name} -> {descriptor.index}")
        return _body(response)

    async def refresh(self, index: str) -> Dict[str, Any]:
        return _body(await self._client().indices.refresh(index=index))

    async def flush(self, index: str) -> Dict[str, Any]:
        return _body(await self._client().indices.flush(index=index))

    async def truncate(self, index: str) -> Dict[str, Any]:
        """Index'teki tüm dokümanları siler"""
        response = await self._client().delete_by_query(index=index, query={"match_all": {}})
        return _body(response)

    async def ping(self) -> bool:
        es = self._client()
        return bool(await es.options(request_timeout=ES_PING_TIMEOUT).ping())
