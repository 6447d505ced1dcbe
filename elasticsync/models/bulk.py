from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .type_descriptor import TypeDescriptor, record_id

@dataclass(frozen=True)
class IndexItem:
    """Bulk isteğinde tek bir index operasyonu (başlık + doküman)"""
    index: str
    type_name: str
    id: str
    document: Dict[str, Any]

    action = "index"

    @classmethod
    def for_record(cls, descriptor: TypeDescriptor, record: Any, document: Dict[str, Any]) -> "IndexItem":
        return cls(
            index=descriptor.index,
            type_name=descriptor.type_name,
            id=record_id(record, descriptor.id_field),
            document=document
        )

@dataclass(frozen=True)
class DeleteItem:
    """Bulk isteğinde tek bir delete operasyonu (yalnızca başlık)"""
    index: str
    type_name: str
    id: str

    action = "delete"

    @classmethod
    def for_record(cls, descriptor: TypeDescriptor, record: Any) -> "DeleteItem":
        return cls(
            index=descriptor.index,
            type_name=descriptor.type_name,
            id=record_id(record, descriptor.id_field)
        )

BulkItem = Union[IndexItem, DeleteItem]

@dataclass
class BulkResult:
    """
    Tek bir bulk çağrısının toplam sonucu.

    Öğe bazlı sonuçlar ayrıştırılmaz; `response` index'in ham yanıtıdır.
    """
    item_count: int
    ok: bool
    response: Optional[Dict[str, Any]] = None
    error: Optional[BaseException] = None
    took_ms: float = 0.0

@dataclass
class BulkStats:
    """Bir batcher'ın ömrü boyunca gönderdiği bulk çağrıları"""
    results: List[BulkResult] = field(default_factory=list)

    @property
    def submissions(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> List[BulkResult]:
        return [r for r in self.results if not r.ok]
