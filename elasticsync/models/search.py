from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from ..utils.config import SEARCH_DEFAULT_FROM, SEARCH_DEFAULT_SIZE

class SearchOptions(BaseModel):
    """Arama seçenekleri; eksik alanlar tip/index varsayılanlarıyla birleştirilir"""
    model_config = ConfigDict(populate_by_name=True)

    index: Optional[Union[str, List[str]]] = Field(None, description="Aranacak index(ler)")
    type: Optional[Union[str, List[str]]] = Field(None, description="Tip filtresi")
    from_: Optional[int] = Field(None, alias="from", ge=0, description="Sayfalama başlangıcı")
    size: Optional[int] = Field(None, ge=0, description="Sayfa boyutu")

    def type_names(self) -> List[str]:
        if self.type is None:
            return []
        return [self.type] if isinstance(self.type, str) else list(self.type)

    def index_names(self) -> List[str]:
        if self.index is None:
            return []
        return [self.index] if isinstance(self.index, str) else list(self.index)

    def resolved_from(self) -> int:
        return self.from_ if self.from_ is not None else SEARCH_DEFAULT_FROM

    def resolved_size(self) -> int:
        return self.size if self.size is not None else SEARCH_DEFAULT_SIZE

class SearchHit(BaseModel):
    """Index'in döndürdüğü tek bir arama sonucu"""
    index: str
    type_name: Optional[str] = None
    id: str
    score: Optional[float] = None
    source: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_es(cls, hit: Dict[str, Any], type_field: Optional[str] = None) -> "SearchHit":
        """Ham Elasticsearch hit'ini dönüştürür"""
        source = hit.get("_source") or {}
        type_name = hit.get("_type")
        if type_field and source.get(type_field) is not None:
            type_name = source[type_field]
        return cls(
            index=hit["_index"],
            type_name=type_name,
            id=str(hit["_id"]),
            score=hit.get("_score"),
            source=source
        )
