from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from bson import ObjectId
import logging

from ..deps import get_elastic_sync
from ...models.search import SearchOptions
from ...services.elastic_sync import ElasticSync

router = APIRouter(prefix="/search", tags=["search"])
logger = logging.getLogger(__name__)

class SearchRequest(BaseModel):
    """Arama isteği"""
    options: SearchOptions = Field(default_factory=SearchOptions, description="index, tip ve sayfalama")
    query: Optional[Dict[str, Any]] = Field(None, description="Elasticsearch sorgu gövdesi")
    context: Optional[Dict[str, Any]] = Field(None, description="Lookup stratejilerine aktarılan bağlam")

class SearchResponse(BaseModel):
    """Arama yanıtı"""
    count: int
    results: List[Dict[str, Any]]

@router.post("", response_model=SearchResponse)
async def search_records(
    request: SearchRequest,
    elastic_sync: ElasticSync = Depends(get_elastic_sync)
):
    """
    Index'te arama yapar ve sonuçları kaynaktaki güncel kayıtlar olarak döndürür
    - **options**: index, type, from, size
    - **query**: Elasticsearch sorgusu (olduğu gibi iletilir)
    """
    records = await elastic_sync.search(request.options, request.query, request.context)
    results = jsonable_encoder(records, custom_encoder={ObjectId: str})
    return SearchResponse(count=len(results), results=results)
