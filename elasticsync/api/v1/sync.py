from fastapi import APIRouter, Depends, status
from typing import Any, Dict
import logging

from ..deps import get_elastic_sync
from ...services.elastic_sync import ElasticSync

router = APIRouter(prefix="/sync", tags=["sync"])
logger = logging.getLogger(__name__)

@router.post("", status_code=status.HTTP_200_OK)
async def synchronize_all(elastic_sync: ElasticSync = Depends(get_elastic_sync)) -> Dict[str, Any]:
    """Tüm kayıtlı tipleri index'e aktarır"""
    results = await elastic_sync.synchronize_all()
    return {"results": [r.to_dict() for r in results]}

@router.post("/{type_name}")
async def synchronize_type(type_name: str, elastic_sync: ElasticSync = Depends(get_elastic_sync)) -> Dict[str, Any]:
    """Tek bir tipin tüm koleksiyonunu index'e aktarır"""
    result = await elastic_sync.synchronize_type(type_name)
    return result.to_dict()

@router.put("/{type_name}/mapping")
async def put_mapping(type_name: str, elastic_sync: ElasticSync = Depends(get_elastic_sync)) -> Dict[str, Any]:
    """Tipin mapping'ini index'e gönderir"""
    response = await elastic_sync.put_mapping(type_name)
    logger.info(f"Mapping güncellendi: {type_name}")
    return {"type": type_name, "acknowledged": bool(response.get("acknowledged", False))}
