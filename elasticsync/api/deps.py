from fastapi import Request

from ..core.exceptions import IndexUnavailableError
from ..services.elastic_sync import ElasticSync

def get_elastic_sync(request: Request) -> ElasticSync:
    """Uygulama durumundaki ElasticSync örneğini döndürür"""
    elastic_sync = getattr(request.app.state, "elastic_sync", None)
    if elastic_sync is None:
        raise IndexUnavailableError(detail="Service is not connected")
    return elastic_sync
