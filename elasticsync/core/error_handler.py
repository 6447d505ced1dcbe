from fastapi import Request, status
from fastapi.responses import JSONResponse
from elasticsearch import ApiError, TransportError
import logging
from datetime import datetime, timezone
import uuid

from .exceptions import BaseAppException, ErrorCode, ErrorType

logger = logging.getLogger(__name__)

async def app_exception_handler(request: Request, exc: BaseAppException):
    """
    Özel uygulama istisnalarını işler
    """
    # Detaylı hata günlüğü
    logger.error(
        f"Application Error [{exc.error_code}]: {exc.message}\n"
        f"Request path: {request.url.path}\n"
        f"Trace ID: {exc.trace_id}\n"
        f"Details: {exc.detail}"
    )

    # JSON yanıt hazırla
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status_code": exc.status_code,
            "message": exc.message,
            "error_code": exc.error_code,
            "error_type": exc.error_type,
            "detail": exc.detail,
            "timestamp": exc.timestamp,
            "path": request.url.path,
            "trace_id": exc.trace_id
        },
        headers=exc.headers or {}
    )

async def elasticsearch_exception_handler(request: Request, exc: Exception):
    """
    Elasticsearch istemci hatalarını işler
    """
    trace_id = str(uuid.uuid4())
    timestamp = datetime.now(timezone.utc).isoformat()

    # Bağlantı hataları 503, sorgu hataları 502 olarak döner
    if isinstance(exc, ApiError):
        status_code = status.HTTP_502_BAD_GATEWAY
        detail = {"status": exc.meta.status if exc.meta else None, "error": str(exc.message)}
    else:
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        detail = str(exc)

    logger.error(
        f"Elasticsearch Error: {str(exc)}\n"
        f"Request path: {request.url.path}\n"
        f"Trace ID: {trace_id}",
        exc_info=exc
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "message": "Search engine error",
            "error_code": ErrorCode.INDEX_UNAVAILABLE,
            "error_type": ErrorType.EXTERNAL_SERVICE_ERROR,
            "detail": detail,
            "timestamp": timestamp,
            "path": request.url.path,
            "trace_id": trace_id
        }
    )

def register_exception_handlers(app):
    """İstisna işleyicilerini uygulamaya kaydeder"""
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(ApiError, elasticsearch_exception_handler)
    app.add_exception_handler(TransportError, elasticsearch_exception_handler)
