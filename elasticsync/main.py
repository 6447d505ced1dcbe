from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
import logging
import time

from fastapi import FastAPI, Request, Depends
import uvicorn

from .api.deps import get_elastic_sync
from .api.v1 import search, sync
from .core.error_handler import register_exception_handlers
from .services.elastic_sync import ElasticSync

logger = logging.getLogger(__name__)

def create_app(elastic_sync: Optional[ElasticSync] = None) -> FastAPI:
    """
    FastAPI uygulamasını oluşturur.

    Bir ElasticSync örneği verilirse o kullanılır ve kapatılmaz; verilmezse
    başlangıçta yapılandırmadan bağlantı kurulur.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = elastic_sync is None
        app.state.elastic_sync = elastic_sync or await ElasticSync.connect()
        logger.info("ElasticSync servisi başlatıldı")
        try:
            yield
        finally:
            if owned:
                await app.state.elastic_sync.close()
                logger.info("ElasticSync servisi kapatıldı")

    app = FastAPI(
        title="elasticsync",
        description="MongoDB -> Elasticsearch synchronization and search API",
        version="0.1.0",
        lifespan=lifespan
    )

    register_exception_handlers(app)

    # Request duration tracking middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        # Request süresi (ms)
        process_time = (time.time() - start_time) * 1000
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.get("/api/v1/health")
    async def health(service: ElasticSync = Depends(get_elastic_sync)) -> Dict[str, Any]:
        """Index bağlantı durumunu döndürür"""
        reachable = await service.ping()
        return {"status": "ok" if reachable else "degraded", "elasticsearch": reachable}

    app.include_router(search.router, prefix="/api/v1")
    app.include_router(sync.router, prefix="/api/v1")

    return app

if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
