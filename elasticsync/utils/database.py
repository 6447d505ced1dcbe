from elasticsearch import AsyncElasticsearch
from typing import Optional

from .config import (
    ES_HOSTS, ES_USER, ES_PASSWORD, ES_VERIFY_CERTS, ES_CA_CERTS,
    ES_TIMEOUT, ES_MAX_RETRIES
)
from .logger import get_logger
from ..core.exceptions import IndexUnavailableError

logger = get_logger(__name__)

es_client: Optional[AsyncElasticsearch] = None

def connect_elasticsearch(**overrides) -> AsyncElasticsearch:
    """Elasticsearch bağlantısını kurar. Bağlantı parametreleri olduğu gibi istemciye aktarılır."""
    global es_client
    if es_client:
        return es_client

    hosts = overrides.pop("hosts", ES_HOSTS)
    logger.info(f"Elasticsearch'e bağlanılıyor: {', '.join(hosts)}")

    basic_auth = (ES_USER, ES_PASSWORD) if ES_USER and ES_PASSWORD else None
    options = {
        "basic_auth": basic_auth,
        "verify_certs": ES_VERIFY_CERTS,
        "ca_certs": ES_CA_CERTS,
        "request_timeout": ES_TIMEOUT,
        "max_retries": ES_MAX_RETRIES,
        "retry_on_timeout": True,
    }
    options.update(overrides)

    try:
        es_client = AsyncElasticsearch(hosts=hosts, **options)
        logger.info("AsyncElasticsearch istemcisi oluşturuldu")
    except Exception as e:
        logger.error(f"ES istemcisi oluşturulamadı: {e}", exc_info=True)
        es_client = None
        raise

    return es_client

def get_es_client() -> AsyncElasticsearch:
    """Bağlı Elasticsearch istemcisini döndürür"""
    if not es_client:
        logger.error("Elasticsearch bağlantısı yok")
        raise IndexUnavailableError(detail="connect_elasticsearch() has not been called")
    return es_client

async def close_elasticsearch():
    """Elasticsearch bağlantısını kapatır."""
    global es_client
    if es_client:
        logger.info("Elasticsearch bağlantısı kapatılıyor...")
        try:
            await es_client.close()
            logger.info("Elasticsearch bağlantısı kapatıldı")
        except Exception as e:
            logger.error(f"ES kapatma hatası: {e}", exc_info=True)
        finally:
            es_client = None
