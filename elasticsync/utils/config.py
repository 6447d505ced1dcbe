import os
from typing import List

# Elasticsearch bağlantı ayarları
ES_HOSTS: List[str] = [h.strip() for h in os.getenv("ES_HOSTS", "http://localhost:9200").split(",") if h.strip()]
ES_USER = os.getenv("ES_USER", "")
ES_PASSWORD = os.getenv("ES_PASSWORD", "")
ES_VERIFY_CERTS = os.getenv("ES_VERIFY_CERTS", "true").lower() == "true"
ES_CA_CERTS = os.getenv("ES_CA_CERTS", "") or None
ES_TIMEOUT = int(os.getenv("ES_TIMEOUT", "30"))
ES_MAX_RETRIES = int(os.getenv("ES_MAX_RETRIES", "3"))
ES_PING_TIMEOUT = int(os.getenv("ES_PING_TIMEOUT", "10"))

# Eski (6.x öncesi) kümelerde bulk başlığında _type gönderilir
ES_API_VERSION_TYPES = os.getenv("ES_API_VERSION_TYPES", "false").lower() == "true"

# Index ayarları
DEFAULT_INDEX = os.getenv("DEFAULT_INDEX", "elasticsync")
TYPE_FIELD = os.getenv("TYPE_FIELD", "doc_type")

# Senkronizasyon ayarları
BULK_SIZE = int(os.getenv("BULK_SIZE", "200"))
REFRESH_ON_SAVE = os.getenv("REFRESH_ON_SAVE", "false").lower() == "true"
STREAM_BATCH_SIZE = int(os.getenv("STREAM_BATCH_SIZE", "100"))
WATCH_RETRY_DELAY = float(os.getenv("WATCH_RETRY_DELAY", "5"))  # change stream yeniden bağlanma beklemesi (saniye)

# Arama ayarları
SEARCH_DEFAULT_FROM = int(os.getenv("SEARCH_DEFAULT_FROM", "0"))
SEARCH_DEFAULT_SIZE = int(os.getenv("SEARCH_DEFAULT_SIZE", "10"))
SEARCH_LOOKUP_CONCURRENCY = int(os.getenv("SEARCH_LOOKUP_CONCURRENCY", "0"))  # 0 = sınırsız

# MongoDB ayarları
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "elasticsync")
MONGODB_MAX_POOL_SIZE = int(os.getenv("MONGODB_MAX_POOL_SIZE", "100"))
MONGODB_MIN_POOL_SIZE = int(os.getenv("MONGODB_MIN_POOL_SIZE", "0"))
MONGODB_MAX_IDLE_TIME_MS = int(os.getenv("MONGODB_MAX_IDLE_TIME_MS", "60000"))

# Loglama ayarları
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
LOG_FILE = os.getenv("LOG_FILE", "")
