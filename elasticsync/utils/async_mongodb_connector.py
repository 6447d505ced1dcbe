from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, OperationFailure
from typing import Optional

from .config import (
    MONGODB_URI, MONGODB_DB, MONGODB_MAX_POOL_SIZE, MONGODB_MIN_POOL_SIZE,
    MONGODB_MAX_IDLE_TIME_MS
)
from .logger import get_logger

logger = get_logger(__name__)

# Motor client singleton
_motor_client: Optional[AsyncIOMotorClient] = None

async def get_mongodb_client(uri: str = MONGODB_URI) -> AsyncIOMotorClient:
    """MongoDB için async client döndürür (Motor kullanarak)"""
    global _motor_client

    if _motor_client is None:
        try:
            # Connection pool yapılandırması
            _motor_client = AsyncIOMotorClient(
                uri,
                maxPoolSize=MONGODB_MAX_POOL_SIZE,
                minPoolSize=MONGODB_MIN_POOL_SIZE,
                maxIdleTimeMS=MONGODB_MAX_IDLE_TIME_MS,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000
            )
            # Bağlantıyı test et
            await _motor_client.admin.command('ping')
            logger.info(f"MongoDB bağlantısı başarıyla kuruldu (Pool Size: {MONGODB_MAX_POOL_SIZE})")
        except (ConnectionFailure, OperationFailure) as e:
            logger.error(f"MongoDB bağlantı hatası: {e}", exc_info=True)
            _motor_client = None
            raise

    return _motor_client

async def get_mongodb_database(db_name: str = MONGODB_DB) -> AsyncIOMotorDatabase:
    """Yapılandırılmış MongoDB veritabanını döndürür"""
    client = await get_mongodb_client()
    return client[db_name]

async def close_mongodb_client():
    """MongoDB bağlantısını kapatır"""
    global _motor_client
    if _motor_client:
        _motor_client.close()
        _motor_client = None
        logger.info("MongoDB bağlantısı kapatıldı")
