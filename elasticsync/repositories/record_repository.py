from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from bson import ObjectId
from typing import Any, AsyncIterator, Dict, List, Optional

from ..core.exceptions import StreamError
from ..utils.config import STREAM_BATCH_SIZE
from ..utils.logger import get_logger

logger = get_logger(__name__)

class RecordRepository:
    """MongoDB kayıt repository sınıfı"""

    def __init__(self, database: AsyncIOMotorDatabase, stream_batch_size: int = STREAM_BATCH_SIZE):
        self.database = database
        self.stream_batch_size = stream_batch_size

    @staticmethod
    def _id_query(record_id: Any, id_field: str = "_id") -> Dict[str, Any]:
        """
        Index'teki string kimliği saklanan olası tiplerle eşler.

        Kimlikler index'e string olarak yazılır; kayıt ObjectId, tam sayı
        veya string kimlikle saklanmış olabilir.
        """
        if not isinstance(record_id, str):
            return {id_field: record_id}

        candidates: List[Any] = [record_id]
        if ObjectId.is_valid(record_id):
            candidates.append(ObjectId(record_id))
        try:
            number = int(record_id)
        except ValueError:
            number = None
        if number is not None and str(number) == record_id:
            candidates.append(number)

        if len(candidates) == 1:
            return {id_field: record_id}
        return {id_field: {"$in": candidates}}

    async def find_one(self, collection_name: str, record_id: Any, id_field: str = "_id") -> Optional[Dict[str, Any]]:
        """Kimliğe göre tek bir kayıt getirir; bulunamazsa None döner"""
        return await self.database[collection_name].find_one(self._id_query(record_id, id_field))

    async def stream_all(self, collection_name: str) -> AsyncIterator[Dict[str, Any]]:
        """
        Koleksiyondaki tüm kayıtları sırayla akıtır.

        Tüketici bir sonraki kaydı ancak mevcut kaydı işledikten sonra ister;
        cursor en fazla `stream_batch_size` kaydı önceden getirir.
        """
        cursor = self.database[collection_name].find({}, batch_size=self.stream_batch_size)
        try:
            async for record in cursor:
                yield record
        except PyMongoError as e:
            logger.error(f"MongoDB akış hatası ({collection_name}): {e}", exc_info=True)
            raise StreamError(
                message=f"Streaming '{collection_name}' failed",
                detail=str(e)
            ) from e
        finally:
            await cursor.close()

    def watch(self, collection_name: str):
        """Koleksiyon için change stream açar (güncellemelerde tam doküman ile)"""
        return self.database[collection_name].watch(full_document="updateLookup")
