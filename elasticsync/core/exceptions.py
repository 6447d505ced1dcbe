from typing import Any, Dict, Optional, List, Union
from fastapi import HTTPException, status
import uuid
from datetime import datetime, timezone


# Uygulama hata türleri
class ErrorType:
    """Uygulama hata türleri"""
    PROJECTION_ERROR = "projection_error"
    STREAM_ERROR = "stream_error"
    BULK_ERROR = "bulk_error"
    LOOKUP_ERROR = "lookup_error"
    CONFIGURATION_ERROR = "configuration_error"
    SYNCHRONIZATION_ERROR = "synchronization_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    INTERNAL_ERROR = "internal_error"

# Uygulama hata kodları
class ErrorCode:
    """Uygulama hata kodları"""
    # Dönüşüm hataları (1000-1999)
    PROJECTION_FAILED = "ERR_1000"
    INVALID_FIELD_VALUE = "ERR_1001"
    MISSING_RECORD_ID = "ERR_1002"

    # Veri kaynağı hataları (3000-3999)
    STREAM_FAILED = "ERR_3000"
    LOOKUP_FAILED = "ERR_3001"

    # Index hataları (5000-5999)
    INDEX_UNAVAILABLE = "ERR_5000"
    BULK_REJECTED = "ERR_5001"
    SYNCHRONIZATION_FAILED = "ERR_5002"

    # Sistem hataları (9000-9999)
    INTERNAL_SERVER_ERROR = "ERR_9000"
    CONFIGURATION_ERROR = "ERR_9003"
    UNKNOWN_TYPE = "ERR_9004"

class BaseAppException(Exception):
    """
    Uygulama için temel özel istisna

    Bu sınıf, projedeki tüm özel istisnaların temelini oluşturur.
    HTTP katmanında tutarlı hata yanıtı üretmek için durum kodu taşır.
    """
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        error_type: Optional[str] = None,
        detail: Optional[Union[str, List[Any], Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or ErrorCode.INTERNAL_SERVER_ERROR
        self.error_type = error_type or ErrorType.INTERNAL_ERROR
        self.detail = detail
        self.headers = headers
        self.trace_id = str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """
        FastAPI HTTP istisna nesnesine dönüştür
        """
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "error_code": self.error_code,
                "error_type": self.error_type,
                "detail": self.detail,
                "trace_id": self.trace_id,
                "timestamp": self.timestamp
            },
            headers=self.headers
        )

class ProjectionError(BaseAppException):
    """Kayıt index dokümanına dönüştürülemedi"""
    def __init__(
        self,
        message: str = "Record projection failed",
        detail: Optional[Union[str, Dict[str, Any]]] = None,
        error_code: str = ErrorCode.PROJECTION_FAILED
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=error_code,
            error_type=ErrorType.PROJECTION_ERROR,
            detail=detail
        )

class StreamError(BaseAppException):
    """Koleksiyon okunurken veri kaynağı hatası"""
    def __init__(
        self,
        message: str = "Record stream failed",
        detail: Optional[Union[str, Dict[str, Any]]] = None,
        error_code: str = ErrorCode.STREAM_FAILED
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code=error_code,
            error_type=ErrorType.STREAM_ERROR,
            detail=detail
        )

class BulkSubmissionError(BaseAppException):
    """Index bir bulk isteğini reddetti veya istek başarısız oldu"""
    def __init__(
        self,
        message: str = "Bulk submission failed",
        detail: Optional[Union[str, Dict[str, Any]]] = None,
        error_code: str = ErrorCode.BULK_REJECTED
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code=error_code,
            error_type=ErrorType.BULK_ERROR,
            detail=detail
        )

class SearchLookupError(BaseAppException):
    """Arama sonucu kayda çözümlenirken lookup stratejisi başarısız oldu"""
    def __init__(
        self,
        message: str = "Search hit lookup failed",
        detail: Optional[Union[str, Dict[str, Any]]] = None,
        error_code: str = ErrorCode.LOOKUP_FAILED
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code=error_code,
            error_type=ErrorType.LOOKUP_ERROR,
            detail=detail
        )

class ConfigurationError(BaseAppException):
    """Tip kaydı veya alan tanımı hatası"""
    def __init__(
        self,
        message: str = "Configuration error",
        detail: Optional[Union[str, Dict[str, Any]]] = None,
        error_code: str = ErrorCode.CONFIGURATION_ERROR
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            error_type=ErrorType.CONFIGURATION_ERROR,
            detail=detail
        )

class IndexUnavailableError(BaseAppException):
    """Elasticsearch bağlantısı yok"""
    def __init__(
        self,
        message: str = "Search index is unavailable",
        detail: Optional[Union[str, Dict[str, Any]]] = None,
        error_code: str = ErrorCode.INDEX_UNAVAILABLE
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code=error_code,
            error_type=ErrorType.EXTERNAL_SERVICE_ERROR,
            detail=detail
        )

class SynchronizationError(BaseAppException):
    """
    Birden fazla tipin senkronizasyon hatalarını tek bir hatada toplar.

    `errors` listesi tip başına oluşan orijinal istisnaları taşır.
    """
    def __init__(
        self,
        errors: List[BaseException],
        message: str = "Synchronization failed",
        error_code: str = ErrorCode.SYNCHRONIZATION_FAILED
    ):
        self.errors = list(errors)
        super().__init__(
            message=f"{message}: {len(self.errors)} type(s) failed",
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code=error_code,
            error_type=ErrorType.SYNCHRONIZATION_ERROR,
            detail=[str(e) for e in self.errors]
        )
