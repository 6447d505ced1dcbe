import inspect
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Iterable

from ..core.exceptions import ProjectionError, ErrorCode
from ..models.field_spec import FieldMode, FieldRule
from ..models.type_descriptor import GEOPOINT_FIELD
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Yolun bir parçası kayıtta bulunmadığında döner
MISSING = object()

def resolve_path(record: Any, path: str) -> Any:
    """
    Noktayla ayrılmış yolu iç içe yapılar üzerinde takip eder.

    Sözlüklerde anahtar, diğer nesnelerde attribute erişimi kullanılır.
    Herhangi bir parça yoksa veya None ise MISSING döner.
    """
    value = record
    for segment in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(segment, MISSING)
        else:
            value = getattr(value, segment, MISSING)
        if value is MISSING or value is None:
            return MISSING
    return value

def _coordinate_pair(value: Any):
    """GeoJSON benzeri değerden [lon, lat] çiftini çıkarır, yoksa None"""
    if isinstance(value, Mapping):
        value = value.get("coordinates")
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
        return value[0], value[1]
    return None

class FieldProjector:
    """
    Kayıt -> index dokümanı dönüştürücü.

    Alanlar tanım sırasıyla işlenir; custom dönüşümler senkron veya asenkron olabilir.
    Custom dönüşümün hatası tüm kaydı başarısız sayar.
    """

    async def project(self, record: Any, fields: Iterable[FieldRule]) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for rule in fields:
            value = resolve_path(record, rule.path)
            if value is MISSING:
                continue

            if rule.mode == FieldMode.COPY:
                document[rule.path] = value
            elif rule.mode == FieldMode.FLATTEN:
                self._flatten(rule, value, document)
            elif rule.mode == FieldMode.GEOPOINT:
                pair = _coordinate_pair(value)
                if pair is not None:
                    lon, lat = pair
                    document[GEOPOINT_FIELD] = {"lat": lat, "lon": lon}
            elif rule.mode == FieldMode.CUSTOM:
                await self._apply_custom(rule, record, document)

        return document

    @staticmethod
    def _flatten(rule: FieldRule, value: Any, document: Dict[str, Any]):
        if not isinstance(value, Mapping):
            raise ProjectionError(
                message="Flatten requires a mapping",
                detail=f"Field '{rule.path}' resolved to {type(value).__name__}",
                error_code=ErrorCode.INVALID_FIELD_VALUE
            )
        for key, item in value.items():
            document[key] = item

    @staticmethod
    async def _apply_custom(rule: FieldRule, record: Any, document: Dict[str, Any]):
        try:
            result = rule.transform(record, document)
            if inspect.isawaitable(result):
                result = await result
        except ProjectionError:
            raise
        except Exception as e:
            logger.error(f"Custom dönüşüm başarısız: {rule.path}: {e}", exc_info=True)
            raise ProjectionError(
                message=f"Custom transform for '{rule.path}' failed",
                detail=str(e)
            ) from e

        # Dönüş değeri varsa alan yoluna yazılır; fonksiyon dokümanı doğrudan da değiştirebilir
        if result is not None and result is not document:
            document[rule.path] = result
