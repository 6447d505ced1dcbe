from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .field_spec import FieldMode, FieldRule
from ..core.exceptions import ProjectionError, ErrorCode

# geopoint alanlarının dokümandaki sabit adı
GEOPOINT_FIELD = "location"

@dataclass(frozen=True)
class TypeDescriptor:
    """
    Bir kayıt tipinin index kaydı.

    Kayıt anında oluşturulur ve süreç boyunca değişmez.
    """
    type_name: str
    index: str
    fields: Tuple[FieldRule, ...]
    collection: str
    id_field: str = "_id"
    lookup: Optional[Callable[..., Any]] = None

    @property
    def has_geopoint(self) -> bool:
        return any(rule.mode == FieldMode.GEOPOINT for rule in self.fields)

    def mapping_properties(self) -> Dict[str, Any]:
        """Bu tip için Elasticsearch mapping özelliklerini döndürür"""
        properties: Dict[str, Any] = {}
        if self.has_geopoint:
            properties[GEOPOINT_FIELD] = {"type": "geo_point"}
        return properties

def record_id(record: Any, id_field: str = "_id") -> str:
    """Kaydın kimlik alanını string olarak döndürür; index, update ve delete için aynıdır"""
    if isinstance(record, dict):
        value = record.get(id_field)
    else:
        value = getattr(record, id_field, None)

    if value is None:
        raise ProjectionError(
            message="Record has no identity",
            detail=f"Identity field '{id_field}' is missing",
            error_code=ErrorCode.MISSING_RECORD_ID
        )
    return str(value)
