from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from ..core.exceptions import ConfigurationError, ErrorCode
from ..models.field_spec import parse_field_spec
from ..models.search import SearchHit
from ..models.type_descriptor import TypeDescriptor
from ..utils.config import DEFAULT_INDEX
from ..utils.logger import get_logger

logger = get_logger(__name__)

class TypeRegistry:
    """
    Tip adı -> TypeDescriptor kayıt defteri.

    Uygulama başlangıcında bir kez oluşturulur ve bileşenlere referansla verilir.
    Kaydedilen tanımlar sonradan değiştirilemez.
    """

    def __init__(self, default_index: str = DEFAULT_INDEX):
        if not default_index:
            raise ConfigurationError(message="Default index name is required")
        self.default_index = default_index
        self._types: Dict[str, TypeDescriptor] = {}

    def register(
        self,
        type_name: str,
        fields: Mapping[str, Any],
        index: Optional[str] = None,
        collection: Optional[str] = None,
        id_field: str = "_id",
        lookup: Optional[Callable[..., Any]] = None
    ) -> TypeDescriptor:
        """
        Yeni bir tip kaydeder.

        Args:
            type_name: Tip adı
            fields: Alan yolu -> direktif eşlemesi
            index: Hedef index (belirtilmezse varsayılan index)
            collection: MongoDB koleksiyonu (belirtilmezse tip adı)
            id_field: Kimlik alanı
            lookup: Arama sonuçlarını kayda çözen özel strateji

        Returns:
            TypeDescriptor: Kaydedilen tanım
        """
        if not type_name:
            raise ConfigurationError(message="Type name is required")
        if type_name in self._types:
            raise ConfigurationError(
                message="Type already registered",
                detail=f"Type '{type_name}' is already registered"
            )
        if lookup is not None and not callable(lookup):
            raise ConfigurationError(
                message="Lookup strategy must be callable",
                detail=f"Type '{type_name}' has a non-callable lookup"
            )

        descriptor = TypeDescriptor(
            type_name=type_name,
            index=index or self.default_index,
            fields=parse_field_spec(fields),
            collection=collection or type_name,
            id_field=id_field,
            lookup=lookup
        )
        self._types[type_name] = descriptor
        logger.info(f"Tip kaydedildi: {type_name} -> {descriptor.index} ({len(descriptor.fields)} alan)")
        return descriptor

    def get(self, type_name: Optional[str]) -> Optional[TypeDescriptor]:
        if type_name is None:
            return None
        return self._types.get(type_name)

    def require(self, type_name: str) -> TypeDescriptor:
        """Kayıtlı tanımı döndürür, yoksa ConfigurationError fırlatır"""
        descriptor = self._types.get(type_name)
        if descriptor is None:
            raise ConfigurationError(
                message="Unknown type",
                detail=f"Type '{type_name}' is not registered",
                error_code=ErrorCode.UNKNOWN_TYPE
            )
        return descriptor

    def types_for_index(self, index: str) -> List[TypeDescriptor]:
        return [d for d in self._types.values() if d.index == index]

    def indexes(self) -> List[str]:
        return sorted({d.index for d in self._types.values()})

    def descriptor_for_hit(self, hit: SearchHit) -> Optional[TypeDescriptor]:
        """
        Arama sonucunun tipini çözer.

        Tip bilgisi taşıyan hit yalnızca kayıtlı tipe çözülür, bilinmeyen tip None döner.
        Tip bilgisi yoksa ve hit'in index'inde tek bir tip varsa o kullanılır.
        """
        if hit.type_name is not None:
            return self.get(hit.type_name)
        candidates = self.types_for_index(hit.index)
        if len(candidates) == 1:
            return candidates[0]
        return None

    @property
    def type_names(self) -> List[str]:
        return list(self._types)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)
