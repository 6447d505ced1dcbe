from .services.elastic_sync import ElasticSync, TypeHooks
from .services.registry import TypeRegistry
from .models.field_spec import FieldMode, FieldRule
from .models.search import SearchOptions, SearchHit

__version__ = "0.1.0"
