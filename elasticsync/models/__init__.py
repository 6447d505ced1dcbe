from .field_spec import FieldMode, FieldRule, parse_field_spec
from .type_descriptor import TypeDescriptor, record_id
from .bulk import IndexItem, DeleteItem, BulkItem, BulkResult, BulkStats
from .search import SearchOptions, SearchHit
from .sync import SyncResult
