from .registry import TypeRegistry
from .field_projector import FieldProjector
from .index_client import IndexClient
from .bulk_batcher import BulkBatcher
from .collection_synchronizer import CollectionSynchronizer
from .mutation_hooks import MutationHookDispatcher
from .search_resolver import SearchResolver, default_lookup
from .change_stream_listener import ChangeStreamListener
from .elastic_sync import ElasticSync, TypeHooks
