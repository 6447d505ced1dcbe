from . import search, sync
