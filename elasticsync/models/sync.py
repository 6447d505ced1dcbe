from dataclasses import dataclass, field
from typing import List

from .bulk import BulkResult

@dataclass
class SyncResult:
    """Bir tipin tam koleksiyon senkronizasyonu sonucu"""
    type_name: str
    record_count: int = 0
    failed_records: int = 0
    bulk_submissions: int = 0
    failed_batches: List[BulkResult] = field(default_factory=list)

    @property
    def indexed_count(self) -> int:
        return self.record_count - self.failed_records

    @property
    def ok(self) -> bool:
        return not self.failed_batches and self.failed_records == 0

    def to_dict(self):
        return {
            "type": self.type_name,
            "record_count": self.record_count,
            "indexed_count": self.indexed_count,
            "failed_records": self.failed_records,
            "bulk_submissions": self.bulk_submissions,
            "failed_batches": len(self.failed_batches),
            "ok": self.ok,
        }
