"""Records exported for analysis, with time deltas and the query that found them."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .kafka_record import KafkaRecord
from .query import SearchQuery


@dataclass
class ExportedKafkaRecord:
    """A record with the milliseconds elapsed since the first and the previous one."""

    record: KafkaRecord
    date_time: datetime | None = None
    absolute_delta_in_ms: int = 0
    relative_delta_in_ms: int = 0
    search_query: str = ""

    @classmethod
    def from_record(cls, record: KafkaRecord) -> ExportedKafkaRecord:
        return cls(
            record=copy.deepcopy(record),
            date_time=record.timestamp_as_local_date_time(),
        )

    def compute_deltas_ms(self, first_ts: int | None, previous_ts: int | None) -> None:
        """Set the deltas from the first and the previous record's timestamps."""
        timestamp = self.record.timestamp or 0
        self.relative_delta_in_ms = timestamp - (previous_ts or 0)
        self.absolute_delta_in_ms = timestamp - (first_ts or 0)

    def set_search_query(self, search_query: SearchQuery) -> None:
        self.search_query = str(search_query)

    def to_dict(self) -> dict[str, Any]:
        data = self.record.to_dict()
        data["date_time"] = (
            self.date_time.isoformat() if self.date_time is not None else None
        )
        data["absolute_delta_in_ms"] = self.absolute_delta_in_ms
        data["relative_delta_in_ms"] = self.relative_delta_in_ms
        data["search_query"] = self.search_query
        return data