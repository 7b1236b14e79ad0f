"""
Diagnosis History Store

Persists a compact record of every diagnosis in a diskcache directory.
Records are pushed onto a prefixed queue, so key order is insertion order
and the oldest entries are pulled off when the store is full.

Storage errors surface as HistoryStoreError; callers on the diagnosis
path catch and log them.
"""
import logging
import uuid
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from diskcache import Cache

from felineneuro.core.clinical.base import DiagnosisResult
from felineneuro.utils.exceptions import HistoryStoreError

logger = logging.getLogger(__name__)

_PREFIX = "diagnosis"


class DiagnosisHistoryStore:
    """Append-only, size-bounded diagnosis log."""

    def __init__(self, directory: Union[str, Path], max_records: int = 1000):
        self.directory = Path(directory)
        self.max_records = max_records
        try:
            self._cache = Cache(str(self.directory))
        except Exception as exc:
            raise HistoryStoreError(
                f"Cannot open history store at {self.directory}: {exc}",
                details={"directory": str(self.directory)},
            ) from exc
        logger.info(f"History store opened at {self.directory} ({len(self._cache)} records)")

    @staticmethod
    def to_record(result: DiagnosisResult) -> Dict[str, Any]:
        return {
            "id": uuid.uuid4().hex,
            "timestamp": result.timestamp.isoformat(),
            "engine": result.engine,
            "rule_id": result.rule_id,
            "diagnosis": result.diagnosis,
            "urgency": result.urgency.value,
            "inputs": dict(result.inputs),
        }

    def record(self, result: DiagnosisResult) -> Dict[str, Any]:
        """Store one diagnosis and return the stored record."""
        entry = self.to_record(result)
        try:
            with self._cache.transact():
                self._cache.push(entry, prefix=_PREFIX)
                while len(self._cache) > self.max_records:
                    self._cache.pull(prefix=_PREFIX)
        except Exception as exc:
            raise HistoryStoreError(f"Failed to record diagnosis: {exc}") from exc
        logger.debug(f"History: recorded {entry['rule_id']} ({entry['id']})")
        return entry

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest first."""
        if limit <= 0:
            return []
        records: List[Dict[str, Any]] = []
        try:
            for key in self._cache.iterkeys(reverse=True):
                value = self._cache.get(key)
                if value is None:
                    continue
                records.append(value)
                if len(records) >= limit:
                    break
        except Exception as exc:
            raise HistoryStoreError(f"Failed to read diagnosis history: {exc}") from exc
        return records

    def analytics(self) -> Dict[str, Any]:
        records = self.recent(limit=self.max_records)
        by_diagnosis = Counter(r["diagnosis"] for r in records)
        by_urgency = Counter(r["urgency"] for r in records)
        by_engine = Counter(r["engine"] for r in records)
        most_common: Optional[str] = by_diagnosis.most_common(1)[0][0] if by_diagnosis else None
        return {
            "total": len(records),
            "by_diagnosis": dict(by_diagnosis),
            "by_urgency": dict(by_urgency),
            "by_engine": dict(by_engine),
            "most_common_diagnosis": most_common,
        }

    def clear(self) -> int:
        """Remove every record; returns how many were removed."""
        try:
            return self._cache.clear()
        except Exception as exc:
            raise HistoryStoreError(f"Failed to clear diagnosis history: {exc}") from exc

    def close(self) -> None:
        self._cache.close()

    def __len__(self) -> int:
        return len(self._cache)
