"""Audit trail of VaR calculation requests."""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

import pandas as pd


class AuditStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class AuditRecord:
    """One audited request.

    Attributes
    ----------
    user_id: str | None
            Caller the request was made on behalf of; may be absent.
    endpoint: str
            Logical endpoint, e.g. ``/api/v1/var/trade``.
    execution_time_ms: int
            Wall-clock time spent in the calculation.
    status: AuditStatus
            Outcome of the request.
    error_message: str | None
            Failure reason when ``status`` is ``ERROR``.
    """

    user_id: Optional[str]
    endpoint: str
    execution_time_ms: int
    status: AuditStatus
    error_message: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class AuditLog:
    """Thread-safe, append-only in-memory store of audit records."""

    def __init__(self) -> None:
        self._records: List[AuditRecord] = []
        self._lock = threading.Lock()

    def log_request(
        self,
        user_id: Optional[str],
        endpoint: str,
        execution_time_ms: int,
        success: bool,
        error_message: Optional[str] = None,
    ) -> AuditRecord:
        record = AuditRecord(
            user_id=user_id,
            endpoint=endpoint,
            execution_time_ms=int(execution_time_ms),
            status=AuditStatus.SUCCESS if success else AuditStatus.ERROR,
            error_message=error_message,
        )
        with self._lock:
            self._records.append(record)
        return record

    def history(self) -> List[AuditRecord]:
        with self._lock:
            return list(self._records)

    def to_frame(self) -> pd.DataFrame:
        """Return the audit history as a DataFrame, one row per record."""
        columns = [
            "user_id",
            "endpoint",
            "execution_time_ms",
            "status",
            "error_message",
            "timestamp",
        ]
        rows = []
        for record in self.history():
            row = asdict(record)
            row["status"] = record.status.value
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
