from __future__ import annotations

import datetime as dt
import json
import logging
import time
import uuid
from typing import Any, Optional

from .db import get_executor
from .domain.counter import Counter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LOG_COLUMNS = (
    "ts", "user", "action", "entity_type", "entity_id", "request_id",
    "after_json", "payload_json", "result", "err_msg", "latency_ms",
)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _to_json(obj: Any) -> Optional[str]:
    if obj is None:
        return None
    return json.dumps(obj, ensure_ascii=False, default=str)


class LogContext:
    """One operation_log row per mutating request: payload, resulting state, outcome, latency."""

    def __init__(self, action: str, user: str = "anonymous"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid: str):
        self.entity_type = etype
        self.entity_id = eid

    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def write(self, result: str = "OK", err: Optional[str] = None):
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        values = [
            dt.datetime.now(dt.timezone.utc).isoformat(),
            self.user,
            self.action,
            self.entity_type,
            self.entity_id,
            self.request_id,
            _to_json(self.after),
            _to_json(self.payload),
            result,
            err,
            elapsed_ms,
        ]
        placeholders = ", ".join(f"${i}" for i in range(1, len(LOG_COLUMNS) + 1))
        with get_executor() as db:
            db.execute(
                f"INSERT INTO operation_log ({', '.join(LOG_COLUMNS)}) VALUES ({placeholders})",
                values,
            )
        logger.info("%s %s entity=%s/%s latency_ms=%d", self.action, result, self.entity_type, self.entity_id, elapsed_ms)


def search_logs(
    page: int = 1,
    size: int = 20,
    *,
    action: str | None = None,
    entity_id: str | None = None,
    result: str | None = None,
    text: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
) -> tuple[int, list[dict]]:
    """Newest-first page of operation_log rows plus the total match count.

    `text` is a substring match over the request payload and the resulting state.
    """
    numbers = Counter()
    conditions: list[str] = []
    params: list[Any] = []
    for value, template in (
        (action, "action = {}"),
        (entity_id, "entity_id = {}"),
        (result, "result = {}"),
        (ts_from, "ts >= {}"),
        (ts_to, "ts <= {}"),
    ):
        if value:
            conditions.append(template.format(numbers.next_placeholder()))
            params.append(value)
    if text:
        # 同一个占位符可在语句中重复引用
        ph = numbers.next_placeholder()
        conditions.append(f"(payload_json LIKE {ph} OR after_json LIKE {ph})")
        params.append(f"%{text}%")

    where = " WHERE " + " AND ".join(conditions) if conditions else ""
    with get_executor() as db:
        total = db.query_row(f"SELECT COUNT(1) AS cnt FROM operation_log{where}", params)["cnt"]
        limit_ph, offset_ph = numbers.next_placeholder(), numbers.next_placeholder()
        rows = db.query(
            f"SELECT * FROM operation_log{where} ORDER BY ts DESC, id DESC LIMIT {limit_ph} OFFSET {offset_ph}",
            params + [size, (page - 1) * size],
        )
    return total, [dict(r) for r in rows]
