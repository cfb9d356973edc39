from __future__ import annotations

import logging
import os
import random
import time

from sqlalchemy import event
from sqlalchemy.engine import Engine

from ..routes_metrics import ledger_slow_queries_total

SLOW_QUERY_MS = int(os.getenv("DB_SLOW_QUERY_MS", "200"))
SAMPLE_RATE = 0.01

logger = logging.getLogger("ledger.sql")


def _summarize(statement: str, limit: int = 160) -> str:
    sql = " ".join(statement.split())
    return sql if len(sql) <= limit else sql[: limit - 3] + "..."


def add_query_logger(
    engine: Engine, label: str, slow_ms: int = SLOW_QUERY_MS
) -> None:
    """Log slow statements on ``engine`` and a small sample of the rest.

    Parameters are never logged since they carry customer names.
    """
    target = engine.sync_engine if hasattr(engine, "sync_engine") else engine

    @event.listens_for(target, "before_cursor_execute")
    def _start(conn, cursor, statement, parameters, context, executemany):  # type: ignore[no-untyped-def]
        context._ledger_query_start = time.perf_counter()

    @event.listens_for(target, "after_cursor_execute")
    def _finish(conn, cursor, statement, parameters, context, executemany):  # type: ignore[no-untyped-def]
        elapsed = int((time.perf_counter() - context._ledger_query_start) * 1000)
        kind = statement.lstrip().split(" ", 1)[0].upper()
        if elapsed > slow_ms:
            ledger_slow_queries_total.labels(db=label, kind=kind).inc()
            logger.warning(
                "slow %s %dms db=%s sql=%s", kind, elapsed, label, _summarize(statement)
            )
        elif random.random() < SAMPLE_RATE:
            logger.debug("%s %dms db=%s", kind, elapsed, label)
