from __future__ import annotations

import logging

import pandas as pd

from ..db import get_conn, transaction
from ..repository import web_vitals_repo

logger = logging.getLogger(__name__)

METRIC_NAMES = ("CLS", "FCP", "FID", "INP", "LCP", "TTFB")
RATINGS = ("good", "needs-improvement", "poor")


def ingest(metrics: list[dict], user_id: int | None = None) -> int:
    """Upsert a batch of metrics on metric id; the batch is all-or-nothing."""
    if not metrics:
        return 0
    for m in metrics:
        if m["name"] not in METRIC_NAMES:
            raise ValueError(f"unknown metric: {m['name']}")
        if m["rating"] not in RATINGS:
            raise ValueError(f"invalid rating: {m['rating']}")
    with get_conn() as conn:
        try:
            with transaction(conn):
                for m in metrics:
                    web_vitals_repo.upsert_metric(conn, {**m, "user_id": user_id})
        except Exception:
            logger.exception("web vitals batch of %d metrics rolled back", len(metrics))
            raise
    return len(metrics)


def stats(since: str | None = None, name: str | None = None) -> list[dict]:
    """Per metric: count, mean, median, p75, p95 and share of each rating."""
    with get_conn() as conn:
        rows = web_vitals_repo.list_metrics(conn, since, name)
    if not rows:
        return []
    df = pd.DataFrame([dict(r) for r in rows])
    out = []
    for metric, g in df.groupby("metric_name", sort=True):
        counts = g["rating"].value_counts()
        n = int(len(g))
        out.append({
            "name": metric,
            "count": n,
            "mean": round(float(g["value"].mean()), 4),
            "median": round(float(g["value"].median()), 4),
            "p75": round(float(g["value"].quantile(0.75)), 4),
            "p95": round(float(g["value"].quantile(0.95)), 4),
            "ratings": {r: round(int(counts.get(r, 0)) / n * 100, 2) for r in RATINGS},
            "last_ts": str(g["ts"].max()),
        })
    return out
