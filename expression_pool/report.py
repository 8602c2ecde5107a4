"""Summary tables and statistics over a built pool."""

import numpy as np
import pandas as pd

from .pool import ExpressionPool


def summarize_pool(pool: ExpressionPool) -> pd.DataFrame:
    """One row per generated integer.

    Columns: value, candidates, min_mass, max_mass, shortest, shortest_len.
    """
    rows = []
    for v in pool:
        exprs = pool.get_all_expressions(v)
        shortest = min(exprs, key=lambda e: (len(e.text), e.mass))
        rows.append({
            "value": v,
            "candidates": len(exprs),
            "min_mass": min(e.mass for e in exprs),
            "max_mass": max(e.mass for e in exprs),
            "shortest": shortest.text,
            "shortest_len": len(shortest.text),
        })
    columns = ["value", "candidates", "min_mass", "max_mass", "shortest", "shortest_len"]
    return pd.DataFrame(rows, columns=columns).set_index("value")


def pool_stats(pool: ExpressionPool) -> dict:
    """Aggregate numbers for logs and API responses."""
    n = len(pool.gen_range)
    if n == 0:
        return {
            "values": 0, "coverage": 1.0, "mean_candidates": 0.0,
            "mean_min_mass": 0.0, "max_min_mass": 0, "mean_shortest_len": 0.0,
        }

    counts = np.array([len(pool.cache[v]) for v in pool], dtype=float)
    min_mass = np.array([min(e.mass for e in pool.cache[v]) for v in pool], dtype=float)
    shortest = np.array([min(len(e.text) for e in pool.cache[v]) for v in pool], dtype=float)

    return {
        "values": n,
        "coverage": float(np.count_nonzero(counts) / n),
        "mean_candidates": float(counts.mean()),
        "mean_min_mass": float(min_mass.mean()),
        "max_min_mass": int(min_mass.max()),
        "mean_shortest_len": float(shortest.mean()),
    }
