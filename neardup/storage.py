"""Writers for confirmed pairs and run reports."""

import json
from pathlib import Path
from typing import Iterable, Mapping, Tuple

import polars as pl
import pyarrow as pa
import pyarrow.parquet as pq

PAIR_SCHEMA = pa.schema([("id_a", pa.uint64()), ("id_b", pa.uint64())])


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def pairs_frame(pairs: Iterable[Tuple[int, int]]) -> pl.DataFrame:
    """Sorted two-column frame of identifier pairs."""
    ordered = sorted(pairs)
    return pl.DataFrame(
        {"id_a": [a for a, _ in ordered], "id_b": [b for _, b in ordered]},
        schema={"id_a": pl.UInt64, "id_b": pl.UInt64},
    )


def write_pairs_parquet(
    pairs: Iterable[Tuple[int, int]], output: Path, batch_size: int = 100_000
) -> int:
    """Stream pairs into a parquet file in sorted order; returns the number of rows written."""
    ensure_parent(output)
    frame = pairs_frame(pairs)
    written = 0
    with pq.ParquetWriter(output, PAIR_SCHEMA) as writer:
        for offset in range(0, frame.height, batch_size):
            batch = frame.slice(offset, batch_size)
            writer.write_table(batch.to_arrow().cast(PAIR_SCHEMA))
            written += batch.height
    return written


def read_pairs_parquet(path: Path) -> list:
    frame = pl.read_parquet(path)
    return list(zip(frame["id_a"].to_list(), frame["id_b"].to_list()))


def write_report(stats: Mapping[str, object], path: Path) -> None:
    ensure_parent(path)
    path.write_text(json.dumps(dict(stats), ensure_ascii=False, indent=2), encoding="utf-8")
