"""Benchmark report: size and timing of each codec on one input file."""
from __future__ import annotations

import hashlib
import io
import time
from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from lzpack_codec.detect import CODECS, get_codec

REPORT_SCHEMA = pa.schema(
    [
        ("file", pa.string()),
        ("algorithm", pa.string()),
        ("original_size", pa.int64()),
        ("compressed_size", pa.int64()),
        ("ratio", pa.float64()),
        ("compress_ms", pa.float64()),
        ("decompress_ms", pa.float64()),
        ("status", pa.string()),
        ("content_hash", pa.string()),
    ]
)


def benchmark_codec(data: bytes, algorithm: str) -> dict:
    compress_stream, decompress_stream = get_codec(algorithm)

    compressed = io.BytesIO()
    t0 = time.perf_counter()
    compress_stream(io.BytesIO(data), compressed)
    t1 = time.perf_counter()

    restored = io.BytesIO()
    compressed.seek(0)
    decompress_stream(compressed, restored)
    t2 = time.perf_counter()

    size = len(compressed.getvalue())
    return {
        "algorithm": algorithm,
        "original_size": len(data),
        "compressed_size": size,
        "ratio": size / len(data) if data else 0.0,
        "compress_ms": (t1 - t0) * 1000.0,
        "decompress_ms": (t2 - t1) * 1000.0,
        "status": "VERIFIED" if restored.getvalue() == data else "MISMATCH",
    }


def run_benchmark(path: Path, algorithms: tuple[str, ...] | None = None) -> pd.DataFrame:
    """Compress and decompress ``path`` with each algorithm, one row per algorithm."""
    path = Path(path)
    data = path.read_bytes()
    content_hash = hashlib.sha256(data).hexdigest()

    rows: list[dict] = []
    for algorithm in algorithms or tuple(CODECS):
        row = benchmark_codec(data, algorithm)
        row["file"] = path.name
        row["content_hash"] = content_hash
        rows.append(row)

    return pd.DataFrame(rows, columns=REPORT_SCHEMA.names)


def write_report(df: pd.DataFrame, out_path: Path) -> None:
    """Write a benchmark DataFrame as a Parquet table."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, schema=REPORT_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path)
