"""Load documents for vocabulary building from .txt, JSON-lines or parquet files."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pandas as pd

TEXT_SUFFIXES = {".txt"}
JSONL_SUFFIXES = {".jl", ".jsonl"}
PARQUET_SUFFIXES = {".parquet"}


def _column(df: pd.DataFrame, column: str, path: Path) -> List[str]:
    if column not in df.columns:
        raise ValueError(f"{path} has no '{column}' column")
    texts = df[column].dropna().astype(str)
    return [t for t in texts.tolist() if t.strip()]


def read_corpus(path: str | Path, column: str = "text") -> List[str]:
    """Return the non-empty documents stored in *path* (one per line / row)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"The file {path} does not exist.")

    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        with path.open("r", encoding="utf-8") as f:
            return [line.rstrip("\n") for line in f if line.strip()]
    if suffix in JSONL_SUFFIXES:
        return _column(pd.read_json(path, lines=True, dtype=False), column, path)
    if suffix in PARQUET_SUFFIXES:
        return _column(pd.read_parquet(path), column, path)
    raise ValueError(f"Unsupported corpus format: {path.suffix or path.name}")


def read_corpora(paths: Iterable[str | Path], column: str = "text") -> List[str]:
    docs: List[str] = []
    for p in paths:
        docs.extend(read_corpus(p, column))
    return docs
