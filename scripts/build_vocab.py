#!/usr/bin/env python3
"""
Build a word-tokenizer vocabulary from corpus files and save it as JSON.

Examples
========
# frequency-ranked vocab from a parquet snapshot, capped at 5k entries
scripts/build_vocab.py data/snapshot.parquet --max-vocab-size 5000 --out data/vocab.json

# first-seen ids from plain text files, keeping case
scripts/build_vocab.py notes/*.txt --mode text --case-sensitive
"""
import argparse
from pathlib import Path

from tqdm import tqdm

from wordtok.corpus import read_corpus
from wordtok.tokenizer import WordTokenizer

parser = argparse.ArgumentParser(formatter_class=argparse.ArgumentDefaultsHelpFormatter)
parser.add_argument("inputs", nargs="+", help=".txt / .jl / .jsonl / .parquet files")
parser.add_argument("--out", type=str, default="data/vocab.json")
parser.add_argument("--mode", choices=["corpus", "text"], default="corpus")
parser.add_argument("--max-vocab-size", type=int, default=0, help="0 = unlimited")
parser.add_argument("--case-sensitive", action="store_true")
parser.add_argument("--column", type=str, default="text", help="text column for jsonl/parquet")
args = parser.parse_args()

# 1) Load documents
docs: list[str] = []
for path in tqdm(args.inputs, desc="Reading", unit="file"):
    docs.extend(read_corpus(path, args.column))
print(f"Documents: {len(docs)}")

# 2) Build vocabulary
tokenizer = WordTokenizer(
    case_sensitive=args.case_sensitive,
    max_vocab_size=args.max_vocab_size or None,
)
if args.mode == "corpus":
    report = tokenizer.build_from_corpus(docs)
else:
    report = tokenizer.build_from_text(" ".join(docs))

print(f"Added {report.added} tokens → vocab size {report.vocab_size}")
if report.truncated:
    print(f"⚠  Size limit hit, {report.skipped} tokens left out")

# 3) Save
out = tokenizer.save(Path(args.out))
print(f"Tokenizer saved to {out}")
