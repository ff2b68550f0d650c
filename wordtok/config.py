"""wordtok/config.py
Tokenizer options (validated with pydantic) and environment-driven service
settings.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

DEFAULT_SPECIAL_TOKENS = ["<PAD>", "<UNK>", "<CLS>", "<SEP>"]

# Demo sentences the service mixes into corpus builds
SAMPLE_TEXTS = [
    "Hello world! How are you today?",
    "The quick brown fox jumps over the lazy dog.",
    "Learning Generative AI with Hitesh and Piyush Sir!",
    "Machine learning, deep learning, and AI are transformative technologies.",
]


class TokenizerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    special_tokens: List[str] = Field(default_factory=lambda: list(DEFAULT_SPECIAL_TOKENS))
    case_sensitive: bool = False
    max_vocab_size: Optional[PositiveInt] = None

    @field_validator("special_tokens")
    @classmethod
    def _check_special(cls, tokens: List[str]) -> List[str]:
        if any(not t for t in tokens):
            raise ValueError("special tokens must be non-empty strings")
        if len(set(tokens)) != len(tokens):
            raise ValueError("special tokens must be unique")
        return tokens


# ────────────────────────────────────────────────────────────────
# Environment
# ────────────────────────────────────────────────────────────────
TRUTHY = {"1", "true", "yes", "on"}
DEFAULT_MAX_VOCAB = "1000"


def _env_max_vocab() -> Optional[int]:
    raw = os.getenv("WORDTOK_MAX_VOCAB_SIZE", DEFAULT_MAX_VOCAB).strip()
    if not raw or raw == "0":
        return None  # unlimited
    return int(raw)


def config_from_env() -> TokenizerConfig:
    args: dict = dict(
        case_sensitive=os.getenv("WORDTOK_CASE_SENSITIVE", "").strip().lower() in TRUTHY,
        max_vocab_size=_env_max_vocab(),
    )
    if special := os.getenv("WORDTOK_SPECIAL_TOKENS"):
        args["special_tokens"] = [t.strip() for t in special.split(",")]
    return TokenizerConfig(**args)


def vocab_path_from_env() -> Optional[Path]:
    raw = os.getenv("WORDTOK_VOCAB_PATH")
    return Path(raw) if raw else None


def log_level_from_env() -> str:
    return os.getenv("WORDTOK_LOG_LEVEL", "INFO").upper()
