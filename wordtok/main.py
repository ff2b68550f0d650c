"""wordtok/main.py
──────────────────────────────────────────────────────────────────
FastAPI entrypoint for the word tokenizer playground:

  • `/settings`        – read / replace tokenizer options (resets vocab).
  • `/vocab/text`      – build vocabulary from one text (first-seen ids).
  • `/vocab/corpus`    – build from the sample texts (+ optional text),
                          most frequent tokens get the lowest ids.
  • `/vocab`           – inspect or clear the current vocabulary.
  • `/encode` `/decode` – text ↔ ids against the current vocabulary.
  • `/export` `/import` – serialized tokenizer document.

Run with:
    uvicorn wordtok.main:app --reload
"""
from __future__ import annotations

import logging
import threading
from typing import Annotated, Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, PositiveInt, ValidationError

from .config import (
    SAMPLE_TEXTS,
    TokenizerConfig,
    config_from_env,
    log_level_from_env,
    vocab_path_from_env,
)
from .tokenizer import BuildReport, MissingSpecialTokenError, WordTokenizer

logging.basicConfig(
    level=log_level_from_env(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────
# Tokenizer state (one per process)
# ────────────────────────────────────────────────────────────────
class TokenizerState:
    """Current tokenizer plus whether a vocabulary has been built/loaded."""

    def __init__(self, cfg: TokenizerConfig):
        self.lock = threading.Lock()
        self.reset(cfg)

    def reset(self, cfg: TokenizerConfig) -> None:
        self.tokenizer = WordTokenizer.from_config(cfg)
        self.built = False

    def replace(self, tokenizer: WordTokenizer) -> None:
        self.tokenizer = tokenizer
        self.built = True


def _initial_state() -> TokenizerState:
    state = TokenizerState(config_from_env())
    path = vocab_path_from_env()
    if path is not None:
        state.replace(WordTokenizer.load(path))
        log.info("loaded tokenizer from %s (%d tokens)", path, state.tokenizer.vocab_size)
    return state


state = _initial_state()

# ────────────────────────────────────────────────────────────────
# FastAPI application & schemas
# ────────────────────────────────────────────────────────────────
app = FastAPI(title="wordtok", version="0.1.0")


class SettingsReq(BaseModel):
    case_sensitive: bool = False
    max_vocab_size: Optional[Annotated[int, Field(gt=0, le=50_000)]] = 1000


class SettingsResp(BaseModel):
    special_tokens: List[str]
    case_sensitive: bool
    max_vocab_size: Optional[int]


class TextReq(BaseModel):
    text: str = ""


class VocabEntry(BaseModel):
    token: str
    id: int
    special: bool


class VocabResp(BaseModel):
    size: int
    entries: List[VocabEntry]


class BuildResp(VocabResp):
    report: BuildReport


class EncodeReq(BaseModel):
    text: str
    pad_to: Optional[PositiveInt] = None


class EncodeResp(BaseModel):
    ids: List[int]
    tokens: List[str]


class DecodeReq(BaseModel):
    ids: List[int]


class DecodeResp(BaseModel):
    text: str


def _vocab_resp(tok: WordTokenizer) -> VocabResp:
    special = set(tok.special_tokens)
    entries = [
        VocabEntry(token=t, id=i, special=t in special)
        for t, i in sorted(tok.vocab.items(), key=lambda kv: kv[1])
    ]
    return VocabResp(size=tok.vocab_size, entries=entries)


def _settings_resp(tok: WordTokenizer) -> SettingsResp:
    return SettingsResp(
        special_tokens=list(tok.special_tokens),
        case_sensitive=tok.case_sensitive,
        max_vocab_size=tok.max_vocab_size,
    )

# -------- settings ---------------------------------------------
@app.get("/settings", response_model=SettingsResp)
def get_settings():
    return _settings_resp(state.tokenizer)


@app.put("/settings", response_model=SettingsResp)
def put_settings(req: SettingsReq):
    with state.lock:
        cfg = TokenizerConfig(
            special_tokens=list(state.tokenizer.special_tokens),
            case_sensitive=req.case_sensitive,
            max_vocab_size=req.max_vocab_size,
        )
        state.reset(cfg)
        return _settings_resp(state.tokenizer)


@app.get("/samples", response_model=List[str])
def samples():
    return SAMPLE_TEXTS

# -------- vocabulary -------------------------------------------
@app.post("/vocab/text", response_model=BuildResp)
def build_from_text(req: TextReq):
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Please enter some text first")
    with state.lock:
        report = state.tokenizer.build_from_text(req.text)
        state.built = True
        return BuildResp(report=report, **_vocab_resp(state.tokenizer).model_dump())


@app.post("/vocab/corpus", response_model=BuildResp)
def build_from_corpus(req: TextReq):
    corpus = [*SAMPLE_TEXTS, req.text] if req.text.strip() else list(SAMPLE_TEXTS)
    with state.lock:
        report = state.tokenizer.build_from_corpus(corpus)
        state.built = True
        return BuildResp(report=report, **_vocab_resp(state.tokenizer).model_dump())


@app.get("/vocab", response_model=VocabResp)
def get_vocab():
    return _vocab_resp(state.tokenizer)


@app.delete("/vocab", response_model=VocabResp)
def clear_vocab():
    with state.lock:
        state.reset(state.tokenizer.config)
        return _vocab_resp(state.tokenizer)

# -------- encode / decode --------------------------------------
@app.post("/encode", response_model=EncodeResp)
def encode(req: EncodeReq):
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Please enter some text to encode")
    if not state.built:
        raise HTTPException(status_code=409, detail="Please build vocabulary first")
    tok = state.tokenizer
    try:
        ids = tok.encode(req.text)
        if req.pad_to is not None:
            ids = tok.pad(ids, req.pad_to)
    except MissingSpecialTokenError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return EncodeResp(ids=ids, tokens=[tok.id_to_token(i) or "" for i in ids])


@app.post("/decode", response_model=DecodeResp)
def decode(req: DecodeReq):
    return DecodeResp(text=state.tokenizer.decode(req.ids))

# -------- persistence ------------------------------------------
@app.get("/export")
def export_tokenizer() -> Dict[str, Any]:
    return state.tokenizer.to_dict()


@app.post("/import", response_model=VocabResp)
def import_tokenizer(data: Dict[str, Any]):
    try:
        tok = WordTokenizer.from_dict(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=errors)
    with state.lock:
        state.replace(tok)
        return _vocab_resp(tok)
