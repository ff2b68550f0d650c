"""wordtok/tokenizer.py
──────────────────────────────────────────────────────────────────
Deterministic word/punctuation tokenizer:

  • `split_text`        – lower-cases (optionally), isolates punctuation and
                           splits on whitespace.
  • `WordTokenizer`     – builds a vocabulary from one text (first-seen order)
                           or from a corpus (frequency order), then encodes
                           text to ids wrapped in <CLS> … <SEP> and decodes
                           ids back to text.

Special tokens always hold ids 0..k-1 in configured order.
"""
from __future__ import annotations

import json
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from .config import TokenizerConfig

log = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────
# Splitting
# ────────────────────────────────────────────────────────────────
PUNCT_SPLIT = re.compile(r"([.!?;:()'\"–—])")
COMMA_SPLIT = re.compile(r"([,])")
# U+FEFF (byte-order mark) counts as whitespace too
WHITESPACE = re.compile(r"[\s\ufeff]+")
# decode-side punctuation also covers backtick and hyphen
PUNCT_TOKEN = re.compile(r"[.,!?;:()'\"`–—-]")


def split_text(text: str, case_sensitive: bool = False) -> List[str]:
    """Split *text* into word and punctuation tokens."""
    if not case_sensitive:
        text = text.lower()
    text = PUNCT_SPLIT.sub(r" \1 ", text)
    text = COMMA_SPLIT.sub(r" \1 ", text)
    text = WHITESPACE.sub(" ", text).strip()
    return [tok for tok in text.split(" ") if tok]


# ────────────────────────────────────────────────────────────────
# Errors & reports
# ────────────────────────────────────────────────────────────────
class MissingSpecialTokenError(LookupError):
    """A special token needed by encode/pad is absent from the vocabulary."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(
            f"Special token {token} not found in vocabulary; "
            "rebuild vocabulary before encoding"
        )


class BuildReport(BaseModel):
    added: int = 0
    skipped: int = 0
    truncated: bool = False
    vocab_size: int = 0


class SerializedTokenizer(BaseModel):
    """On-disk / wire shape: {vocab, specialTokens, caseSensitive}."""

    model_config = ConfigDict(populate_by_name=True)

    vocab: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    special_tokens: List[str] = Field(alias="specialTokens")
    case_sensitive: bool = Field(False, alias="caseSensitive")


# ────────────────────────────────────────────────────────────────
# Tokenizer
# ────────────────────────────────────────────────────────────────
class WordTokenizer:
    """
    Word-punctuation tokenizer with a rebuildable vocabulary.
     - `build_from_text` assigns ids in first-seen order.
     - `build_from_corpus` assigns low ids to frequent tokens.
     - Both honour `max_vocab_size` (special tokens included in the count).
    """

    PAD_TOKEN = "<PAD>"
    UNK_TOKEN = "<UNK>"
    CLS_TOKEN = "<CLS>"
    SEP_TOKEN = "<SEP>"

    def __init__(self,
                 special_tokens: Optional[Sequence[str]] = None,
                 case_sensitive: bool = False,
                 max_vocab_size: Optional[int] = None):
        cfg_args = dict(case_sensitive=case_sensitive, max_vocab_size=max_vocab_size)
        if special_tokens is not None:
            cfg_args["special_tokens"] = list(special_tokens)
        self.config = TokenizerConfig(**cfg_args)
        self._vocab: Dict[str, int] = {}
        self._inverse: Dict[int, str] = {}
        self._publish(self._special_vocab())

    @classmethod
    def from_config(cls, cfg: TokenizerConfig) -> "WordTokenizer":
        return cls(cfg.special_tokens, cfg.case_sensitive, cfg.max_vocab_size)

    # configuration -----------------------------------------------------
    @property
    def special_tokens(self) -> Tuple[str, ...]:
        return tuple(self.config.special_tokens)

    @property
    def case_sensitive(self) -> bool:
        return self.config.case_sensitive

    @property
    def max_vocab_size(self) -> Optional[int]:
        return self.config.max_vocab_size

    # vocabulary state --------------------------------------------------
    def _special_vocab(self) -> Dict[str, int]:
        return {tok: idx for idx, tok in enumerate(self.config.special_tokens)}

    def _publish(self, vocab: Dict[str, int]) -> None:
        # swap both maps in one assignment so readers never see a half-built pair
        self._vocab, self._inverse = vocab, {idx: tok for tok, idx in vocab.items()}

    def _fill(self, candidates: Iterable[str]) -> BuildReport:
        """Start from the special tokens and append *candidates* in order."""
        vocab = self._special_vocab()
        limit = self.config.max_vocab_size
        report = BuildReport()
        pending = [tok for tok in candidates if tok not in vocab]
        for i, tok in enumerate(pending):
            if limit and len(vocab) >= limit:
                report.truncated = True
                report.skipped = len(pending) - i
                break
            vocab[tok] = len(vocab)
            report.added += 1
        self._publish(vocab)
        report.vocab_size = len(vocab)
        if report.truncated:
            log.warning(
                "Vocabulary size limit (%d) reached. %d tokens were not added.",
                limit, report.skipped,
            )
        return report

    @property
    def vocab(self) -> Dict[str, int]:
        return dict(self._vocab)

    @property
    def vocab_size(self) -> int:
        return len(self._vocab)

    def __len__(self) -> int:
        return len(self._vocab)

    def __contains__(self, token: object) -> bool:
        return token in self._vocab

    def __repr__(self) -> str:
        return (f"WordTokenizer(vocab_size={self.vocab_size}, "
                f"case_sensitive={self.case_sensitive}, "
                f"max_vocab_size={self.max_vocab_size})")

    # building ----------------------------------------------------------
    def split(self, text: str) -> List[str]:
        return split_text(text, self.case_sensitive)

    def build_from_text(self, text: str) -> BuildReport:
        """Reset, then add the unique tokens of *text* in first-seen order."""
        unique = dict.fromkeys(self.split(text))
        return self._fill(unique)

    def build_from_corpus(self, texts: Iterable[str]) -> BuildReport:
        """Reset, then add corpus tokens by descending frequency.

        Counter keeps first-seen order and `sorted` is stable, so tokens with
        equal counts keep the order in which they were first met.
        """
        counts: Counter[str] = Counter()
        for text in texts:
            counts.update(self.split(text))
        ranked = sorted(counts, key=counts.__getitem__, reverse=True)
        return self._fill(ranked)

    # encode / decode ---------------------------------------------------
    def _require(self, token: str) -> int:
        idx = self._vocab.get(token)
        if idx is None:
            raise MissingSpecialTokenError(token)
        return idx

    @property
    def pad_token_id(self) -> Optional[int]:
        return self._vocab.get(self.PAD_TOKEN)

    @property
    def unk_token_id(self) -> Optional[int]:
        return self._vocab.get(self.UNK_TOKEN)

    @property
    def cls_token_id(self) -> Optional[int]:
        return self._vocab.get(self.CLS_TOKEN)

    @property
    def sep_token_id(self) -> Optional[int]:
        return self._vocab.get(self.SEP_TOKEN)

    def encode(self, text: str) -> List[int]:
        """Text → [<CLS>, *ids, <SEP>]; unknown tokens map to <UNK>."""
        vocab = self._vocab
        unk_id = self._require(self.UNK_TOKEN)
        ids = [vocab.get(tok, unk_id) for tok in self.split(text)]
        cls_id = self._require(self.CLS_TOKEN)
        sep_id = self._require(self.SEP_TOKEN)
        return [cls_id, *ids, sep_id]

    def encode_batch(self, texts: Iterable[str], pad_to: Optional[int] = None) -> List[List[int]]:
        encoded = [self.encode(t) for t in texts]
        if pad_to is not None:
            encoded = [self.pad(ids, pad_to) for ids in encoded]
        return encoded

    def pad(self, ids: Sequence[int], length: int) -> List[int]:
        """Right-pad with <PAD> (or cut) to exactly *length* ids."""
        if length < 0:
            raise ValueError(f"pad length must be >= 0, got {length}")
        pad_id = self._require(self.PAD_TOKEN)
        out = list(ids[:length])
        out += [pad_id] * (length - len(out))
        return out

    def decode(self, ids: Iterable[int]) -> str:
        inverse = self._inverse
        special = set(self.config.special_tokens)
        tokens: List[str] = []
        for idx in ids:
            tok = inverse.get(idx)
            if tok is None:
                log.debug("dropping id %s: not in vocabulary", idx)
                continue
            if tok not in special:
                tokens.append(tok)

        result = ""
        last = len(tokens) - 1
        for i, tok in enumerate(tokens):
            if PUNCT_TOKEN.fullmatch(tok):
                # glue punctuation to the previous token
                result = result.rstrip() + tok
            else:
                result += tok
            if i < last:
                result += " "
        return result.strip()

    # lookup ------------------------------------------------------------
    def token_to_id(self, token: str) -> Optional[int]:
        return self._vocab.get(token)

    def id_to_token(self, idx: int) -> Optional[str]:
        return self._inverse.get(idx)

    def has_token(self, token: str) -> bool:
        return token in self._vocab

    # serialization -----------------------------------------------------
    def to_dict(self) -> dict:
        """{vocab, specialTokens, caseSensitive}; max_vocab_size is not stored."""
        state = SerializedTokenizer(
            vocab=self._vocab,
            special_tokens=list(self.config.special_tokens),
            case_sensitive=self.config.case_sensitive,
        )
        return state.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Mapping) -> "WordTokenizer":
        state = SerializedTokenizer.model_validate(data)
        tok = cls(special_tokens=state.special_tokens, case_sensitive=state.case_sensitive)
        tok._publish(dict(state.vocab))
        return tok

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: str | Path) -> "WordTokenizer":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Tokenizer file {path} does not exist.")
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))
