import pytest
from pydantic import ValidationError

from wordtok.config import (
    DEFAULT_SPECIAL_TOKENS,
    TokenizerConfig,
    config_from_env,
    log_level_from_env,
    vocab_path_from_env,
)


def test_defaults():
    cfg = TokenizerConfig()
    assert cfg.special_tokens == DEFAULT_SPECIAL_TOKENS
    assert cfg.case_sensitive is False
    assert cfg.max_vocab_size is None


def test_config_is_frozen():
    cfg = TokenizerConfig()
    with pytest.raises(ValidationError):
        cfg.case_sensitive = True


@pytest.mark.parametrize("tokens", [["<PAD>", ""], ["<A>", "<B>", "<A>"]])
def test_bad_special_tokens(tokens):
    with pytest.raises(ValidationError):
        TokenizerConfig(special_tokens=tokens)


def test_env_defaults(monkeypatch):
    for var in ("WORDTOK_CASE_SENSITIVE", "WORDTOK_MAX_VOCAB_SIZE",
                "WORDTOK_SPECIAL_TOKENS", "WORDTOK_VOCAB_PATH", "WORDTOK_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    cfg = config_from_env()
    assert cfg.max_vocab_size == 1000
    assert not cfg.case_sensitive
    assert vocab_path_from_env() is None
    assert log_level_from_env() == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WORDTOK_CASE_SENSITIVE", "yes")
    monkeypatch.setenv("WORDTOK_MAX_VOCAB_SIZE", "0")
    monkeypatch.setenv("WORDTOK_SPECIAL_TOKENS", "[PAD], [UNK]")
    monkeypatch.setenv("WORDTOK_VOCAB_PATH", "data/vocab.json")
    monkeypatch.setenv("WORDTOK_LOG_LEVEL", "debug")
    cfg = config_from_env()
    assert cfg.case_sensitive
    assert cfg.max_vocab_size is None
    assert cfg.special_tokens == ["[PAD]", "[UNK]"]
    assert str(vocab_path_from_env()) == "data/vocab.json"
    assert log_level_from_env() == "DEBUG"
