import pytest
from fastapi.testclient import TestClient

from wordtok.config import TokenizerConfig
from wordtok.main import app, state

cli = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_state():
    state.reset(TokenizerConfig(max_vocab_size=1000))
    yield


def test_encode_requires_built_vocab():
    r = cli.post("/encode", json={"text": "hello"})
    assert r.status_code == 409
    assert r.json()["detail"] == "Please build vocabulary first"


def test_blank_text_is_rejected():
    assert cli.post("/vocab/text", json={"text": "   "}).status_code == 400
    cli.post("/vocab/text", json={"text": "hi"})
    r = cli.post("/encode", json={"text": ""})
    assert r.status_code == 400
    assert r.json()["detail"] == "Please enter some text to encode"


def test_build_encode_decode_roundtrip():
    r = cli.post("/vocab/text", json={"text": "Hello world!"})
    assert r.status_code == 200
    body = r.json()
    assert body["size"] == 7
    assert body["report"]["added"] == 3
    assert body["entries"][1] == {"token": "<UNK>", "id": 1, "special": True}
    assert body["entries"][-1] == {"token": "!", "id": 6, "special": False}

    r = cli.post("/encode", json={"text": "Hello there!"})
    assert r.json() == {
        "ids": [2, 4, 1, 6, 3],
        "tokens": ["<CLS>", "hello", "<UNK>", "!", "<SEP>"],
    }

    r = cli.post("/decode", json={"ids": [2, 4, 6, 3]})
    assert r.json() == {"text": "hello!"}


def test_encode_with_padding():
    cli.post("/vocab/text", json={"text": "a b"})
    r = cli.post("/encode", json={"text": "a", "pad_to": 5})
    assert r.json()["ids"] == [2, 4, 3, 0, 0]


def test_corpus_build_ranks_sample_tokens():
    r = cli.post("/vocab/corpus", json={})
    assert r.status_code == 200
    ids = {e["token"]: e["id"] for e in r.json()["entries"]}
    assert ids["learning"] == 4
    assert ids["!"] == 5
    assert ids["are"] == 6


def test_corpus_build_includes_user_text():
    r = cli.post("/vocab/corpus", json={"text": "zebra zebra zebra zebra"})
    ids = {e["token"]: e["id"] for e in r.json()["entries"]}
    assert ids["zebra"] == 4


def test_size_limit_reported():
    cli.put("/settings", json={"max_vocab_size": 6})
    r = cli.post("/vocab/text", json={"text": "a b c d"})
    report = r.json()["report"]
    assert report == {"added": 2, "skipped": 2, "truncated": True, "vocab_size": 6}


def test_settings_replace_tokenizer():
    cli.post("/vocab/text", json={"text": "Hello"})
    r = cli.put("/settings", json={"case_sensitive": True, "max_vocab_size": None})
    assert r.json()["case_sensitive"] is True
    assert r.json()["max_vocab_size"] is None
    assert cli.get("/vocab").json()["size"] == 4
    assert cli.get("/settings").json()["special_tokens"] == ["<PAD>", "<UNK>", "<CLS>", "<SEP>"]


def test_settings_validation():
    assert cli.put("/settings", json={"max_vocab_size": 0}).status_code == 422
    assert cli.put("/settings", json={"max_vocab_size": 100_000}).status_code == 422


def test_clear_vocab():
    cli.post("/vocab/text", json={"text": "one two"})
    assert cli.delete("/vocab").json()["size"] == 4
    assert cli.post("/encode", json={"text": "one"}).status_code == 409


def test_samples():
    r = cli.get("/samples")
    assert len(r.json()) == 4


def test_export_import():
    cli.post("/vocab/text", json={"text": "alpha beta"})
    doc = cli.get("/export").json()
    assert doc["vocab"]["beta"] == 5
    assert doc["specialTokens"] == ["<PAD>", "<UNK>", "<CLS>", "<SEP>"]
    assert doc["caseSensitive"] is False

    cli.delete("/vocab")
    r = cli.post("/import", json=doc)
    assert r.status_code == 200
    assert r.json()["size"] == 6
    assert cli.post("/encode", json={"text": "beta"}).json()["ids"] == [2, 5, 3]


def test_import_rejects_bad_document():
    r = cli.post("/import", json={"vocab": {"x": "not-an-int"}})
    assert r.status_code == 422


def test_missing_special_token_surfaces_as_conflict():
    doc = {"vocab": {"<PAD>": 0, "hi": 1}, "specialTokens": ["<PAD>"], "caseSensitive": False}
    cli.post("/import", json=doc)
    r = cli.post("/encode", json={"text": "hi"})
    assert r.status_code == 409
    assert "<UNK>" in r.json()["detail"]
