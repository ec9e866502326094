"""JSON encoding of analysis results."""
from __future__ import annotations

import json

import pytest
from hypothesis import given, settings, strategies as st

from guessmeter import analyze
from guessmeter.errors import EntropyDecodeError, GuessmeterError
from guessmeter.serialization import dumps, entropy_from_dict, entropy_to_dict, loads


@settings(deadline=None, max_examples=50)
@given(
    password=st.text(max_size=24),
    user_inputs=st.lists(st.text(max_size=8), max_size=3),
)
def test_json_round_trip(password: str, user_inputs: list[str]) -> None:
    entropy = analyze(password, user_inputs)
    assert loads(dumps(entropy)) == entropy


def test_empty_password_guesses_log10_is_null() -> None:
    entropy = analyze("")
    document = json.loads(dumps(entropy))
    assert document["guesses_log10"] is None
    assert document["sequence"] == []
    assert document["feedback"] is None
    assert loads(dumps(entropy)) == entropy


def test_document_layout() -> None:
    entropy = analyze("p4ssw0rd2019")
    document = entropy_to_dict(entropy)
    assert document["score"] == entropy.score
    assert document["crack_times_display"] == entropy.crack_times_display()
    assert isinstance(document["calc_time_us"], int)
    for match_dict, match in zip(document["sequence"], entropy.sequence):
        assert match_dict["pattern"] == match.pattern.name
        assert (match_dict["i"], match_dict["j"], match_dict["token"]) == (
            match.i,
            match.j,
            match.token,
        )


def test_repeat_base_matches_are_nested() -> None:
    entropy = analyze("xqzxqzxqz")
    (repeat,) = [m for m in entropy_to_dict(entropy)["sequence"] if m["pattern"] == "repeat"]
    assert repeat["base_token"] == "xqz"
    assert repeat["base_matches"]
    assert all("pattern" in base for base in repeat["base_matches"])


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        "{}",
        '{"guesses": 1}',
    ],
)
def test_malformed_documents_are_rejected(text: str) -> None:
    with pytest.raises(EntropyDecodeError):
        loads(text)


def test_invalid_fields_are_rejected() -> None:
    document = entropy_to_dict(analyze("hunter2"))

    bad_score = dict(document, score=7)
    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(bad_score)

    bad_guesses = dict(document, guesses=-1)
    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(bad_guesses)

    bad_pattern = dict(document, sequence=[dict(document["sequence"][0], pattern="telepathy")])
    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(bad_pattern)

    missing_field = dict(document, sequence=[{"pattern": "date", "i": 0, "j": 1, "token": "x"}])
    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(missing_field)

    assert issubclass(EntropyDecodeError, GuessmeterError)


def test_badly_typed_fields_are_rejected() -> None:
    document = entropy_to_dict(analyze("password"))
    (word,) = document["sequence"]
    assert word["pattern"] == "dictionary"

    crack_times = dict(
        document["crack_times_seconds"], offline_fast_hashing_1e10_per_second="soon"
    )
    bad_documents = [
        dict(document, crack_times_seconds=crack_times),
        dict(document, crack_times_seconds={"online": 1.0}),
        dict(document, calc_time_us=1.5),
        dict(document, calc_time_us="fast"),
        dict(document, guesses_log10="big"),
        dict(document, score=True),
        dict(document, feedback={"warning": 3, "suggestions": []}),
        dict(document, feedback={"warning": None, "suggestions": "try harder"}),
        dict(document, sequence=[dict(word, rank="high")]),
        dict(document, sequence=[dict(word, reversed="no")]),
        dict(document, sequence=[dict(word, sub={"4": 1})]),
        dict(document, sequence=[dict(word, i=5, j=1)]),
        dict(document, sequence=[dict(word, token="pass")]),
        dict(document, sequence=[dict(word, i=True)]),
        dict(document, sequence=[dict(word, guesses="lots")]),
    ]
    for bad in bad_documents:
        with pytest.raises(EntropyDecodeError):
            entropy_from_dict(bad)


def test_sequence_must_be_contiguous() -> None:
    document = entropy_to_dict(analyze("zqxbrn1990"))
    assert len(document["sequence"]) >= 2

    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(dict(document, sequence=document["sequence"][1:]))
    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(dict(document, sequence=list(reversed(document["sequence"]))))


def test_repeat_base_matches_are_validated() -> None:
    document = entropy_to_dict(analyze("xqzxqzxqz"))
    (repeat,) = [m for m in document["sequence"] if m["pattern"] == "repeat"]
    broken = dict(repeat, base_token=repeat["base_token"] + "w")
    sequence = [broken if m is repeat else m for m in document["sequence"]]
    with pytest.raises(EntropyDecodeError):
        entropy_from_dict(dict(document, sequence=sequence))
