# src/e2e/test_fuzzy_rank.py

import pytest

from eqlcomplete.search import InvalidFragment, fuzzy_pattern, is_blank, rank

CANDS = [":user/name", ":user/id", ":account/username", ":order/total"]


@pytest.mark.parametrize("frag", ["", "(", "{", "[", " ", "[ "])
def test_blank_fragment_returns_all_candidates_in_given_order(frag):
    assert is_blank(frag)
    out = rank(frag, CANDS)
    assert [m.text for m in out] == CANDS


def test_every_result_fuzzy_matches_and_misses_are_dropped():
    out = rank("usnm", CANDS)
    texts = [m.text for m in out]
    pat = fuzzy_pattern("usnm")
    assert texts, "expected some matches"
    assert all(pat.search(t) for t in texts)
    assert ":user/id" not in texts
    assert ":order/total" not in texts
    assert set(texts) == {":user/name", ":account/username"}


def test_matching_is_case_insensitive():
    assert [m.text for m in rank("USER/N", [":user/name"])] == [":user/name"]


def test_exact_substring_beats_scattered_match():
    out = rank("name", [":n_a_m_e", ":user/name"])
    assert [m.text for m in out] == [":user/name", ":n_a_m_e"]
    assert out[0].score > out[1].score


def test_shorter_candidate_wins_among_equal_quality():
    out = rank("name", [":account/name", ":user/name"])
    assert [m.text for m in out] == [":user/name", ":account/name"]


def test_ties_break_alphabetically():
    out = rank("name", [":b/name", ":a/name"])
    assert out[0].score == out[1].score
    assert [m.text for m in out] == [":a/name", ":b/name"]


def test_rank_is_deterministic():
    cands = [":user/name", ":user/nickname", ":account/username", ":u/n", ":name/user"]
    first = rank("un", cands)
    second = rank("un", list(cands))
    assert first == second


def test_regex_metacharacters_are_literal():
    out = rank("a.b", ["a.b", "axb"])
    assert [m.text for m in out] == ["a.b"]
    assert rank("u(", [":user(x)", ":user"])[0].text == ":user(x)"


def test_nul_byte_is_an_invalid_fragment():
    with pytest.raises(InvalidFragment):
        rank("a\x00", CANDS)
    assert issubclass(InvalidFragment, ValueError)


def test_non_matching_candidates_never_appear_with_low_scores():
    out = rank("zzz", CANDS)
    assert out == []
