# src/e2e/test_engine_complete.py

import pytest

from eqlcomplete.discovery import DiscoveryCache
from eqlcomplete.engine import Engine, complete
from eqlcomplete.models import CompletionResult, Mode, ModeState, Token, TokenKind
from eqlcomplete.schema import SchemaIndex

IO = {
    frozenset(): {"app/users": {"user/id": {}}, "app/version": {}},
    frozenset({"user/id"}): {"user/name": {}, "user/friends": {"user/id": {}}},
}
ROOT = ModeState(Mode.ATTR_LIST)


def index(**kw):
    kw.setdefault("idents", ["user/id", "order/id"])
    return SchemaIndex(IO, **kw)


def attr_token(text, start=1):
    return Token(text=text, start_offset=start, end_offset=start + len(text), kind=TokenKind.ATOM, state=ROOT)


def ident_token():
    return Token(text="", start_offset=2, end_offset=2, state=ModeState(Mode.IDENT, None, ROOT))


def test_blank_fragment_inserts_at_cursor_and_lists_everything():
    tok = Token(text="[", start_offset=0, end_offset=1, state=ROOT)
    res = complete(index(), tok, "[")
    assert isinstance(res, CompletionResult)
    assert res.replace_from == res.replace_to == 1
    assert res.candidates == [":app/users", ":app/version"]


def test_typed_fragment_replaces_through_token_end():
    res = complete(index(), attr_token(":app/v"), ":app/v")
    assert res.candidates == [":app/version"]
    assert (res.replace_from, res.replace_to) == (1, 7)


def test_fragment_shorter_than_token():
    tok = attr_token(":app/vers")          # offsets 1..10, cursor after ":app"
    res = complete(index(), tok, ":app", cursor=5)
    assert (res.replace_from, res.replace_to) == (1, 10)
    assert res.candidates == [":app/users", ":app/version"]


def test_cursor_defaults_to_end_of_fragment():
    res = complete(index(), attr_token(":app/vers"), ":app")
    assert res.replace_from == 1


def test_ident_position_offers_identities():
    res = complete(index(), ident_token(), "")
    assert res.candidates == [":order/id", ":user/id"]
    assert res.replace_from == res.replace_to == 2


def test_no_candidates_returns_none_not_empty():
    idx = index(autocomplete_ignore=["user/id", "order/id"])
    assert complete(idx, ident_token(), "") is None


def test_no_fuzzy_match_returns_none():
    assert complete(index(), attr_token(":zzz"), ":zzz") is None


def test_ignored_key_never_offered_even_on_perfect_match():
    idx = index(autocomplete_ignore=["app/version"])
    res = complete(idx, attr_token(":app"), ":app")
    assert res.candidates == [":app/users"]
    assert complete(idx, attr_token(":app/version"), ":app/version") is None


def test_resolution_miss_returns_none():
    tok = Token(":x", 0, 2, state=ModeState(Mode.OTHER, None, ROOT))
    assert complete(index(), tok, ":x") is None


@pytest.mark.parametrize("bad", [None, ["junk"], "index", {"index-io": "nope"}])
def test_malformed_index_returns_none(bad):
    assert complete(bad, attr_token(":a"), ":a") is None


def test_plain_mapping_index_is_accepted():
    raw = {"index-io": [{"inputs": [], "outputs": ["app/users"]}], "idents": []}
    res = complete(raw, attr_token(":app"), ":app")
    assert res.candidates == [":app/users"]


def test_hook_failure_surfaces_as_none_and_reaches_callback():
    seen = []

    def boom(path):
        raise ValueError("bad resolver")

    idx = index(discover_hook=boom)
    eng = Engine(on_error=seen.append)
    assert eng.complete(idx, attr_token(":a"), ":a") is None
    assert len(seen) == 1 and isinstance(seen[0], ValueError)


def test_engine_reflects_swapped_index():
    eng = Engine()
    first = SchemaIndex(IO, idents=["user/id"])
    second = SchemaIndex(IO, idents=["order/id"])
    assert eng.complete(first, ident_token(), "").candidates == [":user/id"]
    assert eng.complete(second, ident_token(), "").candidates == [":order/id"]


def test_engines_do_not_share_caches():
    a, b = Engine(), Engine()
    a.complete(index(), ident_token(), "")
    assert len(a.cache) == 1
    assert len(b.cache) == 0


def test_engine_uses_injected_cache_and_reset_clears_it():
    cache = DiscoveryCache()
    eng = Engine(cache=cache)
    eng.complete(index(), attr_token(":app"), ":app")
    assert len(cache) == 1
    eng.reset()
    assert len(cache) == 0


def test_top_k_caps_the_list():
    res = Engine(top_k=1).complete(index(), attr_token(":app"), ":app")
    assert res.candidates == [":app/users"]
    res = Engine().complete(index(), attr_token(":app"), ":app", top_k=1)
    assert len(res.candidates) == 1


def test_complete_is_pure():
    idx = index()
    tok = attr_token(":app")
    assert complete(idx, tok, ":app") == complete(idx, tok, ":app")


def test_unrankable_fragment_shows_nothing():
    assert complete(index(), attr_token(":a\x00"), ":a\x00") is None


def test_explicit_top_k_overrides_the_engine_default():
    res = Engine(top_k=1).complete(index(), ident_token(), "", top_k=2)
    assert res.candidates == [":order/id", ":user/id"]


@pytest.mark.parametrize("k", [0, -1])
def test_non_positive_top_k_is_rejected(k):
    with pytest.raises(ValueError):
        complete(index(), ident_token(), "", top_k=k)
    with pytest.raises(ValueError):
        Engine().complete(index(), ident_token(), "", top_k=k)
