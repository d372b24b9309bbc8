# eqlcomplete/engine.py
from __future__ import annotations

import logging
from typing import Any, Optional

from . import config as CFG
from .context import resolve_context
from .discovery import DiscoveryCache, ErrorCallback, discover
from .models import CompletionResult, Token, keyword_text
from .schema import SchemaIndex, as_schema_index
from .search import InvalidFragment, is_blank, rank

log = logging.getLogger(__name__)


def complete(
    schema_index: Any,
    token: Token,
    fragment: str,
    *,
    cursor: Optional[int] = None,
    cache: Optional[DiscoveryCache] = None,
    on_error: Optional[ErrorCallback] = None,
    top_k: Optional[int] = CFG.TOP_K,
) -> Optional[CompletionResult]:
    """
    Completions for the token under the cursor.

    ``fragment`` is the token text typed so far (up to the cursor); ``cursor``
    defaults to the end of it. Returns None when there is nothing to offer,
    never an empty result; that includes a fragment no candidate fuzzy-matches.
    ``top_k`` caps the list and must be positive when given.
    """
    if top_k is not None and top_k < 1:
        raise ValueError(f"top_k must be a positive integer, got {top_k}")
    blank = is_blank(fragment)
    if cursor is None:
        cursor = token.start_offset + len(fragment)

    # /* ~~~ span the editor replaces: nothing for a bare trigger ~~~ */
    if blank:
        replace_from = replace_to = cursor
    else:
        replace_from = cursor - len(fragment)
        replace_to = token.end_offset

    index = as_schema_index(schema_index)
    if index is None:
        return None

    context = resolve_context(index, token)
    raw = discover(index, context, cache=cache, on_error=on_error)
    if not raw:
        return None

    # candidates are offered as they are typed, keyword marker included
    options = sorted(keyword_text(k) for k in raw if k not in index.autocomplete_ignore)
    try:
        ranked = rank(fragment, options)
    except InvalidFragment as e:
        log.debug("Unrankable fragment %r: %s", fragment, e)
        return None
    if not ranked:
        return None
    words = [m.text for m in ranked]
    if top_k is not None:
        words = words[:top_k]
    return CompletionResult(candidates=words, replace_from=replace_from, replace_to=replace_to)


class Engine:
    """
    Holds the per-editor state the pure pipeline needs:
      - a DiscoveryCache (cleared when the schema index object changes),
      - the diagnostic callback hook failures are reported to.

    Public API (used by the editor binding, CLI and Flask):
      * complete(schema_index, token, fragment, ...): ranked completions or None
      * reset(): drop cached candidate sets
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        cache: Optional[DiscoveryCache] = None,
        on_error: Optional[ErrorCallback] = None,
        top_k: Optional[int] = CFG.TOP_K,
    ) -> None:
        self.cache = cache if cache is not None else DiscoveryCache()
        self._on_error = on_error or self._log_hook_failure
        self.top_k = top_k

    # ------------- query -------------

    def complete(
        self,
        schema_index: Any,
        token: Token,
        fragment: str,
        *,
        cursor: Optional[int] = None,
        top_k: Optional[int] = None,
    ) -> Optional[CompletionResult]:
        # raw mappings get a fresh adapter per call, so there is nothing to cache against
        cache = self.cache if isinstance(schema_index, SchemaIndex) else None
        return complete(schema_index, token, fragment, cursor=cursor, cache=cache,
                        on_error=self._on_error, top_k=top_k if top_k is not None else self.top_k)

    # ------------- teardown -------------

    def reset(self) -> None:
        self.cache.clear()
        log.info("Engine cache reset")

    # ------------- internals -------------

    @staticmethod
    def _log_hook_failure(exc: Exception) -> None:
        log.warning("Attribute discovery hook failed: %s", exc, exc_info=exc)
