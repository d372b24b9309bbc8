from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Hashable, Optional

from .config import PLACEHOLDER_NAMESPACE
from .models import AttributeContext, IdentContext, ResolvedContext, namespace
from .schema import SchemaIndex, as_schema_index

log = logging.getLogger(__name__)

ErrorCallback = Callable[[Exception], None]


class DiscoveryCache:
    """
    Memo for discovered candidate sets, keyed by context shape.

    Bound to one schema index at a time: handing it a different index object
    (identity, not equality) clears everything before the next lookup.
    """

    def __init__(self) -> None:
        self._owner: Any = None
        self._rows: Dict[Hashable, frozenset] = {}

    def bind(self, schema_index: Any) -> None:
        if schema_index is not self._owner:
            if self._rows:
                log.info("Schema index changed; dropping %d cached candidate sets", len(self._rows))
            self._rows.clear()
            self._owner = schema_index

    def get(self, key: Hashable) -> Optional[frozenset]:
        return self._rows.get(key)

    def put(self, key: Hashable, value: frozenset) -> None:
        self._rows[key] = value

    def clear(self) -> None:
        self._rows.clear()
        self._owner = None

    def __len__(self) -> int:
        return len(self._rows)


def _report(exc: Exception) -> None:
    log.warning("Candidate hook failed; showing no suggestions", exc_info=exc)


def _is_placeholder(key: str) -> bool:
    return namespace(key) == PLACEHOLDER_NAMESPACE


def _cache_key(context: ResolvedContext) -> Hashable:
    if isinstance(context, IdentContext):
        return ("ident",)
    return ("attribute", context.path_prefix)


def _discover_attributes(schema_index: SchemaIndex, context: AttributeContext) -> frozenset:
    path = tuple(k for k in context.path_prefix if not _is_placeholder(k))
    if schema_index.discover_hook is not None:
        found = schema_index.discover_hook(path)
    else:
        found = schema_index.reachable_inputs_under(path)
    return frozenset(str(k) for k in found if not _is_placeholder(str(k)))


def discover(
    schema_index: Any,
    context: Optional[ResolvedContext],
    *,
    cache: Optional[DiscoveryCache] = None,
    on_error: Optional[ErrorCallback] = None,
) -> frozenset:
    """
    Raw candidate keys for a resolved context.

    A missing context or an index that is not well-formed yields the empty
    set; a plain mapping is adapted first, as ``complete`` does. A failing
    ``discover_hook`` is reported to ``on_error`` (logged at WARNING when no
    callback is given) and also yields the empty set; nothing raised by the
    hook reaches the caller.
    """
    if context is None:
        return frozenset()
    schema_index = as_schema_index(schema_index)
    if schema_index is None or not schema_index.is_well_formed:
        return frozenset()

    key = _cache_key(context)
    if cache is not None:
        cache.bind(schema_index)
        hit = cache.get(key)
        if hit is not None:
            return hit

    if isinstance(context, IdentContext):
        found = frozenset(schema_index.identities())
    else:
        try:
            found = _discover_attributes(schema_index, context)
        except Exception as exc:
            (on_error or _report)(exc)
            return frozenset()

    found = found - schema_index.autocomplete_ignore
    if cache is not None:
        cache.put(key, found)
    return found
