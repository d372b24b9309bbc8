from __future__ import annotations
from typing import Any, Callable, Iterable, Mapping, Optional

# Output tree: attribute -> nested output tree ({} when the attribute is a leaf)
Tree = dict

# Caller-supplied replacement for reachable_inputs_under (may raise)
DiscoverHook = Callable[[tuple], Iterable[str]]


def _as_tree(obj: Any) -> Tree:
    """Accept a nested mapping or a flat list of attribute names."""
    if isinstance(obj, Mapping):
        return {str(k): _as_tree(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return {str(k): {} for k in obj}
    return {}


def _merge(a: Tree, b: Tree) -> Tree:
    """Deep-merge two output trees."""
    if not b:
        return a
    out = dict(a)
    for k, v in b.items():
        out[k] = _merge(out[k], v) if k in out else v
    return out


def _input_key(raw: Any) -> frozenset:
    if isinstance(raw, frozenset):
        return raw
    if isinstance(raw, str):
        return frozenset(raw.split())
    return frozenset(str(x) for x in raw)


class SchemaIndex:
    """
    Read-only view over a schema index.

    ``index_io`` maps a set of input attributes to the tree of outputs
    resolvable from them; the empty set holds what is reachable from the root.
    An ``index_io`` that is not map-shaped is kept as-is and reported through
    ``is_well_formed`` so callers can degrade to "no suggestions".
    """

    def __init__(
        self,
        index_io: Any,
        idents: Iterable[str] = (),
        autocomplete_ignore: Iterable[str] = (),
        discover_hook: Optional[DiscoverHook] = None,
    ) -> None:
        if isinstance(index_io, Mapping):
            index_io = {_input_key(k): _as_tree(v) for k, v in index_io.items()}
        self.index_io = index_io
        self._idents = frozenset(idents)
        self.autocomplete_ignore = frozenset(autocomplete_ignore)
        self.discover_hook = discover_hook

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, discover_hook: Optional[DiscoverHook] = None) -> "SchemaIndex":
        """
        Build from the JSON shape::

            {"index-io": [{"inputs": [], "outputs": {"user/id": {}}}, ...],
             "idents": ["user/id"],
             "autocomplete-ignore": ["com.example/internal"]}

        ``index-io`` may also be a mapping keyed by space-separated inputs.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"schema index must be an object, got {type(data).__name__}")
        raw_io = data.get("index-io", data.get("index_io"))
        try:
            if isinstance(raw_io, list):
                io: Any = {}
                for entry in raw_io:
                    if not isinstance(entry, Mapping):
                        raise ValueError("index-io entries must be objects with inputs/outputs")
                    key = _input_key(entry.get("inputs") or ())
                    io[key] = _merge(io.get(key, {}), _as_tree(entry.get("outputs")))
            else:
                io = raw_io
            return cls(
                io,
                idents=data.get("idents") or (),
                autocomplete_ignore=data.get("autocomplete-ignore", data.get("autocomplete_ignore")) or (),
                discover_hook=discover_hook,
            )
        except TypeError as e:
            # inputs, idents and ignore lists must be collections of names
            raise ValueError(f"malformed schema index: {e}") from e

    # ------------- queries -------------

    @property
    def is_well_formed(self) -> bool:
        return isinstance(self.index_io, Mapping)

    def identities(self) -> frozenset:
        return self._idents

    def attribute_exists(self, key: str) -> bool:
        """True when ``key`` is resolvable without any input."""
        if not self.is_well_formed:
            return False
        return key in self.index_io.get(frozenset(), {})

    def attribute_tree(self, path: Iterable[str] = ()) -> Tree:
        """
        Everything reachable under ``path`` (innermost key first, as the
        resolver builds it). Walks from the root outward-in, closing over
        every input set the attributes at each level satisfy.
        """
        if not self.is_well_formed:
            return {}
        tree = self._close({})
        for key in reversed(tuple(path)):
            tree = self._close(dict(tree.get(key) or {}))
        return tree

    def reachable_inputs_under(self, path: Iterable[str] = ()) -> frozenset:
        return frozenset(self.attribute_tree(path))

    # ------------- internals -------------

    def _close(self, tree: Tree) -> Tree:
        # BFS to a fixpoint: each satisfied input set contributes its outputs once
        applied: set = set()
        while True:
            have = set(tree)
            ready = [
                (inputs, outputs)
                for inputs, outputs in self.index_io.items()
                if inputs not in applied and inputs <= have
            ]
            if not ready:
                return tree
            for inputs, outputs in ready:
                applied.add(inputs)
                tree = _merge(tree, outputs)


def as_schema_index(obj: Any) -> Optional[SchemaIndex]:
    """Coerce caller input to a SchemaIndex; None when it is not index-shaped."""
    if isinstance(obj, SchemaIndex):
        return obj
    if isinstance(obj, Mapping):
        try:
            return SchemaIndex.from_dict(obj)
        except (ValueError, TypeError):
            return None
    return None
