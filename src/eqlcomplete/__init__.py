"""
EQL Completion Engine

In-editor autocompletion for attribute-path queries (idents, joins and
parameter expressions). Given the token under the cursor, with the
tokenizer's nesting stack attached, and a schema index describing which
attributes exist and how they connect, it works out what the cursor is
inside and returns ranked, fuzzy-filtered candidates plus the span to replace.

The package is split by concern:
- models: tokens, mode-state frames, resolved contexts, results
- schema: read-only queries over the schema index
- context: the token-context resolver
- discovery: candidate sets per context, with an injectable cache
- search: fuzzy ranking
- engine: the pipeline tying them together
- editor: the host-editor protocol and hint/join commands

Example Usage:
    from eqlcomplete import Engine, SchemaIndex, Token

    index = SchemaIndex({frozenset(): {"user/id": {}, "user/name": {}}},
                        idents=["user/id"])
    token = Token(text=":user/na", start_offset=1, end_offset=9)
    result = Engine().complete(index, token, ":user/na")
    print(result.candidates)   # [":user/name"]
"""

# src/eqlcomplete/__init__.py
from .discovery import DiscoveryCache, discover
from .engine import Engine, complete
from .models import (
    AttributeContext,
    CompletionResult,
    IdentContext,
    Mode,
    ModeState,
    Token,
    TokenKind,
)
from .context import resolve_context
from .schema import SchemaIndex
from .search import InvalidFragment, rank

__version__ = "1.0.0"
__all__ = [
    "AttributeContext",
    "CompletionResult",
    "DiscoveryCache",
    "Engine",
    "IdentContext",
    "InvalidFragment",
    "Mode",
    "ModeState",
    "SchemaIndex",
    "Token",
    "TokenKind",
    "complete",
    "discover",
    "rank",
    "resolve_context",
]
