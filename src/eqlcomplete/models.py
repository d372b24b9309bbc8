# src/eqlcomplete/models.py
"""
Data models for the completion engine.

- Mode / TokenKind: the small vocabularies the external tokenizer speaks.
- ModeState: one frame of the tokenizer's nesting stack (linked toward root).
- Token: the token under the cursor, with the stack attached.
- IdentContext / AttributeContext: what the resolver decides the cursor is in.
- RankedMatch / CompletionResult: what ranking and completion hand back.

These classes carry no business logic beyond (de)serialization, so the
resolver, discovery and ranking stay plain functions over them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple, Union

from .config import KEYWORD_PREFIX


class Mode(str, Enum):
    IDENT = "ident"
    JOIN = "join"
    ATTR_LIST = "attr-list"
    PARAM_EXPR = "param-exp"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Any) -> Optional["Mode"]:
        if raw is None:
            return None
        if isinstance(raw, Mode):
            return raw
        try:
            return cls(str(raw))
        except ValueError:
            return cls.OTHER


class TokenKind(str, Enum):
    ATOM = "atom"
    COMPOSITE_ATOM = "atom-composite"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Any) -> "TokenKind":
        if isinstance(raw, TokenKind):
            return raw
        try:
            return cls(str(raw))
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True, slots=True)
class ModeState:
    """
    One frame of the tokenizer's path stack.

    Attributes
    ----------
    mode : Mode | None
        Lexical context of this frame.
    key : str | ModeState | None
        Token text that opened the frame (e.g. ``":user/friends"`` for a join).
        A join keyed by an ident expression carries the ident's own frame here.
    previous : ModeState | None
        Enclosing frame, None at the document root.
    indent : int
        Column the frame was opened at.
    """
    mode: Optional[Mode]
    key: Union[str, "ModeState", None] = None
    previous: Optional["ModeState"] = None
    indent: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["ModeState"]:
        # the chain is rebuilt root-first so deep documents do not recurse
        if data is None:
            return None
        chain: List[Mapping[str, Any]] = []
        node: Optional[Mapping[str, Any]] = data
        while node is not None:
            if not isinstance(node, Mapping):
                raise ValueError(f"mode state must be an object, got {type(node).__name__}")
            chain.append(node)
            node = node.get("previous")
        built: Optional[ModeState] = None
        for raw in reversed(chain):
            key = raw.get("key")
            if isinstance(key, Mapping):
                key = cls.from_dict(key)
            built = cls(
                mode=Mode.parse(raw.get("mode")),
                key=key,
                previous=built,
                indent=int(raw.get("indent") or 0),
            )
        return built

    def to_dict(self) -> dict:
        key = self.key.to_dict() if isinstance(self.key, ModeState) else self.key
        return {
            "mode": self.mode.value if self.mode is not None else None,
            "key": key,
            "previous": self.previous.to_dict() if self.previous is not None else None,
            "indent": self.indent,
        }


@dataclass(frozen=True, slots=True)
class Token:
    text: str
    start_offset: int
    end_offset: int
    kind: TokenKind = TokenKind.OTHER
    state: Optional[ModeState] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Token":
        if not isinstance(data, Mapping):
            raise ValueError("token must be an object")
        text = data.get("text", data.get("string", ""))
        start = data.get("start_offset", data.get("start", 0))
        end = data.get("end_offset", data.get("end", start + len(text or "")))
        return cls(
            text=str(text or ""),
            start_offset=int(start),
            end_offset=int(end),
            kind=TokenKind.parse(data.get("kind", data.get("type"))),
            state=ModeState.from_dict(data.get("state")),
        )


@dataclass(frozen=True, slots=True)
class IdentContext:
    """Cursor sits on an ident key."""


@dataclass(frozen=True, slots=True)
class AttributeContext:
    # innermost join first, the root-anchored key last
    path_prefix: Tuple[str, ...] = ()


ResolvedContext = Union[IdentContext, AttributeContext]


@dataclass(frozen=True, slots=True)
class RankedMatch:
    text: str
    score: float


@dataclass(frozen=True, slots=True)
class CompletionResult:
    candidates: List[str]
    replace_from: int
    replace_to: int

    def to_dict(self) -> dict:
        return {
            "candidates": list(self.candidates),
            "replace_from": self.replace_from,
            "replace_to": self.replace_to,
        }


@dataclass(frozen=True, slots=True)
class Position:
    line: int
    ch: int


@dataclass(frozen=True, slots=True)
class HintList:
    """What the editor's hint popup consumes: the list plus the span it replaces."""
    items: List[str] = field(default_factory=list)
    start: Position = Position(0, 0)
    end: Position = Position(0, 0)

    def to_dict(self) -> dict:
        return {
            "list": list(self.items),
            "from": {"line": self.start.line, "ch": self.start.ch},
            "to": {"line": self.end.line, "ch": self.end.ch},
        }


def keyword(text: str) -> str:
    """``":user/name"`` -> ``"user/name"``; already-bare names pass through."""
    return text[len(KEYWORD_PREFIX):] if text.startswith(KEYWORD_PREFIX) else text


def namespace(key: str) -> Optional[str]:
    """Namespace part of a qualified key, None when unqualified."""
    ns, sep, _ = key.partition("/")
    return ns if sep else None


def keyword_text(key: str) -> str:
    """Inverse of keyword(): the text inserted into the document."""
    return KEYWORD_PREFIX + key
