from __future__ import annotations
from enum import Enum
from typing import List, Optional

from .models import (
    AttributeContext,
    IdentContext,
    Mode,
    ModeState,
    ResolvedContext,
    Token,
    keyword,
)
from .schema import SchemaIndex


class _Step(Enum):
    RESOLVE = "resolve"                 # classify the frame the cursor is in
    FIND_ATTRIBUTE = "find-attribute"   # walk enclosing joins to build the path


def _up(frame: Optional[ModeState], levels: int) -> Optional[ModeState]:
    for _ in range(levels):
        if frame is None:
            return None
        frame = frame.previous
    return frame


def _mode(frame: Optional[ModeState]) -> Optional[Mode]:
    return frame.mode if frame is not None else None


def resolve_context(schema_index: SchemaIndex, token: Token) -> Optional[ResolvedContext]:
    """
    Classify the cursor position from the token's path stack.

    Returns IdentContext, AttributeContext(path) or None when the stack
    matches no known nesting pattern. Every transition moves at least one
    frame toward the root, so the loop ends within the nesting depth.
    """
    text: Optional[str] = token.text
    frame: Optional[ModeState] = token.state
    if frame is None:
        return AttributeContext(())

    step = _Step.RESOLVE
    prefix: List[str] = []

    while True:
        if step is _Step.RESOLVE:
            if frame is None:
                return AttributeContext(())
            mode, key = frame.mode, frame.key

            if mode is Mode.IDENT and (key is None or text == key):
                return IdentContext()

            if mode is Mode.JOIN and (key is None or text == key):
                # a parameter map between the join and its attr-list is skipped, one level only
                levels = 3 if _mode(frame.previous) is Mode.PARAM_EXPR else 2
                frame = _up(frame, levels)
                step = _Step.FIND_ATTRIBUTE
                continue

            if mode is Mode.ATTR_LIST:
                if _mode(frame.previous) is None:
                    return AttributeContext(())
                frame = frame.previous
                step = _Step.FIND_ATTRIBUTE
                continue

            if mode is Mode.PARAM_EXPR:
                # parameter bodies are not part of the path: re-resolve from the enclosing frame
                frame = frame.previous
                text = None
                continue

            return None

        # _Step.FIND_ATTRIBUTE
        if frame is None or frame.mode is not Mode.JOIN:
            return AttributeContext(tuple(prefix))

        key = frame.key
        if isinstance(key, ModeState) and key.mode is Mode.IDENT:
            # an ident-keyed join anchors the path
            if isinstance(key.key, str):
                prefix.append(keyword(key.key))
            return AttributeContext(tuple(prefix))

        if isinstance(key, str):
            attr = keyword(key)
            prefix.append(attr)
            if schema_index.attribute_exists(attr):
                return AttributeContext(tuple(prefix))
            # unknown at the root: keep climbing past the enclosing attr-list
            frame = _up(frame, 2)
            continue

        return AttributeContext(tuple(prefix))
