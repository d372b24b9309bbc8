# eqlcomplete/editor.py
"""
Glue between the completion engine and a host text editor.

The editor itself (rendering, keybindings, the popup widget) lives outside
this package; it only has to provide the small ``Editor`` protocol below.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from .config import PLACEHOLDER_NAMESPACE
from .context import resolve_context
from .engine import Engine
from .models import (
    AttributeContext,
    HintList,
    Mode,
    Position,
    Token,
    TokenKind,
    keyword,
    namespace,
)
from .schema import as_schema_index

log = logging.getLogger(__name__)


class Editor(Protocol):
    def get_cursor(self) -> Position: ...
    def get_token_at(self, pos: Position) -> Token: ...
    def replace_range(self, text: str, start: Position, end: Position) -> None: ...
    def set_cursor(self, pos: Position) -> None: ...
    def show_hint(self) -> None: ...


def hint(engine: Engine, schema_index: Any, editor: Editor) -> Optional[HintList]:
    """Hint-popup source: completions for the token under the cursor, or None."""
    cur = editor.get_cursor()
    token = editor.get_token_at(cur)
    fragment = token.text[: max(0, cur.ch - token.start_offset)]
    result = engine.complete(schema_index, token, fragment, cursor=cur.ch)
    if result is None:
        return None
    return HintList(
        items=result.candidates,
        start=Position(cur.line, result.replace_from),
        end=Position(cur.line, result.replace_to),
    )


def join_command(editor: Editor) -> bool:
    """
    Turn the composite attribute under the cursor into a join.

    At the start of an indented line the join opens its attribute list on the
    next line; elsewhere it stays inline. The cursor lands inside the new
    brackets and the hint popup opens. Returns False when the cursor is not on
    a composite attribute in an attribute list.
    """
    cur = editor.get_cursor()
    token = editor.get_token_at(cur)
    state = token.state
    if state is None or state.mode is not Mode.ATTR_LIST or token.kind is not TokenKind.COMPOSITE_ATOM:
        return False

    indent = state.indent or 0
    start = Position(cur.line, token.start_offset)
    end = Position(cur.line, token.end_offset)
    s = token.text
    if token.start_offset == indent:
        joined = "{" + s + "\n" + " " * (indent + 1) + "[]}"
        cursor_end = Position(cur.line + 1, indent + 2)
    else:
        joined = "{" + s + " []}"
        cursor_end = Position(cur.line, token.start_offset + len(s) + 3)

    editor.replace_range(joined, start, end)
    editor.set_cursor(cursor_end)
    editor.show_hint()
    log.debug("Joined %s at line %d", s, cur.line)
    return True


def key_has_children(schema_index: Any, token: Token) -> bool:
    """True for an attribute token that can be expanded into a join."""
    if token.kind is not TokenKind.ATOM:
        return False
    key = keyword(token.text)
    if namespace(key) == PLACEHOLDER_NAMESPACE:
        return True
    index = as_schema_index(schema_index)
    if index is None or not index.is_well_formed:
        return False
    context = resolve_context(index, token)
    if not isinstance(context, AttributeContext):
        return False
    path = [k for k in context.path_prefix if namespace(k) != PLACEHOLDER_NAMESPACE]
    return bool(index.attribute_tree(path).get(key))
