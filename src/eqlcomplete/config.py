from __future__ import annotations
import os

# Fragments made only of these characters count as "blank": show everything
BLANK_CHARS: frozenset[str] = frozenset({"(", "{", "[", " "})

# Keys namespaced under this marker are structural placeholders, never attributes
PLACEHOLDER_NAMESPACE: str = ">"

# Token text carries the keyword marker, schema keys do not
KEYWORD_PREFIX: str = ":"

# /* ~~~ a substring starting after one of these counts as a word-start match ~~~ */
WORD_BOUNDARY_CHARS: frozenset[str] = frozenset({"/", ".", "-", "_"})

# Cap on returned candidates (None = unlimited)
TOP_K: int | None = None

# Progress logging (set EQLCOMPLETE_VERBOSE=1 to enable)
VERBOSE = os.environ.get("EQLCOMPLETE_VERBOSE") == "1"
