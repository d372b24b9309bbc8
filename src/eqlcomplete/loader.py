from __future__ import annotations
import json
import logging
import os
from typing import Any

from .config import VERBOSE
from .models import Token
from .schema import SchemaIndex

log = logging.getLogger(__name__)


def _read_json(path: str) -> Any:
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path}: invalid JSON ({e})") from e


def load_index(path: str) -> SchemaIndex:
    """Read a schema index from a JSON file (see SchemaIndex.from_dict)."""
    index = SchemaIndex.from_dict(_read_json(path))
    if not index.is_well_formed:
        # kept usable: completion just yields nothing
        log.warning("%s has no map-shaped index-io; completions will be empty", path)
    log.info("Loaded schema index from %s: idents=%d", path, len(index.identities()))
    if VERBOSE:
        print(f"[index] {path} input-sets={len(index.index_io) if index.is_well_formed else 0:,}")
    return index


def load_token(path: str) -> Token:
    """Read one tokenizer token (with its mode-state chain) from a JSON file."""
    return Token.from_dict(_read_json(path))
