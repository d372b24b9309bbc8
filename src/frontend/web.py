from __future__ import annotations
import argparse
import logging
import os

from flask import Flask, request, jsonify

from eqlcomplete.engine import Engine
from eqlcomplete.loader import load_index
from eqlcomplete.models import Token
from eqlcomplete.schema import SchemaIndex

log = logging.getLogger(__name__)

app = Flask(__name__)
_engine: Engine = Engine()
_index: SchemaIndex | None = None


def set_index(index: SchemaIndex | None) -> None:
    """Swap the live schema index; the engine cache follows the new identity."""
    global _index
    _index = index
    log.info("Schema index %s", "replaced" if index is not None else "cleared")


# ---------- API ----------
@app.post("/api/complete")
def api_complete():
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not isinstance(body.get("token"), dict):
        return jsonify({"error": "expected JSON object with a 'token' object"}), 400
    try:
        token = Token.from_dict(body["token"])
        cursor = body.get("cursor")
        cursor = int(cursor) if cursor is not None else None
        top_k = body.get("top_k")
        top_k = int(top_k) if top_k is not None else None
    except (TypeError, ValueError) as e:
        return jsonify({"error": f"malformed token: {e}"}), 400
    if top_k is not None and top_k < 1:
        return jsonify({"error": "top_k must be a positive integer"}), 400

    fragment = body.get("fragment")
    if not isinstance(fragment, str):
        fragment = token.text
    if _index is None:
        return jsonify(None)
    result = _engine.complete(_index, token, fragment, cursor=cursor, top_k=top_k)
    return jsonify(result.to_dict() if result else None)


@app.put("/api/index")
def api_index():
    body = request.get_json(silent=True)
    try:
        index = SchemaIndex.from_dict(body)
    except (ValueError, TypeError) as e:
        return jsonify({"error": str(e)}), 400
    set_index(index)
    return jsonify({"ok": True, "idents": len(index.identities())})


@app.get("/api/health")
def api_health():
    return jsonify({"ok": True, "index": _index is not None})


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Serve EQL completions over HTTP")
    ap.add_argument("--index", default=None, help="Schema index JSON file to start with")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO)
        os.environ["EQLCOMPLETE_VERBOSE"] = "1"

    if args.index:
        set_index(load_index(args.index))

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.reset()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
