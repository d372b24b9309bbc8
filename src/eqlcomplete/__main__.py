from __future__ import annotations
import argparse, json, logging, os, sys

from .engine import Engine
from .loader import load_index, load_token


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="EQL completion CLI (one token, one answer)")
    p.add_argument("--index", required=True, help="Schema index JSON file")
    p.add_argument("--token", required=True, help="Token JSON file (text, offsets, state chain)")
    p.add_argument("--fragment", default=None, help="Typed text before the cursor (default: whole token)")
    p.add_argument("--cursor", type=int, default=None, help="Cursor offset (default: end of fragment)")
    p.add_argument("-k", type=int, default=None, help="Top-K results")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--verbose", action="store_true")
    args = p.parse_args(argv)
    if args.k is not None and args.k < 1:
        p.error("-k must be a positive integer")

    if args.verbose:
        logging.basicConfig(level=logging.INFO)
        os.environ["EQLCOMPLETE_VERBOSE"] = "1"

    try:
        index = load_index(args.index)
        token = load_token(args.token)
    except (OSError, ValueError) as e:
        p.error(str(e))

    fragment = token.text if args.fragment is None else args.fragment
    result = Engine(top_k=args.k).complete(index, token, fragment, cursor=args.cursor)

    if args.json:
        print(json.dumps(result.to_dict() if result else None, ensure_ascii=False, indent=2))
        return 0
    if result is None:
        print("(no completions)")
        return 0
    print(f"replace [{result.replace_from}, {result.replace_to})")
    for i, word in enumerate(result.candidates, 1):
        print(f"{i:<3} {word}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
