import argparse
import logging
from pathlib import Path

import splicetok as stok


def main() -> None:
    """Tokenize a file with a built-in lexer and print the tokens."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("path", type=Path)
    parser.add_argument(
        "--lexer",
        help="lexer name; guessed from the filename, then the content, when omitted",
    )
    parser.add_argument("--ensure-lf", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    text = args.path.read_text(encoding="utf-8")
    registry = stok.default_registry()
    if args.lexer:
        lexer = registry.get(args.lexer)
    else:
        lexer = registry.match(args.path.name) or registry.analyse(text) or registry.get("text")
    print(f"lexer: {lexer.config.name}")

    options = stok.TokenizeOptions(ensure_lf=args.ensure_lf)
    for tok in stok.tokenize(lexer, options, text):
        print(tok)


if __name__ == "__main__":
    main()
