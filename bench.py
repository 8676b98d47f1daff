"""Benchmark delegating tokenization on a synthetic HTML template document.

Outputs a row with the columns:
  Document Size | Insertions | Tokens | Throughput
"""

import argparse
import time

import splicetok as stok

ROW = (
    '<tr class="row"><td>{{ item.name }}</td>'
    "<td>{% if item.price > 10 %}expensive{% else %}cheap{% endif %}</td></tr>\n"
)


def build_document(rows: int) -> str:
    """Return an HTML table with ``rows`` templated rows."""
    return "<!DOCTYPE html>\n<table>\n" + ROW * rows + "</table>\n"


def bench(lexer: stok.Lexer, text: str, repeats: int) -> tuple[int, float]:
    """Return (token count, best seconds per run) over ``repeats`` runs."""
    best = float("inf")
    n_tokens = 0
    for _ in range(repeats):
        start = time.perf_counter()
        n_tokens = len(stok.tokenize(lexer, None, text))
        best = min(best, time.perf_counter() - start)
    return n_tokens, best


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--rows", type=int, default=2_000)
    parser.add_argument("--repeats", type=int, default=5)
    args = parser.parse_args()

    text = build_document(args.rows)
    lexer = stok.get_lexer("html+template")
    _, insertions = stok.extract_insertions(
        stok.tokenize(stok.coalesce(lexer.language), None, text)
    )
    n_tokens, seconds = bench(lexer, text, args.repeats)

    print(
        f"| {len(text):,} chars | {len(insertions):,} | {n_tokens:,} "
        f"| {len(text) / seconds / 1_000_000:.2f} M chars/s |"
    )


if __name__ == "__main__":
    main()
