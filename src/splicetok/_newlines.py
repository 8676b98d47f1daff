"""Newline normalisation with original-width tracking."""


def ensure_lf(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalise_newlines(text: str) -> tuple[str, list[int]]:
    """
    Normalise line endings like ``ensure_lf`` and record original widths.

    The second element holds, for every character of the normalised text,
    how many characters of ``text`` it replaced (2 for a collapsed ``\\r\\n``,
    otherwise 1).
    """
    out: list[str] = []
    widths: list[int] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == "\r":
            width = 2 if i + 1 < n and text[i + 1] == "\n" else 1
            out.append("\n")
            widths.append(width)
            i += width
        else:
            out.append(c)
            widths.append(1)
            i += 1
    return "".join(out), widths
