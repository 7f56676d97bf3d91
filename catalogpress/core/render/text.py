from collections.abc import Callable

_POLISH_TRANSLITERATION = str.maketrans(
    {
        "ą": "a",
        "ć": "c",
        "ę": "e",
        "ł": "l",
        "ń": "n",
        "ó": "o",
        "ś": "s",
        "ź": "z",
        "ż": "z",
        "Ą": "A",
        "Ć": "C",
        "Ę": "E",
        "Ł": "L",
        "Ń": "N",
        "Ó": "O",
        "Ś": "S",
        "Ź": "Z",
        "Ż": "Z",
    }
)


def transliterate(text: str | None) -> str:
    if not text:
        return ""
    return str(text).translate(_POLISH_TRANSLITERATION)


def pdf_text(text: str | None) -> str:
    """Text safe for the built-in Latin-1 Helvetica font."""
    plain = transliterate(text)
    return plain.encode("latin-1", errors="replace").decode("latin-1")


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy word wrap; a single word wider than ``max_width`` keeps its own line."""
    lines: list[str] = []
    current = ""
    for word in str(text or "").split():
        candidate = f"{current} {word}" if current else word
        if measure(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = word
    if current:
        lines.append(current)
    return lines


__all__ = ["pdf_text", "transliterate", "wrap_text"]
