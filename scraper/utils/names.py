"""Fighter name helpers used for lookups and duplicate detection."""

from __future__ import annotations

import unicodedata
from typing import Final

# Common short first names and the longer forms sources tend to use instead.
FIRST_NAME_VARIANTS: Final[dict[str, tuple[str, ...]]] = {
    "Jon": ("Jonathan", "John"),
    "Alex": ("Alexander", "Aleksandar"),
    "Chris": ("Christopher", "Christian"),
    "Mike": ("Michael",),
    "Dan": ("Daniel",),
    "Matt": ("Matthew",),
    "Tony": ("Anthony",),
    "Nick": ("Nicholas",),
    "Joe": ("Joseph",),
}


def normalize_name(name: str) -> str:
    """Normalize fighter name for comparison.

    Strips accents/diacritics and normalizes to ASCII, e.g.
    "Jiří Procházka" -> "jiri prochazka".
    """
    transliterations = {
        "ł": "l", "Ł": "l",
        "ø": "o", "Ø": "o",
        "đ": "d", "Đ": "d",
        "ß": "ss",
    }
    for original, replacement in transliterations.items():
        name = name.replace(original, replacement)

    nfd = unicodedata.normalize("NFD", name)
    ascii_name = "".join(char for char in nfd if unicodedata.category(char) != "Mn")
    return " ".join(ascii_name.lower().strip().split())


def generate_name_variations(full_name: str) -> list[str]:
    """Return lookup candidates for ``full_name`` in the order they should be tried.

    The exact name always comes first, then the bare last name, then the name
    with each known first-name variant substituted. Duplicates are dropped.
    """
    name = " ".join(full_name.split())
    variations = [name]

    parts = name.split(" ")
    if len(parts) >= 2:
        variations.append(parts[-1])
        for alternative in FIRST_NAME_VARIANTS.get(parts[0], ()):
            variations.append(" ".join([alternative, *parts[1:]]))

    return list(dict.fromkeys(variation for variation in variations if variation))
