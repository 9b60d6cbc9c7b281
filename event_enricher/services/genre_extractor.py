"""Text mining for genre tags and artist names.

Pure functions, no I/O apart from loading the :class:`Vocabulary` file once
at startup:

1. **extract_genres_from_text** -- greedy, non-overlapping n-gram matching
   (up to four tokens) of free text against the vocabulary of known genres.
   "jazz fusion" wins over "jazz" when both are known.

2. **extract_artists_from_title** -- splits a noisy event title into artist
   candidates on common billing separators (",", "feat.", "vs", "presents",
   bracketed annotations, ...).  The heuristic is approximate: titles are
   free text and some will be mis-split.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator

import structlog

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_GENRES_FILE = Path(__file__).resolve().parent.parent / "data" / "genres.txt"

_MAX_NGRAM_TOKENS = 4

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]+")

# Multi-word variants come before their prefixes so the whole phrase is
# replaced, e.g. "live at" before "live".  Separators are not anchored to word
# boundaries and also match inside names ("Sandra" -> "s", "ra").
_ARTIST_SEPARATOR_RE = re.compile(
    r"(?:[,»:!&]"
    r"|feat\.|ft\.|vs\."
    r"|performed live by|performed live|performed by|performed"
    r"|live performance|live recording|live version|live vocals"
    r"|live from|live by|live at|live in|live on|live"
    r"|and|feat|ft|with|vs|versus|presenting|presents"
    r"|\([^)]+\)|\[[^\]]+\]|\{[^}]+\}|<[^>]+>)",
    re.IGNORECASE,
)


class Vocabulary:
    """Immutable set of known genre labels.

    Labels are stored lowercased with ``-`` replaced by a space, the same
    normalisation applied to the text being mined.
    """

    def __init__(self, labels: Iterable[str] = ()) -> None:
        self._labels = frozenset(
            normalized for normalized in (self._normalize(label) for label in labels) if normalized
        )

    @staticmethod
    def _normalize(label: str) -> str:
        return " ".join(label.lower().replace("-", " ").split())

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> Vocabulary:
        """Load one label per line from *path* (the bundled list by default).

        A missing or unreadable file yields an empty vocabulary; text
        extraction then finds nothing and callers fall back to artist lookup.
        """
        source = Path(path) if path else _DEFAULT_GENRES_FILE
        try:
            lines = source.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            logger.warning("genre_vocabulary_unavailable", path=str(source), error=str(exc))
            return cls()
        vocabulary = cls(lines)
        logger.info("genre_vocabulary_loaded", path=str(source), labels=len(vocabulary))
        return vocabulary

    def __contains__(self, label: object) -> bool:
        return label in self._labels

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)


def extract_genres_from_text(text: str, vocabulary: Vocabulary) -> set[str]:
    """Return every vocabulary genre mentioned in *text*.

    The scan runs left to right.  At each position the candidate grows from
    one to four tokens; misses before the first hit keep growing it (so
    "tech house" is found even though "tech" is unknown), the first miss
    after a hit stops it.  The longest hit is kept and the scan resumes
    after it, so matches never overlap.

    Args:
        text: Free text such as tags or an event description.
        vocabulary: Known genre labels.

    Returns:
        The matched labels; always a subset of *vocabulary*.
    """
    normalized = _NON_ALNUM_RE.sub("", text.lower().replace("-", " "))
    tokens = normalized.split()

    genres: set[str] = set()
    i = 0
    while i < len(tokens):
        best = ""
        best_end = i
        for end in range(i + 1, min(i + _MAX_NGRAM_TOKENS, len(tokens)) + 1):
            candidate = " ".join(tokens[i:end])
            if candidate in vocabulary:
                best = candidate
                best_end = end
            elif best:
                break
        if best:
            genres.add(best)
            i = best_end
        else:
            i += 1
    return genres


def extract_artists_from_title(title: str) -> list[str]:
    """Split an event title into lowercased artist names, in billing order.

    Example:
        "HEAVYSAURUS (ger)" -> ["heavysaurus"]
        "Carl Cox feat. Nina Kraviz" -> ["carl cox", "nina kraviz"]
    """
    replaced = _ARTIST_SEPARATOR_RE.sub(",", title).lower()
    return [part.strip() for part in replaced.split(",") if part.strip()]
