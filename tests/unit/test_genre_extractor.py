"""Unit tests for genre text mining, artist splitting and the vocabulary."""

from __future__ import annotations

from pathlib import Path

import pytest

from event_enricher.services.genre_extractor import (
    Vocabulary,
    extract_artists_from_title,
    extract_genres_from_text,
)


# ======================================================================
# extract_genres_from_text
# ======================================================================


class TestExtractGenresFromText:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            (
                "2025 # Elektro # Resident # Show # Tech House # Techno",
                {"elektro", "tech house", "techno"},
            ),
            ("This band pays jazz fusion", {"jazz fusion"}),
            ("This band pays jazz", {"jazz"}),
            ("This band pays jazz and is cool", {"jazz"}),
            (
                "2025 # Deep House # Disco # Diva Energy # Elektro # Queer Icon "
                "# Resident # Special # Tech House",
                {"deep house", "disco", "elektro", "tech house"},
            ),
        ],
    )
    def test_literal_cases(self, vocabulary: Vocabulary, text: str, expected: set[str]) -> None:
        assert extract_genres_from_text(text, vocabulary) == expected

    def test_empty_text(self, vocabulary: Vocabulary) -> None:
        assert extract_genres_from_text("", vocabulary) == set()

    def test_no_known_genre(self, vocabulary: Vocabulary) -> None:
        assert extract_genres_from_text("open air with friends", vocabulary) == set()

    def test_result_is_subset_of_vocabulary(self, vocabulary: Vocabulary) -> None:
        text = "tech house techno deep house jazz fusion disco polka"
        result = extract_genres_from_text(text, vocabulary)
        assert result <= set(vocabulary)

    def test_longest_match_wins(self, vocabulary: Vocabulary) -> None:
        # "house" alone is known but "deep house" consumes it.
        assert extract_genres_from_text("deep house", vocabulary) == {"deep house"}

    def test_repetition_is_ignored(self, vocabulary: Vocabulary) -> None:
        assert extract_genres_from_text("techno techno TECHNO", vocabulary) == {"techno"}

    def test_hyphens_and_case_are_normalised(self, vocabulary: Vocabulary) -> None:
        assert extract_genres_from_text("Tech-House all night", vocabulary) == {"tech house"}

    def test_punctuation_is_stripped(self, vocabulary: Vocabulary) -> None:
        assert extract_genres_from_text("#techno, #disco!", vocabulary) == {"techno", "disco"}

    def test_empty_vocabulary_finds_nothing(self) -> None:
        assert extract_genres_from_text("techno", Vocabulary()) == set()


# ======================================================================
# extract_artists_from_title
# ======================================================================


class TestExtractArtistsFromTitle:
    def test_bracketed_annotation_removed(self) -> None:
        assert extract_artists_from_title("HEAVYSAURUS (ger)") == ["heavysaurus"]

    def test_festival_lineup(self) -> None:
        title = (
            "Chaos Blast Meating: HOWLS FROM ABOVE, » DOPELORD, » THRONEHAMMER, "
            "» HIDAS, » ACID MAMMOTH, » ENDONOMOS, » TONS"
        )
        artists = extract_artists_from_title(title)

        assert artists == [
            "chaos blast meating",
            "howls from above",
            "dopelord",
            "thronehammer",
            "hidas",
            "acid mammoth",
            "endonomos",
            "tons",
        ]
        for artist in artists:
            assert artist == artist.strip().lower()
            assert "»" not in artist and "," not in artist and ":" not in artist

    def test_feat_and_vs(self) -> None:
        assert extract_artists_from_title("Carl Cox feat. Nina Kraviz vs Jeff Mills") == [
            "carl cox",
            "nina kraviz",
            "jeff mills",
        ]

    def test_presents_and_live_phrases(self) -> None:
        assert extract_artists_from_title("Ostgut presents Ben Klock live at Berghain") == [
            "ostgut",
            "ben klock",
            "berghain",
        ]

    def test_separator_words_inside_names_split_them(self) -> None:
        # Accepted limitation: the separator list is applied as-is.
        assert extract_artists_from_title("Sandra & Oliver") == ["s", "ra", "o", "r"]
        assert extract_artists_from_title("Oliver Huntemann") == ["o", "r huntemann"]

    def test_all_bracket_kinds(self) -> None:
        assert extract_artists_from_title("Alpha [live] Beta {dj set} Gamma <b2b>") == [
            "alpha",
            "beta",
            "gamma",
        ]

    def test_only_separators(self) -> None:
        assert extract_artists_from_title(", » : !") == []


# ======================================================================
# Vocabulary
# ======================================================================


class TestVocabulary:
    def test_labels_are_normalised(self) -> None:
        vocabulary = Vocabulary(["Tech-House", "  Techno  ", ""])
        assert "tech house" in vocabulary
        assert "techno" in vocabulary
        assert len(vocabulary) == 2

    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "genres.txt"
        path.write_text("house\ndeep house\n\n", encoding="utf-8")
        vocabulary = Vocabulary.from_file(path)
        assert set(vocabulary) == {"house", "deep house"}

    def test_missing_file_gives_empty_vocabulary(self, tmp_path: Path) -> None:
        vocabulary = Vocabulary.from_file(tmp_path / "missing.txt")
        assert len(vocabulary) == 0

    def test_bundled_vocabulary_loads(self) -> None:
        vocabulary = Vocabulary.from_file()
        assert "techno" in vocabulary
        assert "tech house" in vocabulary
