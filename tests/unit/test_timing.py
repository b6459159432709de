"""Unit tests for recipe_extract.timing module."""

import pytest

from recipe_extract.timing import extract_servings, extract_times, parse_duration_minutes


class TestParseDuration:
    """Tests for parse_duration_minutes."""

    @pytest.mark.parametrize(
        ("text", "minutes"),
        [
            ("25 minutes", 25),
            ("1 hour 30 minutes", 90),
            ("1 1/2 hours", 90),
            ("half an hour", 30),
            ("two hours", 120),
            ("bake for 20-25 mins", 20),
            ("marinate overnight", 1440),
            ("no time given", 0),
        ],
    )
    def test_durations(self, text: str, minutes: int) -> None:
        """Duration phrases are summed in minutes."""
        assert parse_duration_minutes(text) == minutes


class TestExtractTimes:
    """Tests for extract_times."""

    def test_labeled_times(self, english_recipe_text: str) -> None:
        """Labeled prep and cook times win."""
        assert extract_times(english_recipe_text) == (10, 25)

    def test_total_minus_prep(self) -> None:
        """A total time fills the cooking time left after preparation."""
        assert extract_times("Prep: 15 min\nTotal time: 1 hour") == (15, 45)

    def test_label_stops_at_next_label(self) -> None:
        """Two labels on one line are read separately."""
        assert extract_times("Prep time 10 min Cook time 40 min") == (10, 40)

    def test_inferred_from_instruction_phases(self) -> None:
        """Unlabeled times are summed per instruction phase."""
        instructions = [
            "Marinate the lamb for 30 minutes.",
            "Roast for 1 hour.",
            "Rest for 10 minutes before carving.",
        ]

        assert extract_times("Roast lamb", instructions) == (30, 60)

    def test_labels_beat_inference(self) -> None:
        """Inference only fills values the labels left unknown."""
        assert extract_times("Cook time: 20 minutes", ["Chop for 5 minutes.", "Fry 2 hours."]) == (
            5,
            20,
        )

    def test_unknown(self) -> None:
        """No time anywhere gives zeros."""
        assert extract_times("Toast\nBread\nButter") == (0, 0)


class TestExtractServings:
    """Tests for extract_servings."""

    @pytest.mark.parametrize(
        ("text", "servings"),
        [
            ("Serves 4", 4),
            ("Serves 4-6", 4),
            ("Servings: 8", 8),
            ("Makes 12 muffins", 12),
            ("Enough for 2 people", 2),
            ("6 portions", 6),
            ("No yield here", 0),
        ],
    )
    def test_servings(self, text: str, servings: int) -> None:
        """Serving phrases give their first number."""
        assert extract_servings(text) == servings

    def test_earliest_phrase_wins(self) -> None:
        """The first phrase in the text decides."""
        assert extract_servings("Makes 16 cookies\nServes 8") == 16
