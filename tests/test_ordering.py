"""Tests for natural ordering of media names."""

import random

from mediagallery.services.gallery.ordering import natural_key, sort_names


class TestNaturalOrder:
    """Numeric, case-insensitive ordering."""

    def test_numbers_compare_by_value(self) -> None:
        """img2 sorts before img10."""
        assert sort_names(["img10.jpg", "img2.jpg", "img1.jpg"]) == [
            "img1.jpg",
            "img2.jpg",
            "img10.jpg",
        ]

    def test_case_insensitive(self) -> None:
        """Letters compare without regard to case."""
        assert sort_names(["banana.jpg", "Cherry.jpg", "apple.jpg"]) == [
            "apple.jpg",
            "banana.jpg",
            "Cherry.jpg",
        ]

    def test_punctuation_before_digits(self) -> None:
        """Apple.jpg precedes apple2.jpg."""
        assert sort_names(["apple2.jpg", "Banana.jpg", "Apple.jpg"]) == [
            "Apple.jpg",
            "apple2.jpg",
            "Banana.jpg",
        ]

    def test_total_order_on_case_only_differences(self) -> None:
        """Names differing only by case still get a fixed order."""
        names = ["a.jpg", "A.jpg", "b.jpg", "B.jpg"]
        expected = sort_names(names)
        for _ in range(5):
            shuffled = names[:]
            random.shuffle(shuffled)
            assert sort_names(shuffled) == expected
        assert natural_key("a.jpg") != natural_key("A.jpg")

    def test_non_decimal_digits_sort_as_punctuation(self) -> None:
        """Superscript digits are not parsed as numbers."""
        assert sort_names(["x1.jpg", "x².jpg"]) == ["x².jpg", "x1.jpg"]
