"""Tests for labreport/translations.py - Bangla labels, digits and number words."""

from datetime import datetime

import pytest

from labreport.translations import (
    format_bangla_date,
    format_number,
    format_value,
    number_to_bangla_words,
    to_bangla_number,
    translate_analysis_type,
    translate_test_element,
    translate_unit,
)


class TestTranslate:
    def test_known_labels(self):
        assert translate_test_element("Nitrogen") == "নাইট্রোজেন"
        assert translate_unit("mg/L") == "মিলিগ্রাম/লিটার"
        assert translate_analysis_type("ROUTINE") == "রুটিন"

    def test_unknown_label_returned_unchanged(self):
        assert translate_test_element("Selenium") == "Selenium"

    def test_bangla_label_returned_unchanged(self):
        assert translate_test_element("জিঙ্ক") == "জিঙ্ক"

    def test_empty(self):
        assert translate_unit("") == ""
        assert translate_unit(None) == ""


class TestNumbers:
    def test_digits(self):
        assert to_bangla_number(2024) == "২০২৪"
        assert to_bangla_number("S-12") == "S-১২"

    def test_format_value(self):
        assert format_value(6.5) == "৬.৫০"
        assert format_value(0.0) == "০.০০"
        assert format_value(None) == "-"

    def test_format_number(self):
        assert format_number(1.5) == "১.৫"
        assert format_number(250.0) == "২৫০"
        assert format_number(None) == "-"

    def test_format_date(self):
        assert format_bangla_date(datetime(2024, 3, 5)) == "৫/৩/২০২৪"
        assert format_bangla_date(None) == "-"


class TestNumberWords:
    @pytest.mark.parametrize("num,words", [
        (0, "শূন্য"),
        (1, "এক"),
        (3, "তিন"),
        (20, "বিশ"),
        (21, "বিশ এক"),
        (40, "চল্লিশ"),
        (100, "একশত"),
        (250, "দুইশত পঞ্চাশ"),
        (1000, "এক হাজার"),
        (1250, "এক হাজার দুইশত পঞ্চাশ"),
        (25000, "বিশ পাঁচ হাজার"),
        (100000, "এক লক্ষ"),
        (10000000, "এক কোটি"),
    ])
    def test_words(self, num, words):
        assert number_to_bangla_words(num) == words

    def test_fraction_truncated(self):
        assert number_to_bangla_words(1250.75) == number_to_bangla_words(1250)
