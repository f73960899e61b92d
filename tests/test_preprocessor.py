import math

from core.preprocessor import CellPreprocessor, DescriptionPreprocessor, tokenize


class TestTokenize:
    def test_lowercases_and_splits(self):
        assert tokenize("Login User") == ["login", "user"]

    def test_punctuation_is_removed_not_split(self):
        assert tokenize("Don't stop, e-mail me!") == ["dont", "stop", "email", "me"]

    def test_keeps_digits_and_underscores(self):
        assert tokenize("  order_id 12\tshipped \n") == ["order_id", "12", "shipped"]

    def test_repeated_terms_are_kept(self):
        assert tokenize("red red blue") == ["red", "red", "blue"]

    def test_empty_and_punctuation_only(self):
        assert tokenize("") == []
        assert tokenize("!!! ... ???") == []

    def test_null_cell_yields_no_terms(self):
        assert tokenize(None) == []
        assert tokenize(math.nan) == []

    def test_unicode_letters_survive(self):
        assert tokenize("Café crème") == ["café", "crème"]


class TestDescriptionPreprocessor:
    def test_process_keeps_whitespace(self):
        assert DescriptionPreprocessor().process("A, B.") == "a b"


class TestCellPreprocessor:
    def test_strips_strings(self):
        assert CellPreprocessor().process("  story 1 ") == "story 1"

    def test_whole_floats_lose_decimal(self):
        assert CellPreprocessor().process(12.0) == "12"
        assert CellPreprocessor().process(12.5) == "12.5"

    def test_nulls_become_empty(self):
        assert CellPreprocessor().process(None) == ""
        assert CellPreprocessor().process(math.nan) == ""

    def test_strip_can_be_disabled(self):
        assert CellPreprocessor(strip=False).process(" x ") == " x "
