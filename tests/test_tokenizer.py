"""Tests for the streaming tokenizer."""

import io
import types

import pytest

from bigvector.engine.tokenizer import tokenize, tokenize_text, is_token_char


class TestTokenize:
    """Test token boundaries and normalization."""

    def test_apostrophe_kept_punctuation_separates(self):
        """Apostrophes stay inside tokens, hyphens and punctuation split."""
        assert list(tokenize_text("Don't stop--now!")) == ["don't", "stop", "now"]

    def test_trailing_run_is_dropped(self):
        """A token still open at end of stream is not emitted."""
        assert list(tokenize_text("hello world")) == ["hello"]
        assert list(tokenize_text("hello world\n")) == ["hello", "world"]

    def test_case_folding_unicode_letters(self):
        assert list(tokenize_text("Café ÜBER straße.")) == ["café", "über", "straße"]

    def test_digits_are_separators(self):
        assert list(tokenize_text("abc123def 42 ")) == ["abc", "def"]

    def test_no_empty_tokens(self):
        tokens = list(tokenize_text("  ,,, -- !!  a  \n\n b. "))
        assert tokens == ["a", "b"]
        assert all(tokens)

    def test_empty_input(self):
        assert list(tokenize_text("")) == []

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 7])
    def test_chunk_boundaries(self, chunk_size):
        """Tokens spanning read chunks are reassembled."""
        stream = io.StringIO("alpha beta gamma.")
        assert list(tokenize(stream, chunk_size=chunk_size)) == ["alpha", "beta", "gamma"]

    def test_is_lazy(self):
        """Tokenizing returns a generator that reads on demand."""
        stream = io.StringIO("one two three ")
        tokens = tokenize(stream, chunk_size=4)
        assert isinstance(tokens, types.GeneratorType)
        assert next(tokens) == "one"
        assert stream.tell() < len("one two three ")


class TestTokenChars:

    def test_token_chars(self):
        assert is_token_char("a")
        assert is_token_char("Ж")
        assert is_token_char("'")
        assert not is_token_char("-")
        assert not is_token_char("1")
        assert not is_token_char("�")
