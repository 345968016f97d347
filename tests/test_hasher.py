"""Tests for key derivation."""

import pytest

from yaus.hasher import Base62Hasher, MD5Hasher, create_hasher


class TestMD5Hasher:
    """Test MD5 hasher."""

    def test_known_digest(self):
        assert MD5Hasher().hash("test-text") == "cf0feea200efdea7d8580c7d4ef57ced"

    def test_deterministic(self):
        hasher = MD5Hasher()
        url = "https://example.com/test"

        assert hasher.hash(url) == hasher.hash(url)
        assert MD5Hasher().hash(url) == hasher.hash(url)

    def test_empty_string(self):
        """Empty input still yields a key."""
        assert MD5Hasher().hash("") == "d41d8cd98f00b204e9800998ecf8427e"

    def test_distinct_inputs(self):
        hasher = MD5Hasher()
        assert hasher.hash("https://a.example") != hasher.hash("https://b.example")

    def test_lone_surrogate(self):
        """Strings with no UTF-8 form still yield a key."""
        key = MD5Hasher().hash("http://x/\ud800")

        assert len(key) == 32
        assert key != MD5Hasher().hash("http://x/")


class TestBase62Hasher:
    """Test base62 hasher."""

    def test_length_and_charset(self):
        hasher = Base62Hasher(length=8)

        key = hasher.hash("https://example.com/test")

        assert len(key) == 8
        assert all(c in Base62Hasher.BASE62_CHARS for c in key)

    def test_deterministic(self):
        url = "https://example.com/test"
        assert Base62Hasher().hash(url) == Base62Hasher().hash(url)

    def test_unicode_and_empty(self):
        hasher = Base62Hasher()
        assert len(hasher.hash("")) == 6
        assert len(hasher.hash("https://例え.jp/パス")) == 6

    def test_lone_surrogate(self):
        assert len(Base62Hasher().hash("http://x/\ud800")) == 6

    def test_base62_encoding(self):
        hasher = Base62Hasher()
        assert hasher._int_to_base62(0) == "a"
        assert hasher._int_to_base62(61) == "9"
        assert hasher._int_to_base62(62) == "ba"

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            Base62Hasher(length=0)


class TestCreateHasher:
    """Test hasher factory."""

    def test_md5(self):
        assert isinstance(create_hasher("md5"), MD5Hasher)

    def test_base62(self):
        hasher = create_hasher("BASE62", length=10)
        assert isinstance(hasher, Base62Hasher)
        assert hasher.length == 10

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown hasher"):
            create_hasher("sha1")
