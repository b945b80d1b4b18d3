from lanchat.constants import _get_env_int, _get_env_str


def test_get_env_int_valid_positive_integer(monkeypatch):
    """Test parsing a valid positive integer from environment variable."""
    monkeypatch.setenv("TEST_VAR", "123")
    assert _get_env_int("TEST_VAR", 999) == 123


def test_get_env_int_unset(monkeypatch):
    """Test unset variable falls back to default."""
    monkeypatch.delenv("TEST_VAR", raising=False)
    assert _get_env_int("TEST_VAR", 999) == 999


def test_get_env_int_invalid_string(monkeypatch, capsys):
    """Test handling of invalid string value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "abc")
    assert _get_env_int("TEST_VAR", 999) == 999
    assert "Invalid integer value for TEST_VAR" in capsys.readouterr().out


def test_get_env_int_float_string(monkeypatch):
    """Test handling of float string value in environment variable."""
    monkeypatch.setenv("TEST_VAR", "3.14")
    assert _get_env_int("TEST_VAR", 999) == 999


def test_get_env_str_strips(monkeypatch):
    monkeypatch.setenv("TEST_HOST", "  127.0.0.1 ")
    assert _get_env_str("TEST_HOST", "0.0.0.0") == "127.0.0.1"


def test_get_env_str_blank_uses_default(monkeypatch):
    monkeypatch.setenv("TEST_HOST", "   ")
    assert _get_env_str("TEST_HOST", "0.0.0.0") == "0.0.0.0"
