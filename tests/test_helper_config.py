import pytest


def test_string_value(helper_config, monkeypatch):
    monkeypatch.setenv("STORE_ENGINE", "  sqlite ")
    assert helper_config.get_string_val("store_engine") == "sqlite"


def test_missing_value_uses_default_or_raises(helper_config, monkeypatch):
    monkeypatch.delenv("BMLQUERY_UNSET", raising=False)
    assert helper_config.get_string_val("BMLQUERY_UNSET", default="x") == "x"
    assert helper_config.get_number_val("BMLQUERY_UNSET", default=8080) == 8080
    assert helper_config.get_bool_val("BMLQUERY_UNSET", default=False) is False
    assert helper_config.get_list_val("BMLQUERY_UNSET", default=[]) == []
    with pytest.raises(ValueError, match="BMLQUERY_UNSET"):
        helper_config.get_string_val("BMLQUERY_UNSET")


def test_empty_value_counts_as_unset(helper_config, monkeypatch):
    monkeypatch.setenv("BMLQUERY_EMPTY", "")
    with pytest.raises(ValueError):
        helper_config.get_number_val("BMLQUERY_EMPTY")


def test_number_value(helper_config, monkeypatch):
    monkeypatch.setenv("API_SERVER_PORT", "9090")
    monkeypatch.setenv("STORE_TIMEOUT", "2.5")
    assert helper_config.get_number_val("API_SERVER_PORT") == 9090
    assert helper_config.get_number_val("STORE_TIMEOUT") == 2.5
    monkeypatch.setenv("API_SERVER_PORT", "eighty")
    with pytest.raises(ValueError, match="not a valid number"):
        helper_config.get_number_val("API_SERVER_PORT")


@pytest.mark.parametrize("raw, expected", [("true", True), ("YES", True), ("1", True), ("false", False), ("no", False)])
def test_bool_value(helper_config, monkeypatch, raw, expected):
    monkeypatch.setenv("STORE_SQLITE_ECHO", raw)
    assert helper_config.get_bool_val("STORE_SQLITE_ECHO") is expected


def test_list_value(helper_config, monkeypatch):
    monkeypatch.setenv("BMLQUERY_LIST", "[1, 2,,3]")
    assert helper_config.get_list_val("BMLQUERY_LIST", element_type=int) == [1, 2, 3]
    monkeypatch.setenv("BMLQUERY_LIST", "1,2")
    with pytest.raises(ValueError, match="format"):
        helper_config.get_list_val("BMLQUERY_LIST")
    monkeypatch.setenv("BMLQUERY_LIST", "[a,b]")
    with pytest.raises(ValueError, match="invalid elements"):
        helper_config.get_list_val("BMLQUERY_LIST", element_type=int)
