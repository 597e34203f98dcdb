from clinicq.config import API_BASE_URL_ENV, resolve_base_url
from clinicq.endpoints import DEFAULT_BASE_URL


def test_explicit_value_wins():
    env = {API_BASE_URL_ENV: "http://from-env:1"}
    assert resolve_base_url("http://cli:2/", env) == "http://cli:2"


def test_environment_used_when_no_flag():
    assert resolve_base_url(None, {API_BASE_URL_ENV: " http://from-env:1/ "}) == "http://from-env:1"


def test_default_origin():
    assert resolve_base_url(None, {}) == DEFAULT_BASE_URL
    assert resolve_base_url("  ", {API_BASE_URL_ENV: ""}) == DEFAULT_BASE_URL
