import json

import pytest

from keyforge.config import KeyStoreConfig
from keyforge.errors import ConfigError
from keyforge.naming import NamingScheme


def test_defaults():
    config = KeyStoreConfig()
    assert config.key_dir is None
    assert config.naming_scheme is NamingScheme.SEPARATE_SUFFIXED
    assert config.default_bits == 2048
    assert config.public_exponent == 65537
    assert config.private_format == "pkcs1"


def test_from_dict_overlays_defaults():
    config = KeyStoreConfig.from_dict({"naming": "explicit_paths", "default_bits": 3072})
    assert config.naming_scheme is NamingScheme.EXPLICIT_PATHS
    assert config.default_bits == 3072
    assert config.private_format == "pkcs1"


@pytest.mark.parametrize(
    "data",
    [
        {"colour": "blue"},
        {"naming": "by_date"},
        {"private_format": "jwk"},
        {"default_bits": 0},
        {"default_bits": "2048"},
        {"public_exponent": True},
    ],
)
def test_invalid_values(data):
    with pytest.raises(ConfigError):
        KeyStoreConfig.from_dict(data)


def test_from_file(tmp_path):
    path = tmp_path / "keystore.json"
    path.write_text(json.dumps({"key_dir": "secrets", "private_format": "pkcs8"}))
    config = KeyStoreConfig.from_file(path)
    assert config.key_dir == "secrets"
    assert config.private_format == "pkcs8"


def test_from_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        KeyStoreConfig.from_file(tmp_path / "missing.json")


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_from_malformed_file(tmp_path, content):
    path = tmp_path / "keystore.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        KeyStoreConfig.from_file(path)
