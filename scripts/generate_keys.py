import logging
from pathlib import Path
from typing import List, Optional, Union
from keyforge.config import KeyStoreConfig
from keyforge.store import KeyStore


def generate_rsa_keys(
    key_size: int = 2048,
    name: str = "id_rsa",
    key_dir: Union[str, Path] = "keys",
    config_path: Optional[Union[str, Path]] = None,
) -> List[Path]:
    """
    Generate RSA key pair and save it under `key_dir`.

    Args:
        key_size: Size of the RSA key in bits (default: 2048)
        name: Base name of the artifacts, suffixed per the naming scheme
        key_dir: Directory the artifacts are written to
        config_path: Optional JSON config; `key_dir` wins over its key_dir
    """
    config = KeyStoreConfig.from_file(config_path) if config_path else KeyStoreConfig()
    config.key_dir = str(key_dir)
    store = KeyStore.from_config(config)

    with store.generate(key_size) as pair:
        paths = store.save(pair, name)

    for path in paths:
        print(f"Key saved to: {path}")
    return paths


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    generate_rsa_keys()
