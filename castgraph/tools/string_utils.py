import hashlib
from pathlib import Path


def sha256_hex(text) -> str:
    """Hex SHA-256 digest of a string, used as a cache file name."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def write_text_file(text, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
