from __future__ import annotations

import hashlib
from pathlib import Path
from urllib.parse import quote

# Most filesystems cap a name at 255 bytes; leave room for ".json.tmp".
MAX_STEM_BYTES = 200
LONG_KEY_PREFIX_CHARS = 100


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def plans_dir(data_dir: Path) -> Path:
    return ensure_dir(data_dir / "plans")


def key_filename(key: str) -> str:
    # Keys are caller-supplied ids; percent-encode so every key maps to one flat file name.
    safe = quote(key, safe="")
    if not safe:
        safe = "%"
    elif safe in (".", ".."):
        safe = "%2E" * len(safe)
    elif len(safe.encode("ascii")) > MAX_STEM_BYTES:
        # "%~" never appears in quote() output, so digest names cannot collide with short keys.
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        safe = f"{safe[:LONG_KEY_PREFIX_CHARS]}%~{digest}"
    return f"{safe}.json"
