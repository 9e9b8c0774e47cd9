"""Root conftest: prepares the environment before chat_threads.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

_TEST_DEFAULTS = {
    "POSTGRES_USER": "chat",
    "POSTGRES_PASSWORD": "chat",
    "POSTGRES_DB": "chat_threads_test",
    "JWT_SECRET": "test-secret-key-for-chat-threads-0123456789",
}


def _load_env_file(path: Path) -> None:
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    _load_env_file(_env_test)

for _key, _value in _TEST_DEFAULTS.items():
    os.environ.setdefault(_key, _value)
