from __future__ import annotations

import os
from pathlib import Path
from typing import MutableMapping

_ENV_FILES = (".env", ".env.local")


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines; comments, blank lines and ``export`` are allowed."""
    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        line = line.removeprefix("export ").lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value
    return values


def load_env(
    directory: Path | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> list[Path]:
    """Populate ``environ`` from ``.env`` and then ``.env.local`` in ``directory``.

    Variables already present in the process environment always win; within
    the files, ``.env.local`` overrides ``.env``. Returns the files that were read.
    """
    target = os.environ if environ is None else environ
    root = directory or Path(__file__).resolve().parents[2]
    inherited = set(target)

    loaded: list[Path] = []
    for name in _ENV_FILES:
        path = root / name
        if not path.is_file():
            continue
        for key, value in parse_env_file(path).items():
            if key not in inherited:
                target[key] = value
        loaded.append(path)
    return loaded


__all__ = ["load_env", "parse_env_file"]
