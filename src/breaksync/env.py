"""Environment handling for job configuration: .env loading and config path lookup."""
from __future__ import annotations

import os
from pathlib import Path

CONFIG_PATH_VARIABLE = "BREAKSYNC_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path("config/breaksync.yaml")


def load_env(*args, **kwargs):
    """Proxy to python-dotenv that fails with an install hint when it is missing."""
    try:
        from dotenv import load_dotenv as _load_dotenv
    except ModuleNotFoundError as exc:  # pragma: no cover - dependency missing
        raise RuntimeError(
            "python-dotenv is not installed. Install the project with "
            "`pip install -e '.[dev]'` before running jobs."
        ) from exc
    return _load_dotenv(*args, **kwargs)


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Pick the job file: explicit ``path``, then $BREAKSYNC_CONFIG_PATH, then the default.

    The variable may come from the process environment or from a ``.env``
    file in the working directory; the process environment wins.
    """
    if path:
        return Path(path)
    env_file = Path(".env")
    if env_file.exists():
        load_env(dotenv_path=env_file)
    configured = os.getenv(CONFIG_PATH_VARIABLE, "").strip()
    return Path(configured) if configured else DEFAULT_CONFIG_PATH


__all__ = ["CONFIG_PATH_VARIABLE", "DEFAULT_CONFIG_PATH", "load_env", "resolve_config_path"]
