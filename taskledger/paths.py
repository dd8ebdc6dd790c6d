from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "TASKLEDGER_HOME"
APP_ENV_DB = "TASKLEDGER_DB"
APP_ENV_CONFIG = "TASKLEDGER_CONFIG"


def project_root() -> Path:
    """
    Repository root directory.
    Contains taskledger/, tests/ and pyproject.toml.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for TaskLedger.
    Override with TASKLEDGER_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".taskledger").resolve()


def config_dir() -> Path:
    d = app_home() / "config"
    d.mkdir(parents=True, exist_ok=True)
    return d


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    Canonical DB path for TaskLedger.

    Resolution order:
    1. TASKLEDGER_DB env var (explicit override)
    2. ~/.taskledger/data/taskledger.db (default)
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "taskledger.db"


def config_file_path() -> Path:
    """
    YAML configuration file path.

    Resolution order:
    1. TASKLEDGER_CONFIG env var
    2. ~/.taskledger/config/taskledger.yaml
    """
    if os.environ.get(APP_ENV_CONFIG):
        return Path(os.environ[APP_ENV_CONFIG]).expanduser().resolve()
    return config_dir() / "taskledger.yaml"
