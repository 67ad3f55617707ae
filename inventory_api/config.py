from __future__ import annotations

# inventory_api/config.py
import os
from typing import Any

import yaml

# 配置解析顺序：
# 1) 环境变量 INVENTORY_*（最高优先级）
# 2) config.yaml（测试环境下优先 test_db_path）
# 3) 默认值
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_DEFAULT_DB = os.path.join(_PROJECT_ROOT, "inventory.db")

DEFAULTS: dict[str, Any] = {
    "log_level": "INFO",
    "host": "0.0.0.0",
    "port": 8000,
    "shutdown_timeout": 30,
}

_ENV_KEYS = {
    "log_level": "INVENTORY_LOG_LEVEL",
    "host": "INVENTORY_HOST",
    "port": "INVENTORY_PORT",
}


def config_path() -> str:
    return os.environ.get("INVENTORY_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def read_config_yaml(path: str | None = None) -> dict:
    cfg_path = path or config_path()
    if not os.path.exists(cfg_path):
        return {}
    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config file {cfg_path} must contain a mapping")
    return cfg


def is_test_env() -> bool:
    return (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)


def get_db_path() -> str:
    env_path = os.environ.get("INVENTORY_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")

    if env_path:
        path = env_path
    elif is_test_env() and isinstance(cfg_test, str) and cfg_test.strip():
        path = cfg_test.strip()
    elif isinstance(cfg_db, str) and cfg_db.strip():
        path = cfg_db.strip()
    else:
        path = _DEFAULT_DB

    # 确保目录存在
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def get_settings() -> dict[str, Any]:
    """Server and logging settings: env over config.yaml over defaults."""
    cfg = read_config_yaml()
    out = dict(DEFAULTS)
    for k in DEFAULTS:
        if cfg.get(k) not in (None, ""):
            out[k] = cfg[k]
        env_key = _ENV_KEYS.get(k)
        if env_key and os.environ.get(env_key):
            out[k] = os.environ[env_key]

    out["log_level"] = str(out["log_level"]).upper()
    out["port"] = int(out["port"])
    out["shutdown_timeout"] = int(out["shutdown_timeout"])
    out["db_path"] = get_db_path()
    return out
