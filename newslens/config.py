"""Load and validate configuration from YAML with env var substitution."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml

from newslens.cache import ALIAS_TTL_SECONDS, RESULT_TTL_SECONDS

PIPELINE_DEFAULTS: dict[str, Any] = {
    "max_articles": 60,
    "min_relevance": 0.2,
    "alias_sample_size": 100,
    "alias_top_n": 12,
    "sentiment_window": 12,
    "summary_sentences": 2,
    "max_keywords": 8,
    "fetch_timeout_seconds": 30,
}

# Credential key each provider needs before it counts as configured
SOURCE_CREDENTIALS = {
    "newsapi": "api_key",
    "bing": "api_key",
    "google_rss": None,
}


def _load_dotenv(path: str | Path = ".env") -> None:
    """Load a .env file into os.environ (without overwriting existing vars)."""
    env_path = Path(path)
    if not env_path.is_file():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and key not in os.environ:
                os.environ[key] = value


def _resolve_env_vars(value: Any) -> Any:
    """Recursively resolve ${ENV_VAR} patterns in config values."""
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")
        match = pattern.search(value)
        if match:
            # A value that is exactly one placeholder resolves to the raw env value
            if match.group(0) == value:
                return os.environ.get(match.group(1), "")
            return pattern.sub(lambda m: os.environ.get(m.group(1), ""), value)
        return value
    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


def load_config(path: str | Path = "config.yaml") -> dict[str, Any]:
    """Load config from YAML file and resolve environment variables."""
    _load_dotenv()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _resolve_env_vars(raw)


def get_source_config(config: dict, name: str) -> dict:
    return config.get("sources", {}).get(name, {}) or {}


def is_source_configured(config: dict, name: str) -> bool:
    """Enabled, and carrying its credential when one is required."""
    cfg = get_source_config(config, name)
    if not cfg.get("enabled", False) or cfg.get("disabled", False):
        return False
    credential = SOURCE_CREDENTIALS.get(name)
    return not credential or bool(cfg.get(credential))


def get_active_sources(config: dict) -> list[str]:
    """Return names of sources that are enabled and have credentials."""
    sources = config.get("sources", {}) or {}
    return [name for name in sources if is_source_configured(config, name)]


def get_pipeline_settings(config: dict) -> dict[str, Any]:
    """Pipeline tunables merged over defaults."""
    settings = dict(PIPELINE_DEFAULTS)
    settings.update(config.get("pipeline", {}) or {})
    return settings


def get_cache_ttls(config: dict) -> tuple[float, float]:
    """(result TTL, alias TTL) in seconds."""
    cfg = config.get("cache", {}) or {}
    return (
        float(cfg.get("result_ttl_seconds", RESULT_TTL_SECONDS)),
        float(cfg.get("alias_ttl_seconds", ALIAS_TTL_SECONDS)),
    )


def get_lexicon_path(config: dict) -> str | None:
    """Custom lexicon file, or None for the bundled one."""
    return (config.get("lexicon", {}) or {}).get("path") or None


def get_log_dir(config: dict) -> str:
    return (config.get("logging", {}) or {}).get("dir", "data")
