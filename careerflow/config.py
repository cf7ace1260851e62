"""Application configuration: YAML files overlaid by environment variables.

Priority order (lowest to highest):
1. ``config/config.yaml`` (template/defaults)
2. ``config/config.local.yaml`` (user's local config with secrets)
3. ``CAREERFLOW_*`` environment variables
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml

from .domain.keyword_terms import DEFAULT_KEYWORD_COUNT

REPO_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_KEYWORD_API_URL = "https://mlmkey-ehnc.onrender.com/extract-keywords"
DEFAULT_COURSES_API_URL = "https://mlm-vrqj.onrender.com/api/get-courses"

# env var → (section, key, type)
_ENV_OVERRIDES = {
    "CAREERFLOW_GEMINI_MODEL": ("gemini", "model", str),
    "CAREERFLOW_KEYWORD_API_URL": ("services", "keyword_api_url", str),
    "CAREERFLOW_KEYWORD_COUNT": ("services", "keyword_count", int),
    "CAREERFLOW_COURSES_API_URL": ("services", "courses_api_url", str),
    "CAREERFLOW_HTTP_TIMEOUT_SECONDS": ("services", "timeout_seconds", float),
    "CAREERFLOW_DATABASE_PATH": ("storage", "database_path", str),
    "CAREERFLOW_EXPORT_DIR": ("export", "directory", str),
}


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ConfigError:
    """A single configuration issue."""

    field: str
    message: str
    severity: Severity


@dataclass
class AppConfig:
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    temperature: float = 0.7
    max_tokens: int = 2048
    keyword_api_url: str = DEFAULT_KEYWORD_API_URL
    keyword_count: int = DEFAULT_KEYWORD_COUNT
    courses_api_url: str = DEFAULT_COURSES_API_URL
    timeout_seconds: float = 30.0
    database_path: str = "workspace/careerflow.db"
    export_dir: str = "workspace/exports"
    verbose: bool = False

    @classmethod
    def from_raw(cls, data: Dict[str, Any]) -> "AppConfig":
        gemini = data.get("gemini") or {}
        services = data.get("services") or {}
        storage = data.get("storage") or {}
        export = data.get("export") or {}
        logging_cfg = data.get("logging") or {}
        defaults = cls()
        return cls(
            gemini_api_key=resolve_env_value(str(gemini.get("api_key", "") or "")),
            gemini_model=str(gemini.get("model", defaults.gemini_model)),
            temperature=float(gemini.get("temperature", defaults.temperature)),
            max_tokens=int(gemini.get("max_tokens", defaults.max_tokens)),
            keyword_api_url=str(services.get("keyword_api_url", defaults.keyword_api_url)),
            keyword_count=int(services.get("keyword_count", defaults.keyword_count)),
            courses_api_url=str(services.get("courses_api_url", defaults.courses_api_url)),
            timeout_seconds=float(services.get("timeout_seconds", defaults.timeout_seconds)),
            database_path=str(storage.get("database_path", defaults.database_path)),
            export_dir=str(export.get("directory", defaults.export_dir)),
            verbose=bool(logging_cfg.get("verbose", defaults.verbose)),
        )


def load_raw_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the merged raw configuration mapping.

    With no explicit path, ``config/config.yaml`` is loaded and
    ``config/config.local.yaml`` is overlaid. Missing files count as empty.
    """

    def _resolve(candidate: str) -> Path:
        path = Path(candidate)
        if path.exists():
            return path
        alt = REPO_ROOT / candidate
        if alt.exists():
            return alt
        return path

    if config_path:
        target = _resolve(config_path)
        if not target.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return _load_yaml(target)

    base = _load_yaml(_resolve("config/config.yaml"))
    local = _load_yaml(_resolve("config/config.local.yaml"))
    return _deep_merge(base, local)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML, then apply environment overrides."""
    path = config_path or os.environ.get("CAREERFLOW_CONFIG") or None
    data = load_raw_config(path)
    return AppConfig.from_raw(apply_env_overrides(data))


def apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    merged = _deep_merge(data, {})
    for env_name, (section, key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name, "").strip()
        if not raw:
            continue
        try:
            value = cast(raw)
        except ValueError as exc:
            raise ValueError(f"{env_name} must be a valid {cast.__name__}: {raw!r}") from exc
        merged.setdefault(section, {})
        merged[section][key] = value
    return merged


def resolve_env_value(value: str) -> str:
    """Expand a ``${VAR}`` placeholder from the environment."""
    if value.startswith("${") and value.endswith("}"):
        return os.environ.get(value[2:-1], "")
    return value


def validate_config(config: AppConfig) -> List[ConfigError]:
    """Check a loaded config; an empty list means it is usable."""
    errors: List[ConfigError] = []

    if not (config.gemini_api_key or os.environ.get("GEMINI_API_KEY")):
        errors.append(
            ConfigError(
                field="gemini.api_key",
                message="GEMINI_API_KEY not set -- ATS scoring and summary improvement are disabled",
                severity=Severity.WARNING,
            )
        )

    for field_name, url in (
        ("services.keyword_api_url", config.keyword_api_url),
        ("services.courses_api_url", config.courses_api_url),
    ):
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(ConfigError(field=field_name, message=f"Invalid URL: {url!r}", severity=Severity.ERROR))

    if config.keyword_count < 1:
        errors.append(
            ConfigError(field="services.keyword_count", message="keyword_count must be >= 1", severity=Severity.ERROR)
        )
    if config.timeout_seconds <= 0:
        errors.append(
            ConfigError(field="services.timeout_seconds", message="timeout_seconds must be > 0", severity=Severity.ERROR)
        )
    if not (0.0 <= config.temperature <= 2.0):
        errors.append(
            ConfigError(field="gemini.temperature", message="temperature must be between 0 and 2", severity=Severity.WARNING)
        )

    return errors


def has_errors(issues: List[ConfigError]) -> bool:
    return any(issue.severity == Severity.ERROR for issue in issues)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = {k: (_deep_merge(v, {}) if isinstance(v, dict) else v) for k, v in base.items()}
    for key, value in override.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(base_value, value)
        else:
            merged[key] = value
    return merged
