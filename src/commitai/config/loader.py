"""
Configuration loader for commitai.

Settings are layered, lowest precedence first:

1. built-in defaults,
2. ``~/.commitairc``,
3. ``~/.config/commitai`` (written by ``commitai setup``),
4. the closest ``.commitairc`` in the working directory or its parents,
5. ``COMMITAI_*`` environment variables (``COMMITAI_MODEL=gpt-4o``),
6. explicit overrides, usually command-line options.

Files may contain a JSON object or rc-style ``key=value`` lines. Keys
are accepted in snake_case or camelCase (``apiKey`` becomes ``api_key``).
A file that cannot be read or parsed, or a value of the wrong type,
raises :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
import os
import re
import shutil
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


APP_NAME = "commitai"
ENV_PREFIX = "COMMITAI_"
SUPPORTED_PROVIDERS = ("openai", "anthropic", "ollama")
SECRET_KEYS = ("api_key", "openai_api_key", "anthropic_api_key")


class ConfigError(Exception):
    """Raised when a configuration source is malformed or a value is invalid."""

    pass


def default_git_path() -> str:
    """Return the Git executable found on ``PATH``, or plain ``git``."""
    return shutil.which("git") or "git"


def default_config() -> Dict[str, Any]:
    return {
        "git": default_git_path(),
        "provider": "openai",
        "model": "gpt-4o-mini",
        "api_key": "",
        "request_timeout": 60,
    }


def _get_config_path() -> Path:
    """Path of the user configuration file written by ``commitai setup``."""
    return Path.home() / ".config" / APP_NAME


def _home_rc_path() -> Path:
    return Path.home() / f".{APP_NAME}rc"


def _find_project_rc(start: Path) -> Optional[Path]:
    current = start.resolve()
    while True:
        candidate = current / f".{APP_NAME}rc"
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def _snake_case(key: str) -> str:
    key = key.strip().replace("-", "_")
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def parse_config_text(text: str, source: str = "<string>") -> Dict[str, Any]:
    """Parse JSON or rc-style ``key=value`` text into a dictionary."""
    stripped = text.strip()
    if not stripped:
        return {}
    if stripped.startswith("{"):
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {source}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{source} must contain a JSON object")
        return {_snake_case(k): v for k, v in data.items()}

    values: Dict[str, Any] = {}
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith(("#", ";")):
            continue
        if "=" not in line:
            raise ConfigError(f"{source}:{lineno}: expected 'key=value', got {line!r}")
        key, value = line.split("=", 1)
        values[_snake_case(key)] = value.strip()
    return values


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read configuration file %s: %s", path, exc)
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    logger.debug("Loaded configuration from: %s", path)
    return parse_config_text(content, source=str(path))


def _env_values(environ: Mapping[str, str]) -> Dict[str, Any]:
    values = {}
    for name, value in environ.items():
        if name.upper().startswith(ENV_PREFIX) and len(name) > len(ENV_PREFIX):
            values[name[len(ENV_PREFIX):].lower()] = value
    return values


def config_sources(cwd: Optional[Path] = None) -> List[Path]:
    """Return the existing configuration files in precedence order."""
    candidates = [_home_rc_path(), _get_config_path()]
    project_rc = _find_project_rc(cwd or Path.cwd())
    if project_rc is not None and project_rc not in candidates:
        candidates.append(project_rc)
    return [path for path in candidates if path.is_file()]


def _coerce_number(data: Dict[str, Any], key: str, kind: type) -> None:
    if key not in data or data[key] in (None, ""):
        data.pop(key, None)
        return
    value = data[key]
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be a number")
    try:
        data[key] = int(value) if kind is int else float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be {'an integer' if kind is int else 'a number'}") from exc


def validate_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """Check and coerce values in place; return ``data``."""
    provider = str(data.get("provider") or "").lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"Unknown provider '{data.get('provider')}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    data["provider"] = provider
    for key in ("git", "model"):
        if not isinstance(data.get(key), str) or not data[key]:
            raise ConfigError(f"'{key}' must be a non-empty string")
    _coerce_number(data, "port", int)
    _coerce_number(data, "max_tokens", int)
    _coerce_number(data, "request_timeout", float)
    return data


def load_config(
    overrides: Optional[Mapping[str, Any]] = None,
    cwd: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Load, merge and validate the configuration.

    Parameters
    ----------
    overrides : Mapping, optional
        Highest precedence values. ``None`` values are ignored so that
        unset command-line options do not mask file settings.
    cwd : Path, optional
        Directory from which to look for a project ``.commitairc``.
    environ : Mapping, optional
        Environment to read ``COMMITAI_*`` variables from. Defaults to
        :data:`os.environ`.

    Raises
    ------
    ConfigError
        If any source is malformed or a value is invalid.
    """
    data = default_config()
    for path in config_sources(cwd):
        data.update(_read_config_file(path))
    data.update(_env_values(os.environ if environ is None else environ))
    if overrides:
        data.update({_snake_case(k): v for k, v in overrides.items() if v is not None})
    return validate_config(data)


def save_config(values: Mapping[str, Any], path: Optional[Path] = None) -> Path:
    """Write ``values`` as JSON to the user configuration file.

    Returns
    -------
    Path
        The file that was written.
    """
    target = path or _get_config_path()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(dict(values), indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to save configuration to {target}: {exc}") from exc
    logger.debug("Saved configuration to: %s", target)
    return target


def masked(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``config`` with credentials hidden."""
    shown = dict(config)
    for key in SECRET_KEYS:
        value = shown.get(key)
        if value:
            value = str(value)
            shown[key] = value[:4] + "..." + value[-4:] if len(value) > 12 else "****"
    return shown
