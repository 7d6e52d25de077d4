from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_RENDER_TIMEOUT = 30.0
DEFAULT_DPI = 100


@dataclass
class Settings:
    render_timeout: float | None = DEFAULT_RENDER_TIMEOUT
    dpi: int = DEFAULT_DPI
    output_dir: Path | None = None


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support FC_* keys if not in the environment.

    Existing os.environ values are never overwritten.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None:
        return DEFAULT_RENDER_TIMEOUT
    if raw.strip().lower() in ("none", "off", ""):
        return None
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ValueError(f"Invalid render timeout: {raw!r}") from e
    # 0 or negative means wait indefinitely
    return timeout if timeout > 0 else None


def _parse_dpi(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_DPI
    try:
        dpi = int(raw)
    except ValueError as e:
        raise ValueError(f"Invalid DPI: {raw!r}") from e
    if dpi <= 0:
        raise ValueError(f"DPI must be positive, got {dpi}")
    return dpi


def get_settings() -> Settings:
    env_file = _read_env_file()
    timeout = _get_env("FC_RENDER_TIMEOUT", ["RENDER_TIMEOUT"], env_file)
    dpi = _get_env("FC_DPI", ["CHART_DPI"], env_file)
    output_dir = _get_env("FC_OUTPUT_DIR", ["CHART_OUTPUT_DIR"], env_file)
    return Settings(
        render_timeout=_parse_timeout(timeout),
        dpi=_parse_dpi(dpi),
        output_dir=Path(output_dir) if output_dir else None,
    )
