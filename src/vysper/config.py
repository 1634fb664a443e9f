"""Runtime settings for vysper."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from typing import Mapping

from vysper.logger import get_logger

log = get_logger("config")

PLACEHOLDER_API_KEY = "your-api-key-here"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 30.0
    max_retries: int = 3
    fallback_enabled: bool = True
    network_base_delay_s: float = 2.0
    base_delay_s: float = 1.0
    jitter_s: float = 1.0
    preflight_enabled: bool = True
    transport_mode: str = "remote"

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    @property
    def api_host(self) -> str:
        return self.base_url.split("://", 1)[-1].split("/", 1)[0]

    def endpoint_url(self, model: str | None = None) -> str:
        return f"{self.redacted_endpoint(model)}?key={self.api_key or ''}"

    def redacted_endpoint(self, model: str | None = None) -> str:
        return f"{self.base_url.rstrip('/')}/v1beta/models/{model or self.model}:generateContent"

    def with_api_key(self, api_key: str | None) -> "Settings":
        return replace(self, api_key=api_key)

    def to_dict(self) -> dict:
        return {
            "api_key": mask_api_key(self.api_key),
            "model": self.model,
            "base_url": self.base_url,
            "timeout_s": self.timeout_s,
            "max_retries": self.max_retries,
            "fallback_enabled": self.fallback_enabled,
            "network_base_delay_s": self.network_base_delay_s,
            "base_delay_s": self.base_delay_s,
            "jitter_s": self.jitter_s,
            "preflight_enabled": self.preflight_enabled,
            "transport_mode": self.transport_mode,
        }


def mask_api_key(api_key: str | None) -> str:
    if not api_key:
        return "NOT SET"
    if len(api_key) <= 12:
        return "*" * len(api_key)
    return f"{api_key[:8]}...{api_key[-4:]}"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    defaults = Settings()
    transport_mode = env.get("VYSPER_TRANSPORT", defaults.transport_mode).strip().lower()
    if transport_mode not in {"remote", "mock"}:
        log.warning(f"Unknown VYSPER_TRANSPORT {transport_mode!r}; using {defaults.transport_mode!r}")
        transport_mode = defaults.transport_mode
    return Settings(
        api_key=(env.get("GEMINI_API_KEY") or "").strip() or None,
        model=env.get("VYSPER_MODEL") or defaults.model,
        base_url=env.get("VYSPER_BASE_URL") or defaults.base_url,
        timeout_s=_float(env, "VYSPER_TIMEOUT_S", defaults.timeout_s),
        max_retries=max(1, _int(env, "VYSPER_MAX_RETRIES", defaults.max_retries)),
        fallback_enabled=_bool(env, "VYSPER_FALLBACK_ENABLED", defaults.fallback_enabled),
        preflight_enabled=_bool(env, "VYSPER_PREFLIGHT", defaults.preflight_enabled),
        transport_mode=transport_mode,
    )


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        log.warning(f"Invalid {key}={raw!r}; using {default}")
        return default
    return value if value > 0 else default


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning(f"Invalid {key}={raw!r}; using {default}")
        return default


def _bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}
