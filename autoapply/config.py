"""Load monitor settings (YAML) and credentials (env)."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from autoapply.errors import ConfigError
from autoapply.log import LOG_DIR, get_logger
from autoapply.models import MatchCriteria

log = get_logger(__name__)

load_dotenv()

CONFIG_DIR: Path = Path(__file__).resolve().parent.parent / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"

REQUESTS_URL = "https://www.codementor.io/m/dashboard/open-requests?expertise=related"
LOGIN_URL = "https://www.codementor.io/login"

DEFAULT_SYNONYMS: dict[str, list[str]] = {
    "javascript": ["js", "javascript", "node", "react", "vue", "angular"],
    "node.js": ["node.js", "nodejs", "node", "express"],
    "python": ["python", "django", "flask", "fastapi"],
    "aws": ["aws", "amazon web services", "lambda", "ec2", "s3"],
    "mobile": ["mobile", "ios", "android", "react native", "flutter"],
}

DEFAULT_CARD_SELECTORS: list[str] = [
    '[data-testid="request-card"]',
    ".request-card",
    ".job-card",
    '[data-cy="request-card"]',
    '[data-test="request-card"]',
    '[class*="request"]',
    '[class*="job"]',
    '[class*="card"]',
    ".card",
]


@dataclass
class Settings:
    check_interval_ms: int = 30_000
    max_applications_per_hour: int = 10
    skills_filter: list[str] = field(default_factory=list)
    min_budget: int = 0
    apply_delay_ms: int = 3_000
    cover_letter_max_length: int = 1_200
    pass_on_missing_skills: bool = False
    synonyms: dict[str, list[str]] = field(default_factory=lambda: dict(DEFAULT_SYNONYMS))
    card_selectors: list[str] = field(default_factory=lambda: list(DEFAULT_CARD_SELECTORS))
    requests_url: str = REQUESTS_URL

    def criteria(self) -> MatchCriteria:
        return MatchCriteria(
            skills_filter=frozenset(s.lower().strip() for s in self.skills_filter if s.strip()),
            min_budget=self.min_budget,
            synonyms={
                k.lower().strip(): frozenset(v.lower().strip() for v in variants)
                for k, variants in self.synonyms.items()
            },
            pass_on_missing_skills=self.pass_on_missing_skills,
        )


@dataclass
class Credentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def env_flag(key: str, default: bool = False) -> bool:
    raw = get_env(key)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def env_int(key: str, default: int = 0) -> int:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


def load_settings(path: Path | None = None) -> Settings:
    """Read settings YAML; a missing file yields the defaults."""
    path = path or SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} must contain a mapping")
    else:
        log.info("No %s found, using default settings", path.name)

    known = Settings.__dataclass_fields__.keys()
    unknown = sorted(set(data) - set(known))
    if unknown:
        log.warning("Ignoring unknown settings: %s", ", ".join(unknown))

    try:
        settings = Settings(**{k: v for k, v in data.items() if k in known})
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc

    validate(settings)
    return settings


def validate(settings: Settings) -> None:
    for name in ("check_interval_ms", "max_applications_per_hour", "apply_delay_ms",
                 "cover_letter_max_length", "min_budget"):
        value = getattr(settings, name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"{name} must be an integer, got {value!r}")
    if settings.check_interval_ms <= 0:
        raise ConfigError("check_interval_ms must be positive")
    if settings.max_applications_per_hour <= 0:
        raise ConfigError("max_applications_per_hour must be positive")
    if settings.min_budget < 0:
        raise ConfigError("min_budget must not be negative")
    if settings.apply_delay_ms < 0 or settings.apply_delay_ms >= settings.check_interval_ms:
        raise ConfigError("apply_delay_ms must be non-negative and shorter than check_interval_ms")
    if settings.cover_letter_max_length < 10:
        raise ConfigError("cover_letter_max_length is too small")
    if not isinstance(settings.skills_filter, list):
        raise ConfigError("skills_filter must be a list of keywords")
    if not isinstance(settings.synonyms, dict):
        raise ConfigError("synonyms must map a keyword to a list of variants")
    if not settings.card_selectors:
        raise ConfigError("card_selectors must list at least one selector")


def load_credentials() -> Credentials | None:
    email = get_env("CODEMENTOR_EMAIL")
    password = get_env("CODEMENTOR_PASSWORD")
    if not email or not password:
        return None
    return Credentials(email=email, password=password)


def ensure_dirs() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
