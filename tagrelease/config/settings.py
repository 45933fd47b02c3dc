"""Connection settings for the hosting platform."""

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLATFORM_GITHUB = "github"
PLATFORM_GITLAB = "gitlab"

DEFAULT_HOSTS = {
    PLATFORM_GITHUB: "https://api.github.com",
    PLATFORM_GITLAB: "https://gitlab.com",
}

SETTINGS_KEYS = ("platform", "host", "token")


class Settings(BaseSettings):
    """Which platform to talk to and how to authenticate."""

    model_config = SettingsConfigDict(env_prefix="TAGRELEASE_", case_sensitive=False)

    platform: str = PLATFORM_GITHUB
    host: Optional[str] = None
    token: Optional[str] = None

    @field_validator('platform')
    @classmethod
    def known_platform(cls, v):
        v = v.lower()
        if v not in DEFAULT_HOSTS:
            raise ValueError(f"unknown platform {v!r}, expected one of {sorted(DEFAULT_HOSTS)}")
        return v

    @field_validator('host')
    @classmethod
    def normalize_host(cls, v):
        """Ensure the host has a protocol."""
        if v and not v.startswith(('http://', 'https://')):
            return f"https://{v}"
        return v

    @property
    def api_host(self) -> str:
        return (self.host or DEFAULT_HOSTS[self.platform]).rstrip('/')


def find_config_file() -> Optional[str]:
    """Find a configuration file in the usual locations.

    Returns:
        Path to the config file or None if there is none
    """
    search_paths = [
        "tagrelease.json",
        ".tagrelease.json",
        "tagrelease_config.py",
        ".tagrelease.py",
        "~/.tagrelease.json",
        "~/.config/tagrelease/config.json",
    ]

    for path_str in search_paths:
        path = Path(path_str).expanduser()
        if path.exists() and path.is_file():
            return str(path)

    return None


def get_settings(file_values: Optional[Mapping[str, Any]] = None) -> Settings:
    """Build settings from config file values and the environment.

    Args:
        file_values: Values loaded from the configuration module

    Returns:
        Settings object, environment taking precedence over the file
    """
    settings_data = {}
    for key in SETTINGS_KEYS:
        if file_values and file_values.get(key) is not None:
            settings_data[key] = file_values[key]

    # Environment variables override the config file
    env_settings = {
        'platform': os.getenv('TAGRELEASE_PLATFORM'),
        'host': os.getenv('TAGRELEASE_HOST'),
        'token': os.getenv('TAGRELEASE_TOKEN'),
    }
    env_settings = {k: v for k, v in env_settings.items() if v is not None}
    settings_data.update(env_settings)

    return Settings(**settings_data)


def create_sample_config(path: str = "tagrelease.json") -> None:
    """Write a sample configuration file.

    Args:
        path: Where to create the sample config file
    """
    sample_config = {
        "platform": PLATFORM_GITHUB,
        "owner": "your-org",
        "repo": "your-repo",
        "header": "# Changelog",
        "line_template": "- {title} [#{number}]({url})",
        "no_changes_message": "No changes since the previous release.",
        "draft": True,
        "prerelease": False,
        "sections": [
            {"title": "🚀 Features", "labels": ["enhancement", "feat", "perf"]},
            {"title": "🐛 Bug Fixes", "labels": ["bug", "fix", "revert"]},
            {"title": "🧹 Maintenance", "labels": ["docs", "style", "refactor", "test", "build", "ci", "chore"]},
        ],
    }

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample_config, f, indent=2, ensure_ascii=False)
