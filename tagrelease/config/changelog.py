"""Changelog configuration: sections, templates and layered merging."""

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..errors import ConfigError
from ..models import ChangeRequest

logger = logging.getLogger(__name__)

# Group key for change requests that match no section. Never rendered.
UNCLASSIFIED = "<unclassified>"

DEFAULT_LINE_TEMPLATE = "- {title} [#{number}]({url})"

LineTemplate = Callable[[ChangeRequest], str]


class Section(BaseModel):
    """A titled block of the changelog and the labels that qualify for it."""

    model_config = ConfigDict(frozen=True)

    title: str
    labels: FrozenSet[str] = frozenset()

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("section title must not be empty")
        if v == UNCLASSIFIED:
            raise ValueError(f"section title {UNCLASSIFIED!r} is reserved")
        return v


def format_line_template(fmt: str) -> LineTemplate:
    """Build a line template from a ``str.format`` pattern.

    Available fields: number, title, url, labels (comma separated) and
    merged_at (ISO 8601, empty when unknown).

    Raises:
        ConfigError: the pattern references an unknown field
    """
    def render_line(request: ChangeRequest) -> str:
        return fmt.format(
            number=request.number,
            title=request.title,
            url=request.url,
            labels=", ".join(request.labels),
            merged_at=request.merged_at.isoformat() if request.merged_at else "",
        )

    try:
        render_line(ChangeRequest(number=1, title="title", url="https://example.invalid"))
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"invalid line template {fmt!r}: {e}") from e
    return render_line


class Configuration(BaseModel):
    """Everything the pipeline needs to render and publish one release."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    sections: Tuple[Section, ...] = ()
    line_template: LineTemplate
    header: Optional[str] = None
    footer: Optional[str] = None
    no_changes_message: str
    title: Optional[str] = None
    draft: bool = True
    prerelease: bool = False
    owner: Optional[str] = None
    repo: Optional[str] = None

    @field_validator('line_template', mode='before')
    @classmethod
    def template_from_string(cls, v):
        if isinstance(v, str):
            return format_line_template(v)
        if not callable(v):
            raise ValueError("line_template must be a format string or a callable")
        return v

    @field_validator('sections')
    @classmethod
    def unique_titles(cls, v):
        titles = [section.title for section in v]
        duplicates = sorted({title for title in titles if titles.count(title) > 1})
        if duplicates:
            raise ValueError(f"duplicate section titles: {duplicates}")
        return v


FIELDS = tuple(Configuration.model_fields)

DEFAULTS: Dict[str, Any] = {
    "sections": (
        {"title": "🚀 Features", "labels": ["enhancement", "feat", "perf"]},
        {"title": "🐛 Bug Fixes", "labels": ["bug", "fix", "revert"]},
        {"title": "🧹 Maintenance", "labels": ["docs", "style", "refactor", "test", "build", "ci", "chore"]},
    ),
    "line_template": DEFAULT_LINE_TEMPLATE,
    "header": "# Changelog",
    "footer": None,
    "no_changes_message": "No changes since the previous release.",
    "title": None,
    "draft": True,
    "prerelease": False,
    "owner": None,
    "repo": None,
}


def merge(defaults: Mapping[str, Any], loaded: Mapping[str, Any],
          overrides: Mapping[str, Any]) -> Configuration:
    """Layer defaults, the loaded module and per-run overrides.

    Later layers win field by field; ``None`` means the layer leaves the
    field alone. Keys that are not configuration fields are ignored.

    Raises:
        ConfigError: the merged values do not form a valid Configuration
    """
    merged: Dict[str, Any] = {}
    for layer in (defaults, loaded, overrides):
        for key, value in layer.items():
            if key in FIELDS and value is not None:
                merged[key] = value

    try:
        return Configuration(**merged)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e


def load_config_module(path: str) -> Dict[str, Any]:
    """Load an external configuration module.

    JSON files must hold an object. Python files are executed and their
    module-level names read, either upper or lower case (``SECTIONS`` or
    ``sections``).

    Args:
        path: Path to a ``.json`` or ``.py`` file

    Returns:
        Raw values found in the module, not yet validated

    Raises:
        ConfigError: the file is missing or cannot be parsed
    """
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigError(f"config file {path} not found")

    if config_path.suffix == ".py":
        values = _load_python_module(config_path)
    else:
        values = _load_json(config_path)

    logger.debug(f"Loaded {sorted(values)} from {config_path}")
    return values


def _load_json(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error loading config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {config_path} must contain a JSON object")
    return data


def _load_python_module(config_path: Path) -> Dict[str, Any]:
    spec = importlib.util.spec_from_file_location(f"tagrelease_config_{config_path.stem}", config_path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"cannot import config module {config_path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigError(f"Error executing config module {config_path}: {e}") from e

    values: Dict[str, Any] = {}
    for name in dir(module):
        if name.startswith('_'):
            continue
        values[name.lower()] = getattr(module, name)
    return values
