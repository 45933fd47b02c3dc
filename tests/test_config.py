import json

import pytest

from tagrelease.config import (
    DEFAULTS, UNCLASSIFIED, Section, format_line_template, get_settings,
    load_config_module, merge,
)
from tagrelease.errors import ConfigError

from .conftest import pr, ts


def test_defaults(config):
    assert [s.title for s in config.sections] == ["🚀 Features", "🐛 Bug Fixes", "🧹 Maintenance"]
    assert "revert" in config.sections[1].labels
    assert config.draft is True
    assert config.prerelease is False
    assert config.line_template(pr(4, title="T")) == "- T [#4](https://example.com/pulls/4)"


def test_merge_layers_override_in_order():
    config = merge(DEFAULTS, {"title": "from file", "footer": "file footer"}, {"title": "from cli"})

    assert config.title == "from cli"
    assert config.footer == "file footer"


def test_merge_none_leaves_lower_layer():
    config = merge(DEFAULTS, {"draft": False}, {"draft": None, "header": None})

    assert config.draft is False
    assert config.header == "# Changelog"


def test_merge_ignores_unknown_keys():
    config = merge(DEFAULTS, {"token": "secret", "os": object()}, {})

    assert not hasattr(config, "token")


def test_merge_does_not_mutate_layers():
    loaded = {"title": "x"}

    merge(DEFAULTS, loaded, {"title": "y"})

    assert loaded == {"title": "x"}
    assert DEFAULTS["title"] is None


def test_configuration_is_frozen(config):
    with pytest.raises(Exception):
        config.title = "changed"


def test_duplicate_section_titles_rejected():
    with pytest.raises(ConfigError):
        merge(DEFAULTS, {"sections": [{"title": "A", "labels": ["x"]}, {"title": "A", "labels": ["y"]}]}, {})


def test_reserved_section_title_rejected():
    with pytest.raises(ValueError):
        Section(title=UNCLASSIFIED, labels=["x"])


def test_format_line_template_fields():
    template = format_line_template("{number}|{title}|{url}|{labels}|{merged_at}")

    line = template(pr(3, title="T", labels=["a", "b"], merged_at=ts(2)))

    assert line == "3|T|https://example.com/pulls/3|a, b|2024-01-02T00:00:00+00:00"


def test_format_line_template_unknown_field():
    with pytest.raises(ConfigError):
        format_line_template("{author}")


def test_line_template_must_be_callable():
    with pytest.raises(ConfigError):
        merge(DEFAULTS, {"line_template": 42}, {})


def test_load_json_module(tmp_path):
    path = tmp_path / "tagrelease.json"
    path.write_text(json.dumps({
        "sections": [{"title": "Fixes", "labels": ["bug"]}],
        "line_template": "* {title}",
        "owner": "acme",
    }), encoding="utf-8")

    config = merge(DEFAULTS, load_config_module(str(path)), {})

    assert [s.title for s in config.sections] == ["Fixes"]
    assert config.line_template(pr(1, title="T")) == "* T"
    assert config.owner == "acme"


def test_load_python_module(tmp_path):
    path = tmp_path / "tagrelease_config.py"
    path.write_text(
        "import os\n"
        "SECTIONS = [{'title': 'Features', 'labels': ['feat']}]\n"
        "FOOTER = 'bye'\n"
        "def LINE_TEMPLATE(request):\n"
        "    return f'+ {request.number}'\n",
        encoding="utf-8",
    )

    config = merge(DEFAULTS, load_config_module(str(path)), {})

    assert config.footer == "bye"
    assert config.line_template(pr(9)) == "+ 9"


def test_load_missing_module(tmp_path):
    with pytest.raises(ConfigError):
        load_config_module(str(tmp_path / "nope.json"))


def test_load_malformed_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config_module(str(path))


def test_load_json_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config_module(str(path))


def test_load_broken_python_module(tmp_path):
    path = tmp_path / "broken.py"
    path.write_text("raise RuntimeError('boom')\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config_module(str(path))


def test_settings_environment_overrides_file(monkeypatch):
    monkeypatch.setenv("TAGRELEASE_TOKEN", "env-token")
    monkeypatch.delenv("TAGRELEASE_PLATFORM", raising=False)
    monkeypatch.delenv("TAGRELEASE_HOST", raising=False)

    settings = get_settings({"token": "file-token", "platform": "gitlab", "host": "git.example.com"})

    assert settings.token == "env-token"
    assert settings.platform == "gitlab"
    assert settings.api_host == "https://git.example.com"


def test_settings_default_host(monkeypatch):
    for name in ("TAGRELEASE_TOKEN", "TAGRELEASE_PLATFORM", "TAGRELEASE_HOST"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings({})

    assert settings.platform == "github"
    assert settings.api_host == "https://api.github.com"


def test_settings_unknown_platform(monkeypatch):
    monkeypatch.delenv("TAGRELEASE_PLATFORM", raising=False)

    with pytest.raises(ValueError):
        get_settings({"platform": "bitbucket"})
