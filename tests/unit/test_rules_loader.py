import pytest

from src.rules.loader import DEFAULT_RULES_PATH, load_rules


def test_load_project_rules():
    rules = load_rules(DEFAULT_RULES_PATH)
    assert rules.project.slug == "ministry-site"
    assert rules.content.slug.max_probe_attempts == 1000
    assert rules.content.transitions["published"] == ["draft", "published"]
    assert rules.contact.cooldown_seconds == 300
    assert rules.seo.site_url.startswith("https://")
    assert rules.identity.algorithm == "HS256"


def test_default_path():
    assert load_rules().project.slug == "ministry-site"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("project: [unclosed")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_schema_violation(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("project:\n  slug: x\n")
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)


def test_yaml_inside_markdown_fence(tmp_path):
    body = DEFAULT_RULES_PATH.read_text()
    path = tmp_path / "rules.md"
    path.write_text(f"# Site rules\n\nSome notes.\n\n```yaml\n{body}\n```\n\nTrailing text.\n")
    assert load_rules(path).project.slug == "ministry-site"


def _rewrite_rules(tmp_path, old, new):
    body = DEFAULT_RULES_PATH.read_text()
    assert old in body
    path = tmp_path / "rules.yaml"
    path.write_text(body.replace(old, new))
    return path


def test_transition_to_undeclared_status(tmp_path):
    path = _rewrite_rules(tmp_path, "draft: [published]", "draft: [published, archived]")
    with pytest.raises(ValueError, match="undeclared statuses: archived"):
        load_rules(path)


def test_unknown_status_value(tmp_path):
    path = _rewrite_rules(tmp_path, "status_values: [draft, published]", "status_values: [draft, published, scheduled]")
    with pytest.raises(ValueError, match="Unknown content statuses: scheduled"):
        load_rules(path)


def test_bad_slug_pattern(tmp_path):
    path = _rewrite_rules(tmp_path, 'pattern: "^[a-z0-9]+(-[a-z0-9]+)*$"', 'pattern: "^[a-z"')
    with pytest.raises(ValueError, match="Invalid slug pattern"):
        load_rules(path)


def test_slug_limits_loaded(rules):
    assert rules.content.slug.max == 120
    assert rules.content.slug.fallback == "untitled"
    assert rules.content.status_values == ["draft", "published"]
