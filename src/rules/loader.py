"""
rules.yaml loading.

The file may also be a Markdown document carrying the rules in its first
```yaml fence, so the same text can live in the project docs.
"""

import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import ContentRules, Rules

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).resolve().parents[2] / "rules.yaml"

_YAML_FENCE = re.compile(r"^```yaml[^\n]*\n(.*?)(?:^```|\Z)", re.MULTILINE | re.DOTALL)

# Statuses the content lifecycle knows how to store and publish
KNOWN_STATUSES = frozenset({"draft", "published"})


def _yaml_text(raw: str) -> str:
    match = _YAML_FENCE.search(raw)
    return match.group(1) if match else raw


def _check_statuses(content: ContentRules) -> None:
    statuses = set(content.status_values)
    unknown = statuses - KNOWN_STATUSES
    if unknown:
        raise ValueError(f"Unknown content statuses: {', '.join(sorted(unknown))}")

    used = set(content.transitions)
    for targets in content.transitions.values():
        used.update(targets)
    undeclared = used - statuses
    if undeclared:
        raise ValueError(f"Transitions use undeclared statuses: {', '.join(sorted(undeclared))}")


def _check_slug_pattern(content: ContentRules) -> None:
    try:
        re.compile(content.slug.pattern)
    except re.error as e:
        raise ValueError(f"Invalid slug pattern {content.slug.pattern!r}: {e}") from e


def load_rules(path: Path | None = None) -> Rules:
    """
    Read and validate the rules file.

    Raises FileNotFoundError for a missing file and ValueError for bad YAML,
    schema violations, absent required sections or transitions between
    statuses the file does not declare.
    """
    path = path or DEFAULT_RULES_PATH
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(_yaml_text(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    absent = [name for name in rules.project.required_sections if not isinstance(data.get(name), dict)]
    if absent:
        raise ValueError(f"Rules file is missing required sections: {', '.join(absent)}")

    _check_statuses(rules.content)
    _check_slug_pattern(rules.content)

    logger.info("Loaded rules %s v%s from %s", rules.project.slug, rules.project.rules_version, path)
    return rules
