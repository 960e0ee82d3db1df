"""
Rule registry holding the active app identification tables.

Starts from the built-in tables in flowinsight.rules and can load an
extra rule bundle (YAML or JSON) validated against app-rules.schema.json.

The active rule sequence is only ever swapped as a whole tuple, never
edited in place, so concurrent readers always see a complete rule set.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from flowinsight.models import AppInfo
from flowinsight.models import ClassificationRule
from flowinsight.models import UserAgentSignature
from flowinsight.rules import APP_RULES
from flowinsight.rules import USER_AGENT_SIGNATURES
from flowinsight.schema_validator import validate_rule_bundle

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Registry for app classification rules.

    Usage:
        registry = RuleRegistry()
        registry.load_file("~/.flowinsight/rules.yaml")
        classify_app("api.example.com", registry=registry)
    """

    def __init__(
        self,
        rules: Iterable[ClassificationRule] = APP_RULES,
        user_agent_signatures: Iterable[UserAgentSignature] = USER_AGENT_SIGNATURES,
    ):
        self._base_rules: tuple[ClassificationRule, ...] = tuple(rules)
        self._rules: tuple[ClassificationRule, ...] = self._base_rules
        self._user_agent_signatures: tuple[UserAgentSignature, ...] = tuple(user_agent_signatures)

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    @property
    def user_agent_signatures(self) -> tuple[UserAgentSignature, ...]:
        return self._user_agent_signatures

    def replace(self, rules: Iterable[ClassificationRule]) -> None:
        """Swap in a complete new rule sequence."""
        self._rules = tuple(rules)

    def reset(self) -> None:
        """Go back to the rules the registry was created with."""
        self._rules = self._base_rules

    def load_bundle(self, bundle: Any, source: Path | str | None = None) -> int:
        """
        Load rules from a parsed bundle dict.

        Bundle rules are placed ahead of the base rules ("prepend", the
        default) so they shadow them, or used alone ("replace").

        Returns:
            Number of rules loaded from the bundle

        Raises:
            ValueError: If the bundle does not match the rule schema
        """
        result = validate_rule_bundle(bundle, source)
        if not result.valid:
            raise ValueError(f"Invalid rule bundle {source or ''}: {'; '.join(result.errors)}")

        loaded = rules_from_bundle(bundle)
        if bundle.get("mode", "prepend") == "replace":
            self.replace(loaded)
        else:
            self.replace(loaded + self._base_rules)

        logger.info(
            f"Loaded {len(loaded)} app rules from {source or 'bundle'} "
            f"({len(self._rules)} active)"
        )
        return len(loaded)

    def load_file(self, path: Path | str) -> int:
        """
        Load a rule bundle from a .yaml/.yml or .json file.

        Raises:
            ValueError: If the file can't be read, parsed, or validated
        """
        path = Path(path).expanduser()
        try:
            with open(path) as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    bundle = yaml.safe_load(f)
                else:
                    bundle = json.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read rule bundle {path}: {e}") from e
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Cannot parse rule bundle {path}: {e}") from e

        return self.load_bundle(bundle, source=path)


def rules_from_bundle(bundle: dict) -> tuple[ClassificationRule, ...]:
    """Build ClassificationRules from a validated bundle, keeping file order."""
    rules = []
    for entry in bundle.get("rules", []):
        app = entry["app"]
        headers = entry.get("headers")
        user_agents = entry.get("user_agents")
        rules.append(
            ClassificationRule(
                domains=tuple(d.lower() for d in entry["domains"]),
                app=AppInfo(name=app["name"], icon=app["icon"], category=app["category"]),
                user_agents=tuple(user_agents) if user_agents else None,
                headers=tuple(headers.items()) if headers else None,
            )
        )
    return tuple(rules)


# Global registry instance
_registry: RuleRegistry | None = None


def get_registry() -> RuleRegistry:
    """Get the global rule registry instance."""
    global _registry
    if _registry is None:
        _registry = RuleRegistry()
    return _registry
