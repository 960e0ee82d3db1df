"""
Application identification for captured flows.

Guesses which app produced a flow from its domain, user agent and request
headers. Stages, each short-circuiting on a hit:
1. User-agent fast path (known clients, regardless of domain)
2. Ordered domain rules (first full match wins)
3. Domain-shape fallback (cdn/api/analytics-looking hosts)
4. UNKNOWN_APP
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from flowinsight.models import AppInfo
from flowinsight.models import ClassificationRule
from flowinsight.models import UNKNOWN_APP
from flowinsight.registry import RuleRegistry
from flowinsight.registry import get_registry
from flowinsight.rules import DOMAIN_SHAPE_FALLBACKS

logger = logging.getLogger(__name__)


def normalize_domain(domain: str | None) -> str:
    """Lowercase, drop any :port and a leading www."""
    if not domain:
        return ""
    normalized = domain.strip().lower()
    host, sep, port = normalized.rpartition(":")
    if sep and port.isdigit() and (":" not in host or host.endswith("]")):
        normalized = host
    if normalized.startswith("www."):
        normalized = normalized[4:]
    return normalized


def classify_app(
    domain: str | None,
    user_agent: str | None = None,
    headers: Mapping[str, str] | None = None,
    registry: RuleRegistry | None = None,
) -> AppInfo:
    """
    Identify the application behind a flow.

    Args:
        domain: Request host (port and "www." are ignored)
        user_agent: Request User-Agent header, if any
        headers: Request headers, for rules that require header values
        registry: Rule source (defaults to the global registry)

    Returns:
        The matching AppInfo, never None (UNKNOWN_APP when nothing matches)
    """
    normalized_domain = normalize_domain(domain)
    if not normalized_domain:
        return UNKNOWN_APP

    registry = registry or get_registry()
    normalized_ua = user_agent.lower() if user_agent else ""

    if normalized_ua:
        for signature in registry.user_agent_signatures:
            if signature.pattern.lower() in normalized_ua:
                logger.debug(f"{normalized_domain}: user agent matched '{signature.pattern}'")
                return signature.app

    lowered_headers = _lowercase_headers(headers)
    for rule in registry.rules:
        if _rule_matches(rule, normalized_domain, normalized_ua, lowered_headers):
            logger.debug(f"{normalized_domain}: matched rule -> {rule.app.name}")
            return rule.app

    for needles, app in DOMAIN_SHAPE_FALLBACKS:
        if any(needle in normalized_domain for needle in needles):
            return app

    return UNKNOWN_APP


def _lowercase_headers(headers: Mapping[str, str] | None) -> dict[str, str] | None:
    if headers is None:
        return None
    return {str(k).lower(): str(v) for k, v in headers.items()}


def _rule_matches(
    rule: ClassificationRule,
    domain: str,
    user_agent: str,
    headers: dict[str, str] | None,
) -> bool:
    if not any(d in domain or domain in d for d in rule.domains):
        return False

    # Predicates only apply when the flow carries the corresponding data
    if rule.user_agents and user_agent:
        if not any(ua.lower() in user_agent for ua in rule.user_agents):
            return False

    if rule.headers and headers is not None:
        for name, required in rule.headers:
            value = headers.get(name.lower())
            if value is None or required.lower() not in value.lower():
                return False

    return True


def app_categories(registry: RuleRegistry | None = None) -> list[str]:
    """All categories the classifier can produce, sorted."""
    registry = registry or get_registry()
    categories = {rule.app.category for rule in registry.rules}
    categories.update(sig.app.category for sig in registry.user_agent_signatures)
    categories.update(app.category for _, app in DOMAIN_SHAPE_FALLBACKS)
    categories.add(UNKNOWN_APP.category)
    return sorted(categories)
