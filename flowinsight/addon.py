"""
Flowinsight addon for mitmproxy.

Tags every request with the app that produced it, and computes resource
type and body decodings on demand through commands.
"""

import collections.abc
import logging
import sys

from mitmproxy import command
from mitmproxy import ctx
from mitmproxy import exceptions
from mitmproxy import flow
from mitmproxy import http

from flowinsight.config import config
from flowinsight.enricher import FlowEnricher
from flowinsight.record import FlowRecord
from flowinsight.registry import RuleRegistry

# Configure logging to output to stderr
logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

# Metadata keys for storing data on flows
FLOWINSIGHT_APP_KEY = "flowinsight_app"
FLOWINSIGHT_TYPE_KEY = "flowinsight_type"
FLOWINSIGHT_DECODING_KEY = "flowinsight_decoding"


class FlowInsightAddon:
    """
    Mitmproxy addon that identifies the app behind each flow.

    Usage:
        mitmdump -s flowinsight/addon.py --set flowinsight_rules_file=rules.yaml

    Or load programmatically:
        from flowinsight.addon import FlowInsightAddon
        addons = [FlowInsightAddon()]
    """

    def __init__(self):
        self._registry = RuleRegistry()
        self._enricher = FlowEnricher(registry=self._registry)
        self._enabled: bool = True

    def load(self, loader) -> None:
        """Register addon options."""
        loader.add_option(
            name="flowinsight_enabled",
            typespec=bool,
            default=True,
            help="Tag flows with the app that produced them",
        )
        loader.add_option(
            name="flowinsight_rules_file",
            typespec=str,
            default=config.RULES_FILE,
            help="YAML or JSON app rule bundle loaded ahead of the built-in rules",
        )
        loader.add_option(
            name="flowinsight_verbose",
            typespec=bool,
            default=config.VERBOSE,
            help="Enable verbose/debug logging for troubleshooting",
        )

    def configure(self, updated: set[str]) -> None:
        """Handle configuration changes."""
        if "flowinsight_verbose" in updated:
            if ctx.options.flowinsight_verbose:
                logging.getLogger("flowinsight").setLevel(logging.DEBUG)
                logger.info("Verbose logging ENABLED")
            else:
                logging.getLogger("flowinsight").setLevel(logging.INFO)

        if "flowinsight_enabled" in updated:
            self._enabled = ctx.options.flowinsight_enabled
            logger.info(f"Flowinsight configure: flowinsight_enabled={self._enabled}")

        if "flowinsight_rules_file" in updated:
            self._load_rules(ctx.options.flowinsight_rules_file)

    def _load_rules(self, path: str) -> None:
        if not path:
            self._registry.reset()
            return

        try:
            count = self._registry.load_file(path)
            logger.info(f"Rule bundle {path}: {count} rules, {len(self._registry.rules)} active")
        except ValueError as e:
            # Active rules are left untouched on a failed load
            logger.error(f"Failed to load rule bundle: {e}")
            logger.error("Keeping the current app rules")

    def request(self, flow: http.HTTPFlow) -> None:
        """Attach app identity to each request."""
        if not self._enabled:
            return

        try:
            record = self._enricher.enrich(FlowRecord.from_http_flow(flow, include_bodies=False))
            flow.metadata[FLOWINSIGHT_APP_KEY] = {
                "name": record.app_name,
                "icon": record.app_icon,
                "category": record.app_category,
                "app_color": record.app_color,
            }
            logger.debug(f"{record.domain}: {record.app_name} ({record.app_category})")
        except Exception as e:
            logger.warning(f"Could not classify flow {flow.id}: {e}", exc_info=True)

    # mitmproxy reads command argument types at registration time
    @command.command("flowinsight.type")
    def tag_type(self, flows: collections.abc.Sequence[flow.Flow]) -> None:
        """Tag the selected flows with their resource type."""
        for f in flows:
            if not isinstance(f, http.HTTPFlow):
                continue
            info = self._enricher.request_type(FlowRecord.from_http_flow(f))
            f.metadata[FLOWINSIGHT_TYPE_KEY] = info.to_dict()

    @command.command("flowinsight.decode")
    def decode_bodies(self, flows: collections.abc.Sequence[flow.Flow], direction: str) -> None:
        """Try to decode the request or response body of the selected flows."""
        if direction not in ("request", "response"):
            raise exceptions.CommandError(f"Invalid direction {direction!r}, expected 'request' or 'response'")

        for f in flows:
            if not isinstance(f, http.HTTPFlow):
                continue
            decoding = self._enricher.decode_body(FlowRecord.from_http_flow(f), direction)
            f.metadata[FLOWINSIGHT_DECODING_KEY] = decoding.to_dict()
            logger.info(f"{f.request.pretty_url}: {direction} best decoding {decoding.best.method}")


addons = [FlowInsightAddon()]
