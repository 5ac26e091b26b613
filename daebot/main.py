"""daebot entry point.

Runs the webhook server: verifies GitHub deliveries and dispatches them to
the event handlers. Usage: daebot [--config config.yaml] [--check].
"""

import argparse
import logging
import sys
from pathlib import Path

from daebot.config import AppConfig, load_config
from daebot.logging import DaebotLogging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="daebot",
        description="daebot - GitHub webhook bot (labels, reviews, branch sync, releases, notifications)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv)


def run_bot(config: AppConfig) -> None:
    """Configure logging and serve webhooks until interrupted."""
    from daebot.app import build_dispatcher
    from daebot.services.tracing import shutdown_tracing
    from daebot.webhook.server import run_webhook_server

    DaebotLogging(config.logging).setup()
    log = logging.getLogger("daebot.main")

    if not config.webhook.enabled:
        log.warning("Webhook disabled in config; nothing to do.")
        return
    log.info(
        "daebot started | login=%s | managed=%s | pr_max_age=%s",
        config.bot.login,
        ",".join(config.bot.managed_repos),
        config.bot.pr_max_age,
    )
    try:
        run_webhook_server(config, build_dispatcher(config))
    finally:
        shutdown_tracing()


def main(argv: list[str] | None = None) -> int:
    """Entry point for the daebot command."""
    args = parse_args(argv)
    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("daebot.main").warning("config.yaml not found, using config.example.yaml")

    config = load_config(config_path)

    if args.check:
        print("Config OK:", config.bot.login, ",".join(config.bot.managed_repos), config.github.webhook_path)
        return 0

    try:
        run_bot(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("daebot.main").exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
