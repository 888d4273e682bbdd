"""``termfolio serve``: build the site app and start pounce.

Command-line flags override ``TERMFOLIO_*`` environment variables,
which override the built-in defaults.
"""

import argparse
import logging
import sys
from pathlib import Path

from termfolio.config import SiteConfig
from termfolio.errors import ConfigurationError
from termfolio.site import create_app


def build_config(args: argparse.Namespace) -> SiteConfig:
    """Merge CLI flags over the environment."""
    return SiteConfig.from_env(
        root=Path(args.root) if args.root else None,
        host=args.host,
        port=args.port,
        debug=True if args.debug else None,
        log_level=args.log_level,
    )


def serve(args: argparse.Namespace) -> None:
    """Configure logging, then run the server until interrupted."""
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not config.root.is_dir():
        print(f"Error: site root {config.root} is not a directory", file=sys.stderr)
        raise SystemExit(1)

    app = create_app(config)
    app.run()
