#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from services.clipboard_service import ClipboardService
from services.config import DaemonConfig
from storage.lock import LockTimeoutError

logger = logging.getLogger("cliphistd")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="cliphistd - clipboard history daemon"
    )

    parser.add_argument(
        "--oneshot",
        action="store_const",
        const=True,
        default=None,
        help="Capture the current selections once and exit (CM_ONESHOT)"
    )

    parser.add_argument(
        "--own-clipboard",
        action="store_const",
        const=True,
        default=None,
        help="Take ownership of CLIPBOARD after each capture (CM_OWN_CLIPBOARD)"
    )

    parser.add_argument(
        "-m", "--max-clips",
        type=int,
        default=None,
        help="Clips kept per selection, 0 for unlimited (CM_MAX_CLIPS, default: 1000)"
    )

    parser.add_argument(
        "-s", "--selections",
        type=str,
        default=None,
        help="Space separated selections to watch (CM_SELECTIONS, default: 'clipboard primary')"
    )

    parser.add_argument(
        "-d", "--cache-dir",
        type=Path,
        default=None,
        help="Base directory for the cache (CM_DIR)"
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load CM_* settings from this .env file"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_const",
        const=True,
        default=None,
        help="Enable debug logging (CM_DEBUG)"
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DaemonConfig:
    return DaemonConfig.from_env(
        env_file=args.env_file,
        oneshot=args.oneshot,
        own_clipboard=args.own_clipboard,
        max_clips=args.max_clips,
        selections=args.selections,
        cache_base=args.cache_dir,
        debug=args.verbose,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    try:
        config = build_config(args)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if config.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        service = ClipboardService.from_config(config)
    except RuntimeError as e:
        logger.error(f"Fatal error: {e}")
        return 1

    if config.oneshot:
        try:
            service.run_once()
        except LockTimeoutError as e:
            logger.error(f"{e}")
            return 1
        return 0

    def stop_handler(signum, frame):
        logger.info(f"Received signal {signum}, stopping")
        service.stop()

    signal.signal(signal.SIGINT, stop_handler)
    signal.signal(signal.SIGTERM, stop_handler)
    signal.signal(signal.SIGUSR1, lambda signum, frame: service.disable())
    signal.signal(signal.SIGUSR2, lambda signum, frame: service.enable())

    try:
        service.run_forever()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
