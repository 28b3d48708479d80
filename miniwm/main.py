#!/usr/bin/env python3
# main.py - miniwm entry point
#
# Try it in Xephyr first (DISPLAY=:1 miniwm) so a bad config cannot lock up
# your real session.

import argparse
import logging
import signal
import sys

from miniwm.core.events import EventDispatcher
from miniwm.core.wm import StartupError, connect
from miniwm.utils.config import Config, ConfigError, load_config

LOG = logging.getLogger("miniwm")


def setup_logging(verbose: bool = False):
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s:%(name)s: %(message)s"))
    LOG.addHandler(h)
    LOG.setLevel(logging.DEBUG if verbose else logging.INFO)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="miniwm",
        description="Tiling window manager for a fixed set of allowed applications.")
    parser.add_argument("-c", "--config", help="path to config.toml")
    parser.add_argument("-d", "--display", help="X display to manage (default: $DISPLAY)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.config)
    except ConfigError:
        LOG.exception("invalid configuration, using defaults")
        config = Config()

    # children are reaped by the kernel
    signal.signal(signal.SIGCHLD, signal.SIG_IGN)

    try:
        wm = connect(config, args.display)
    except StartupError as e:
        LOG.error("%s", e)
        return 1

    dispatcher = EventDispatcher(wm)
    signal.signal(signal.SIGINT, dispatcher.stop)
    signal.signal(signal.SIGTERM, dispatcher.stop)

    LOG.info("miniwm started")
    try:
        dispatcher.run()
    finally:
        wm.shutdown()
    LOG.info("miniwm finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
