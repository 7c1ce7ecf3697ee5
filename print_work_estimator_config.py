import argparse
import sys
from pathlib import Path

from loguru import logger

from flowcontrol.config import default_work_estimator_config
from flowcontrol.loader import (
    ConfigLoadError,
    dumps_work_estimator_config,
    load_work_estimator_config,
)


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Print the effective work estimator config as JSON",
    )
    p.add_argument(
        "config",
        nargs="?",
        type=Path,
        default=None,
        help="JSON file overlaid onto the defaults",
    )
    p.add_argument("--indent", type=int, default=2)
    p.add_argument("--verbose", action="store_true", help="Log loader details to stderr")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    if not args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="WARNING")

    if args.config is None:
        config = default_work_estimator_config()
    else:
        try:
            config = load_work_estimator_config(args.config)
        except ConfigLoadError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 1

    print(dumps_work_estimator_config(config, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
