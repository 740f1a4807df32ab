"""
Run the broker looper from the command line.

Uses the same configuration classes as the web service, so ``BROKER_URL``,
``JWT_*`` and ``FLASK_ENV`` behave identically.  The transcript is printed
to stdout.

Exit codes:

- ``0``: the loop ran (individual broker failures are in the transcript)
- ``2``: the looper could not start (bad arguments, missing key, etc.)
"""

from __future__ import annotations

import argparse
import sys

from looper.config import get_config, load_signing_key
from looper.looper_app.client import BrokerClient
from looper.looper_app.jwt import TokenBuildError, bearer, create_token
from looper.looper_app.looper import BASE_ID, Looper

EXIT_OK = 0
EXIT_SETUP_ERROR = 2


def _positive_int(value: str) -> int:
    count = int(value)
    if count < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {count}")
    return count


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the looper."""
    parser = argparse.ArgumentParser(
        description="Run the broker REST call sequence in a loop."
    )
    parser.add_argument(
        "--id",
        default=BASE_ID,
        help="Name of the broker to create and delete on each iteration",
    )
    parser.add_argument(
        "--count",
        type=_positive_int,
        default=1,
        help="Number of iterations to run",
    )
    parser.add_argument(
        "--env",
        default=None,
        help="Configuration environment (defaults to FLASK_ENV)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: build a token, run the loop and print the transcript."""
    args = parse_args(argv)
    config_class = get_config(args.env)

    try:
        token = create_token(
            args.id,
            private_key=load_signing_key(testing=bool(getattr(config_class, "TESTING", False))),
            audience=config_class.JWT_AUDIENCE,
            issuer=config_class.JWT_ISSUER,
            expiry_seconds=config_class.JWT_EXPIRY_SECONDS,
        )
    except (RuntimeError, TokenBuildError) as exc:
        print(f"Looper setup failed: {exc}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    client = BrokerClient(
        config_class.BROKER_URL,
        bearer(token),
        timeout=config_class.BROKER_TIMEOUT,
    )
    result = Looper(client).run(args.id, args.count)
    print(result.transcript)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
