"""CLI to normalise a raw XC API response into the canonical JSON schema."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from xcnorm.core.config import XCNormConf
from xcnorm.services.xc import SERIALIZERS, XCNormaliseError, dump, serialize
from xcnorm.utils.cli import console
from xcnorm.utils.logger import get_logger, setup_logger
from xcnorm.version import PROGRAM_NAME, __version__

logger = get_logger(__name__)


def _read_payload(source: str) -> Any:  # noqa: ANN401 JSON things
    """Read a JSON payload from a file, - is stdin."""
    if source == "-":
        return json.loads(sys.stdin.read())

    with Path(source).open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Normalise a raw Xtream Codes API response into canonical JSON",
    )
    parser.add_argument("kind", choices=list(SERIALIZERS), help="Which API response the payload is")
    parser.add_argument("payload", help="Path to the JSON payload, - to read stdin")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file")
    parser.add_argument("--series-id", default=None, help="Series id to use when a show payload has none")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument("--lenient", action="store_true", help="Malformed numbers and dates become null")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for debug, -vv for trace")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Normalise one payload and print it."""
    args = _parse_args(argv)

    if args.config:
        settings = XCNormConf.force_load_config_file(args.config)
    else:
        settings = XCNormConf.force_load_defaults()

    if args.verbose:
        settings.logging.setup_verbosity_cli(args.verbose)
    setup_logger(settings=settings.logging)

    normalise_conf = settings.normalise
    if args.lenient:
        normalise_conf = normalise_conf.model_copy(update={"strict_coercion": False})

    try:
        payload = _read_payload(args.payload)
    except OSError as e:
        logger.error("Cannot read payload %s: %s", args.payload, e)  # noqa: TRY400 Don't need the traceback
        sys.exit(1)
    except json.JSONDecodeError as e:
        logger.error("Payload %s is not valid JSON: %s", args.payload, e)  # noqa: TRY400 Don't need the traceback
        sys.exit(1)

    kwargs: dict[str, Any] = {}
    if args.series_id is not None:
        if args.kind != "show":
            logger.warning("--series-id only applies to show payloads, ignoring it")
        else:
            kwargs["series_id"] = args.series_id

    try:
        result = serialize(args.kind, payload, conf=normalise_conf, **kwargs)
    except XCNormaliseError as e:
        logger.error("Cannot normalise %s payload: %s", args.kind, e)  # noqa: TRY400 Don't need the traceback
        sys.exit(1)

    console.print_json(data=dump(result), indent=args.indent)


if __name__ == "__main__":
    main()
