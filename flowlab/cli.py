import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from flowlab.core.exceptions import FlowLabException
from flowlab.core.logging import configure_logging, get_logger
from flowlab.schemas.flowsheet import FlowsheetSpec
from flowlab.services import scenarios
from flowlab.services.flowsheet_service import build_flowsheet, run_flowsheet
from flowlab.services.report import format_device, format_streams

logger = get_logger(__name__)


def cmd_demo(args: argparse.Namespace) -> int:
    results = scenarios.run_all()
    for result in results:
        print(f"{result.name} {'passed' if result.passed else 'failed'}")
    return 0 if all(r.passed for r in results) else 1


def cmd_run(args: argparse.Namespace) -> int:
    try:
        text = Path(args.file).read_text(encoding="utf-8")
    except OSError as e:
        logger.error("flowsheet_unreadable", file=args.file, error=str(e))
        print(f"Cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return 2

    try:
        spec = FlowsheetSpec.model_validate_json(text)
    except ValidationError as e:
        logger.error("invalid_flowsheet", file=args.file, errors=e.error_count())
        print(e, file=sys.stderr)
        return 2

    try:
        flowsheet = build_flowsheet(spec)
        result = run_flowsheet(flowsheet, order=args.order, stop_on_error=not args.keep_going)
    except FlowLabException as e:
        logger.error("flowsheet_failed", kind=e.kind.value, error=e.message, **e.details)
        print(e.message, file=sys.stderr)
        return 1
    except KeyError as e:
        logger.error("unknown_device", error=str(e))
        print(e.args[0], file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        for device_id, device in flowsheet.devices.items():
            print(format_device(device, device_id))
        print(format_streams(flowsheet.streams.values()))
        for error in result.errors:
            print(f"{error['device']}: {error['message']}", file=sys.stderr)
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flowlab", description="Flowsheet mass-balance engine")
    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="Run the reference scenarios")
    demo.set_defaults(func=cmd_demo)

    run = sub.add_parser("run", help="Run a flowsheet described in a JSON file")
    run.add_argument("file", help="Path to flowsheet JSON")
    run.add_argument(
        "--order",
        nargs="+",
        default=None,
        help="Device ids in calculation order (default: declaration order)",
    )
    run.add_argument(
        "--keep-going",
        action="store_true",
        help="Record device errors and continue instead of stopping.",
    )
    run.add_argument("--json", action="store_true", help="Print the result as JSON.")
    run.set_defaults(func=cmd_run)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
