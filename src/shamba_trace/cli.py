"""Command-line interface for shamba-trace."""

import argparse
import json
import sys
from pathlib import Path

from shamba_trace import __version__
from shamba_trace.analytics import aggregate
from shamba_trace.config import TraceConfig
from shamba_trace.exceptions import ShambaTraceError
from shamba_trace.payloads import PayloadBuilder
from shamba_trace.rendering import render_png
from shamba_trace.traceability import compose_traceability_id
from shamba_trace.verification import verify_traceability_id


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shamba-trace",
        description="Issue and verify Shamba2Shelf traceability codes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"shamba-trace {__version__}",
    )
    parser.add_argument(
        "--base-url",
        help="Site origin for QR links (default: SHAMBA_TRACE_BASE_URL env var)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    compose = commands.add_parser("compose", help="Compose a traceability id")
    compose.add_argument("product_id")
    compose.add_argument("farmer_id")
    compose.add_argument("--timestamp", type=int, help="Epoch milliseconds (default: now)")

    verify = commands.add_parser("verify", help="Verify a traceability id")
    verify.add_argument("traceability_id")
    verify.add_argument("product_id")
    verify.add_argument("farmer_id")
    verify.add_argument("--json", action="store_true", help="Output as JSON")

    build = commands.add_parser("build", help="Build QR payloads from a product/farmer JSON file")
    build.add_argument("path", help='JSON file with "product" and "farmer" objects')
    build.add_argument("--png", help="Write the verification QR code to this PNG file")

    analytics = commands.add_parser("analytics", help="Summarize a JSON list of built payloads")
    analytics.add_argument("path")
    analytics.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = _build_parser().parse_args(argv)
    config = TraceConfig.from_env()
    if args.base_url:
        config = TraceConfig(base_url=args.base_url, max_workers=config.max_workers)

    try:
        if args.command == "compose":
            print(compose_traceability_id(args.product_id, args.farmer_id, args.timestamp))
            return 0
        if args.command == "verify":
            return _verify(args)
        if args.command == "build":
            return _build(args, config)
        return _analytics(args)
    except ShambaTraceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _verify(args) -> int:
    result = verify_traceability_id(args.traceability_id, args.product_id, args.farmer_id)
    if args.json:
        print(result.model_dump_json(indent=2, by_alias=True, exclude_none=True))
    else:
        print(f"  {'Valid:':<12} {'yes' if result.valid else 'no'}")
        print(f"  {'Reason:':<12} {result.reason}")
        if result.generated_at:
            print(f"  {'Generated:':<12} {result.generated_at.isoformat()}")
    return 0 if result.valid else 1


def _build(args, config: TraceConfig) -> int:
    document = json.loads(Path(args.path).read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ShambaTraceError("build input must be a JSON object")
    payload = PayloadBuilder(config).build_product_payload(document.get("product"), document.get("farmer"))
    if args.png:
        Path(args.png).write_bytes(render_png(payload.verification_url, payload.qr_options))
    print(payload.model_dump_json(indent=2, by_alias=True))
    return 0


def _analytics(args) -> int:
    document = json.loads(Path(args.path).read_text(encoding="utf-8"))
    if not isinstance(document, list):
        raise ShambaTraceError("analytics input must be a JSON list")
    summary = aggregate(document)
    if args.json:
        print(summary.model_dump_json(indent=2, by_alias=True))
    else:
        _print_formatted(summary)
    return 0


def _print_formatted(summary) -> None:
    """Print analytics in human-readable format."""
    print()
    print("  shamba-trace analytics")
    print()
    print(f"  {'Total:':<18} {summary.total_generated}")
    print(f"  {'Skipped:':<18} {summary.skipped}")
    sections = [
        ("Varieties", summary.varieties),
        ("Counties", summary.counties),
        ("Processing", summary.processing_methods),
        ("Certifications", summary.certifications),
        ("Quality", summary.quality_distribution.model_dump()),
    ]
    for label, counts in sections:
        print(f"  {label + ':':<18} {_format_counts(counts) or '-'}")
    print()


def _format_counts(counts: dict[str, int]) -> str:
    return ", ".join(f"{key} {value}" for key, value in counts.items())


if __name__ == "__main__":
    sys.exit(main())
