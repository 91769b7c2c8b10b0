"""Command-line interface for brandlattice.

Validates manifest files against the predicate set and measures distances
between visual states.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from brandlattice.core.config.loader import (
    configure_logging,
    load_app_config,
    load_brand_profile,
    load_manifest,
)
from brandlattice.core.config.models import AppConfig
from brandlattice.core.errors import BrandLatticeError
from brandlattice.core.manifold import category_distances, is_on_brand
from brandlattice.core.models import BrandProfile, Manifest
from brandlattice.core.utils.json import write_json
from brandlattice.core.validation import (
    LatticeValidator,
    Severity,
    ValidationResult,
    distance_to_ground_state,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_INPUT_ERROR = 2

_SEVERITY_STYLE = {Severity.ERROR: "red", Severity.WARNING: "yellow"}


def _load_config(args: argparse.Namespace) -> AppConfig:
    config = load_app_config(args.config)
    if args.verbose:
        config = config.model_copy(
            update={"logging": config.logging.model_copy(update={"level": "DEBUG"})}
        )
    configure_logging(config)
    return config


def _with_profile(manifest: Manifest, profile: BrandProfile | None) -> Manifest:
    """Attach a brand profile unless the manifest already embeds one."""
    if profile is None or isinstance(manifest.profile, BrandProfile):
        return manifest
    return manifest.model_copy(update={"profile": profile})


def _result_to_dict(
    path: str, result: ValidationResult, profile: BrandProfile | None, escape_path: bool
) -> dict[str, Any]:
    report: dict[str, Any] = {
        "file": path,
        "valid": result.valid,
        "violations": [v.model_dump(mode="json") for v in result.violations],
        "repairs": [
            {
                "predicate": r.predicate,
                "description": r.description,
                "repaired": r.repaired.model_dump(mode="json", by_alias=True, exclude_none=True),
            }
            for r in result.repairs
        ],
    }
    if profile is not None:
        report["on_brand"] = is_on_brand(result.manifest, profile)
    if escape_path and result.escape_path is not None:
        report["escape_path"] = [
            {
                "step": s.step,
                "energy": s.energy,
                "state": s.state.model_dump(mode="json", by_alias=True, exclude_none=True),
            }
            for s in result.escape_path
        ]
    return report


def _print_results(
    paths: list[str],
    results: list[ValidationResult],
    profile: BrandProfile | None,
    escape_path: bool,
) -> None:
    table = Table(title="Manifest validation")
    table.add_column("File")
    table.add_column("Valid")
    table.add_column("Violations")
    table.add_column("Repairs", justify="right")
    if profile is not None:
        table.add_column("On brand")

    for path, result in zip(paths, results, strict=True):
        violations = "\n".join(
            f"[{_SEVERITY_STYLE[v.severity]}]{v.predicate}[/]: {escape(v.message)}"
            for v in result.violations
        )
        row = [
            escape(path),
            "[green]yes[/green]" if result.valid else "[red]no[/red]",
            violations or "-",
            str(len(result.repairs)),
        ]
        if profile is not None:
            row.append("yes" if is_on_brand(result.manifest, profile) else "no")
        table.add_row(*row)

    console.print(table)

    if not escape_path:
        return

    for path, result in zip(paths, results, strict=True):
        if result.escape_path is None:
            continue
        steps = Table(title=f"Escape path: {path}")
        steps.add_column("Step", justify="right")
        steps.add_column("Energy", justify="right")
        steps.add_column("Distance to ground", justify="right")
        for step in result.escape_path:
            steps.add_row(
                str(step.step),
                str(step.energy),
                f"{distance_to_ground_state(step.state):.1f}",
            )
        console.print(steps)


def run_validate(args: argparse.Namespace) -> int:
    """Validate manifest files.

    Returns:
        Exit code: 0 if all valid, 1 if any invalid, 2 on input errors
    """
    try:
        config = _load_config(args)
        profile = load_brand_profile(args.brand) if args.brand else None
        manifests = [_with_profile(load_manifest(p), profile) for p in args.manifests]
        validator = LatticeValidator(ground_state_variant=config.validator.ground_state_variant)
    except (BrandLatticeError, ValidationError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_INPUT_ERROR

    results = asyncio.run(
        validator.validate_many(manifests, max_concurrency=config.validator.max_concurrency)
    )
    paths = [str(p) for p in args.manifests]

    if args.json or args.output:
        report = [
            _result_to_dict(path, result, profile, args.escape_path)
            for path, result in zip(paths, results, strict=True)
        ]
        if args.output:
            write_json(Path(args.output), report)
            logger.info("Wrote validation report to %s", args.output)
        if args.json:
            console.print_json(data=report)
    if not args.json:
        _print_results(paths, results, profile, args.escape_path)

    return EXIT_OK if all(r.valid for r in results) else EXIT_INVALID


def run_distance(args: argparse.Namespace) -> int:
    """Print the distance between two manifests and their brand status."""
    try:
        _load_config(args)
        first = load_manifest(args.first)
        second = load_manifest(args.second)
        profile = load_brand_profile(args.brand) if args.brand else None
    except (BrandLatticeError, ValidationError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_INPUT_ERROR

    parts = category_distances(first, second)

    table = Table(title=f"{args.first} vs {args.second}")
    table.add_column("Category")
    table.add_column("Distance", justify="right")
    table.add_row("color", f"{parts.color:.4f}")
    table.add_row("layout", f"{parts.layout:.4f}")
    table.add_row("typography", f"{parts.typography:.4f}")
    table.add_row("motion", f"{parts.motion:.4f}")
    table.add_row("[bold]total[/bold]", f"[bold]{parts.total:.4f}[/bold]")
    console.print(table)

    if profile is not None:
        name = profile.name or "brand"
        for label, state in ((args.first, first), (args.second, second)):
            status = "[green]on[/green]" if is_on_brand(state, profile) else "[red]off[/red]"
            console.print(f"{label}: {status} {name}")

    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="brandlattice",
        description="brandlattice - constraint validation for visual manifests",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config JSON/YAML (default: brandlattice.json if present)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    validate = sub.add_parser("validate", help="Validate manifest files")
    validate.add_argument("manifests", nargs="+", help="Manifest files (.json, .yaml, .yml)")
    validate.add_argument("--brand", help="Brand profile file applied to every manifest")
    validate.add_argument("--json", action="store_true", help="Print results as JSON")
    validate.add_argument("--output", help="Also write the JSON report to this file")
    validate.add_argument(
        "--escape-path", action="store_true", help="Include escape paths for invalid manifests"
    )

    distance = sub.add_parser("distance", help="Distance between two manifests")
    distance.add_argument("first", help="First manifest file")
    distance.add_argument("second", help="Second manifest file")
    distance.add_argument("--brand", help="Brand profile file to test membership against")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "validate":
        sys.exit(run_validate(args))
    elif args.cmd == "distance":
        sys.exit(run_distance(args))


if __name__ == "__main__":
    main()
