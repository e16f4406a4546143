"""
Command-line interface for Catalogen.

Provides the build command plus a few read-only views of the catalog
(records, categories, planned routes) for checking data before a build.

I'm the part you actually type. Keep it short and I'll keep the
output short too.
"""

import argparse
import json
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional

from catalogen import __version__
from catalogen.config import CatalogConfig

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s" if not verbose else "%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _get_config(args: argparse.Namespace) -> CatalogConfig:
    """Build CatalogConfig from CLI args."""
    base_path = getattr(args, "base_path", None)
    config = CatalogConfig(base_path=Path(base_path)) if base_path else CatalogConfig()

    seed = getattr(args, "seed", None)
    if seed is not None:
        config.set("similarity", "seed", str(seed))
    return config


def _get_builder(args: argparse.Namespace):
    from catalogen.builder import CatalogBuilder

    config = _get_config(args)
    return CatalogBuilder(
        config=config,
        data_dir=getattr(args, "data_dir", None),
        output_dir=getattr(args, "output_dir", None),
    )


def _print_json(data: object) -> None:
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


# ─── Command Handlers ────────────────────────────────────────────────

def cmd_build(args: argparse.Namespace) -> int:
    """Build routes and data artifacts."""
    builder = _get_builder(args)
    dry_run = getattr(args, "dry_run", False)
    parallel = getattr(args, "parallel", None)

    print(f"📦 Building catalog from {builder.data_dir}...")
    result = builder.build(parallel=parallel, dry_run=dry_run)
    summary = result.summary()

    print(f"  ✅ Records: {summary['records']}")
    print(f"     Categories: {summary['categories']}")
    print(f"     Routes: {summary['routes']} ({summary['item_routes']} item pages)")
    if dry_run:
        print("     Dry run: nothing written")
    else:
        print(f"     Manifest: {summary['manifest']}")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List loaded records."""
    records = _get_builder(args).load()

    if getattr(args, "json_output", False):
        _print_json([r.metadata() for r in records])
        return 0

    if not records:
        print("No records found.")
        return 0

    for record in records:
        labels = ", ".join(record.labels) or "-"
        slug = record.slug or "(no slug)"
        print(f"  {slug:<30} {record.name or record.title:<30} [{labels}]")
    print(f"\n  Total: {len(records)}")
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """Show categories with member counts and paths."""
    from catalogen.category_index import build_category_index
    from catalogen.records import normalize_label

    builder = _get_builder(args)
    index = build_category_index(builder.load())
    base = builder.config.base_route.rstrip("/")

    rows = [
        {
            "name": label,
            "count": len(members),
            "permalink": f"{base}/categories/{normalize_label(label)}/",
        }
        for label, members in index.items()
    ]

    if getattr(args, "json_output", False):
        _print_json(rows)
        return 0

    if not rows:
        print("No categories found.")
        return 0

    for row in rows:
        print(f"  {row['name']:<30} {row['count']:>4}  {row['permalink']}")
    return 0


def cmd_routes(args: argparse.Namespace) -> int:
    """Show the planned route table without writing anything."""
    result = _get_builder(args).build(dry_run=True)

    if getattr(args, "json_output", False):
        _print_json([r.to_dict() for r in result.routes])
        return 0

    for route in result.routes:
        print(f"  {route.page_kind.value:<17} {route.path}")
    print(f"\n  Total: {len(result.routes)}")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show configuration status."""
    config = _get_config(args)
    _print_json(config.get_status())
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    """Remove generated artifacts."""
    builder = _get_builder(args)
    output_dir = builder.output_dir

    if output_dir.exists():
        shutil.rmtree(output_dir)
        print(f"  🗑️  Removed {output_dir}")
    else:
        print("  Nothing to clean")
    return 0


# ─── Argument Parser ─────────────────────────────────────────────────

def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d", "--data-dir", dest="data_dir", help="Catalog data directory override"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="catalogen",
        description="📦 Catalogen — Catalog indexing and route generation for static sites",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  catalogen build               # Write routes and data artifacts\n"
            "  catalogen build --seed 7      # Reproducible related items\n"
            "  catalogen routes              # Show planned routes\n"
            "  catalogen categories -j       # Categories as JSON\n"
            "  catalogen status              # Show configuration\n"
        ),
    )

    parser.add_argument(
        "--version", action="version", version=f"catalogen {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--base-path", dest="base_path", help="Override site base directory"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ─── build ────────────────────────────────
    build_cmd = subparsers.add_parser("build", help="Build routes and data artifacts")
    _add_source_args(build_cmd)
    build_cmd.add_argument(
        "-o", "--output-dir", dest="output_dir", help="Artifact output directory override"
    )
    build_cmd.add_argument(
        "--seed", type=int, help="Seed for related-item selection"
    )
    build_cmd.add_argument(
        "-p", "--parallel", type=int, help="Number of parallel workers"
    )
    build_cmd.add_argument(
        "--dry-run", dest="dry_run", action="store_true", help="Validate without writing"
    )

    # ─── list ─────────────────────────────────
    list_cmd = subparsers.add_parser("list", help="List catalog records")
    _add_source_args(list_cmd)
    list_cmd.add_argument("-j", "--json", dest="json_output", action="store_true")

    # ─── categories ───────────────────────────
    categories_cmd = subparsers.add_parser("categories", help="List categories")
    _add_source_args(categories_cmd)
    categories_cmd.add_argument("-j", "--json", dest="json_output", action="store_true")

    # ─── routes ───────────────────────────────
    routes_cmd = subparsers.add_parser("routes", help="Show planned routes")
    _add_source_args(routes_cmd)
    routes_cmd.add_argument(
        "--seed", type=int, help="Seed for related-item selection"
    )
    routes_cmd.add_argument("-j", "--json", dest="json_output", action="store_true")

    # ─── status ───────────────────────────────
    subparsers.add_parser("status", help="Show configuration status")

    # ─── clean ────────────────────────────────
    clean_cmd = subparsers.add_parser("clean", help="Remove generated artifacts")
    clean_cmd.add_argument(
        "-o", "--output-dir", dest="output_dir", help="Artifact output directory override"
    )

    return parser


# ─── Main Entry Point ────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(verbose=getattr(args, "verbose", False))

    command = args.command

    if not command:
        parser.print_help()
        return 0

    handlers = {
        "build": cmd_build,
        "list": cmd_list,
        "categories": cmd_categories,
        "routes": cmd_routes,
        "status": cmd_status,
        "clean": cmd_clean,
    }

    handler = handlers.get(command)
    if not handler:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted.")
        return 130
    except Exception as e:
        if getattr(args, "verbose", False):
            logger.exception("Error: %s", e)
        else:
            print(f"\n❌ Error: {e}")
            print("   Run with -v for details.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
