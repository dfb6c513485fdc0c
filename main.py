#!/usr/bin/env python3
"""
CARPARTS - Vehicle models & replacement parts catalog
======================================================

Command line front end:  python main.py <command> ...

    search {models,parts} [TERM]      substring search (empty → all)
    model-links ID                    parts compatible with a model
    part-links ID                     models compatible with a part
    add-model NAME [--part ID ...]    new model linked to parts
    add-part PN NAME [--model ID ...] new part linked to models
    delete-model ID / delete-part ID  remove with all links
    import CSV [CSV ...]              bulk import spreadsheet rows
    clean                             remove every row
    build-seed OUT CSV [CSV ...]      write a seed snapshot from CSVs

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import config
from import_engine import ImportReport
from persistence import (
    CsvSeedSource, FileSnapshotStore, SeedUnavailable, seed_source_from_config,
)
from services import CatalogService, CatalogError, QueryError, SearchKind


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="carparts", description="Car parts catalog")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="Search models or parts")
    p.add_argument("kind", choices=[k.value for k in SearchKind])
    p.add_argument("term", nargs="?", default="")

    p = sub.add_parser("model-links", help="Parts compatible with a model")
    p.add_argument("id", type=int)

    p = sub.add_parser("part-links", help="Models compatible with a part")
    p.add_argument("id", type=int)

    p = sub.add_parser("add-model", help="Add a model")
    p.add_argument("name")
    p.add_argument("--part", dest="parts", type=int, action="append", default=[],
                   help="Compatible part id (repeatable)")

    p = sub.add_parser("add-part", help="Add a part")
    p.add_argument("part_number")
    p.add_argument("name")
    p.add_argument("--model", dest="models", type=int, action="append", default=[],
                   help="Compatible model id (repeatable)")

    p = sub.add_parser("delete-model", help="Delete a model and its links")
    p.add_argument("id", type=int)

    p = sub.add_parser("delete-part", help="Delete a part and its links")
    p.add_argument("id", type=int)

    p = sub.add_parser("import", help="Import CSV files into the catalog")
    p.add_argument("files", nargs="+", type=Path)

    sub.add_parser("clean", help="Delete every model, part and link")

    p = sub.add_parser("build-seed", help="Build a seed snapshot from CSV files")
    p.add_argument("out", type=Path)
    p.add_argument("files", nargs="+", type=Path)

    return parser


# ── Output helpers ─────────────────────────────────────────────────────

def _primary(flag: bool) -> str:
    return " (Primary)" if flag else ""


def _print_report(report: ImportReport) -> None:
    print(f"  Done: {report.imported} imported, {report.existing} existing, "
          f"{report.skipped} skipped / {report.total_rows} rows")
    if report.errors:
        print("  First errors (max 10):")
        for err in report.errors[:10]:
            print(f"    Row {err['row']}: {err['reason']}")


# ── Commands ───────────────────────────────────────────────────────────

def _run_catalog_command(catalog: CatalogService, args) -> None:
    cmd = args.command

    if cmd == "search":
        kind = SearchKind(args.kind)
        for row in catalog.search(kind, args.term):
            if kind is SearchKind.MODEL:
                print(f"{row.id:>6}  {row.name}")
            else:
                print(f"{row.id:>6}  {row.label}")

    elif cmd == "model-links":
        model = catalog.get_model(args.id)
        print(model.name)
        for link in catalog.links_for_model(args.id):
            print(f"  {link.part_name} ({link.part_number}){_primary(link.is_primary)}")

    elif cmd == "part-links":
        part = catalog.get_part(args.id)
        print(part.label)
        for link in catalog.links_for_part(args.id):
            print(f"  {link.model_name}{_primary(link.is_primary)}")

    elif cmd == "add-model":
        model_id = catalog.create_model(args.name, args.parts)
        print(f"Added model {model_id}: {args.name}")

    elif cmd == "add-part":
        part_id = catalog.create_part(args.part_number, args.name, args.models)
        print(f"Added part {part_id}: {args.name} ({args.part_number})")

    elif cmd == "delete-model":
        catalog.delete_model(args.id)
        print(f"Deleted model {args.id}")

    elif cmd == "delete-part":
        catalog.delete_part(args.id)
        print(f"Deleted part {args.id}")

    elif cmd == "import":
        report = catalog.import_rows(*(f.read_bytes() for f in args.files))
        _print_report(report)

    elif cmd == "clean":
        counts = catalog.clear()
        print(f"Catalog cleaned: {counts['models']} models, "
              f"{counts['parts']} parts, {counts['links']} links removed")


def build_seed(out: Path, files: list[Path]) -> ImportReport:
    """Import CSV files into an empty store and write its snapshot to ``out``."""
    source = CsvSeedSource(*files)
    data = source.fetch()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    print(f"  Generated seed {out} ({len(data)} bytes)")
    return source.report


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "build-seed":
            _print_report(build_seed(args.out, args.files))
            return 0

        catalog = CatalogService(FileSnapshotStore(config.DATA_DIR),
                                 seed_source_from_config())
        with catalog:
            _run_catalog_command(catalog, args)
    except (CatalogError, QueryError, SeedUnavailable, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
