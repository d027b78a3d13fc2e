"""Table optimizer CLI: analyze extracted tables, apply suggestions, export results."""
import argparse
import logging
import os
import sys
import traceback

from table_optimizer import Config, DEFAULT_CONFIG, TableOptimizer
from table_optimizer.export import save_csv, save_excel, save_json
from table_optimizer.extraction import load_tables
from table_optimizer.utils import set_log_level


PRIORITY_MARKS = {"high": "🔴", "medium": "🟡", "low": "⚪"}


def print_analysis(optimizer):
    analysis = optimizer.analyze()
    stats = analysis.stats
    print(f"\n📊 {stats.total_tables} table(s), {stats.unique_structures} structure(s), "
          f"{stats.small_tables} small, up to {stats.potential_merges} merge(s)")

    if not analysis.suggestions:
        print("✅ No optimization suggestions.")
        return analysis

    tables = optimizer.tables
    for s in analysis.suggestions:
        mark = PRIORITY_MARKS.get(s.priority.value, "")
        print(f"  {mark} [{s.id}] {s.title} ({s.type.value}, {s.priority.value})")
        print(f"      {s.impact}. {optimizer.generator.summarize(s, tables)}")
    return analysis


def apply_requested(optimizer, requested, max_rounds):
    """Apply suggestion ids in order, or keep applying the top one for 'all'."""
    if requested == ["all"]:
        for _ in range(max_rounds):
            analysis = optimizer.analyze()
            merges = [s for s in analysis.suggestions if s.is_merge]
            if not merges:
                break
            change = optimizer.apply_by_id(merges[0].id)
            if change is None:
                break
            print(f"✅ {change.description}")
        return

    for suggestion_id in requested:
        change = optimizer.apply_by_id(suggestion_id)
        if change is None:
            print(f"⚠️  Suggestion {suggestion_id} not applicable to the current tables")
        else:
            print(f"✅ {change.description}")


def export_tables(tables, output_dir, fmt):
    os.makedirs(output_dir, exist_ok=True)
    if fmt == "csv":
        paths = save_csv(tables, output_dir)
        print(f"🧾 {len(paths)} CSV file(s) written to: {output_dir}")
    elif fmt == "xlsx":
        path = save_excel(tables, os.path.join(output_dir, "tables.xlsx"))
        print(f"🧾 Workbook written to: {path}")
    else:
        path = save_json(tables, os.path.join(output_dir, "tables.json"))
        print(f"🧾 JSON written to: {path}")


def main():
    parser = argparse.ArgumentParser(description="Suggest and apply merges for extracted tables")
    parser.add_argument("input", nargs="?", help="JSON extraction result (or list of tables).")
    parser.add_argument("-a", "--apply", nargs="+", metavar="ID",
                        help="Suggestion ids to apply in order, or 'all' to merge until nothing is left.")
    parser.add_argument("--max-rounds", type=int, default=20, help="Upper bound for --apply all.")
    parser.add_argument("-c", "--config", help="JSON file with optimizer settings.")
    parser.add_argument("-o", "--output-dir", help="Write the resulting tables to this folder.")
    parser.add_argument("-f", "--format", choices=["csv", "json", "xlsx"], default="json",
                        help="Export format for --output-dir (default: json).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--serve-api", action="store_true", help="Start the HTTP API server instead.")
    parser.add_argument("--api-host", default="0.0.0.0", help="Host for the API server (default: 0.0.0.0).")
    parser.add_argument("--api-port", type=int, default=5000, help="Port for the API server (default: 5000).")

    args = parser.parse_args()
    set_log_level(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.serve_api:
            from api import app

            print(f"🌐 Starting API server on {args.api_host}:{args.api_port} ...")
            app.run(host=args.api_host, port=args.api_port)
            return

        if not args.input:
            parser.error("input is required unless --serve-api is set")

        config = Config.from_file(args.config) if args.config else DEFAULT_CONFIG
        result = load_tables(args.input)
        for warning in result.warnings:
            print(f"⚠️  {warning.type}: {warning.message}")

        optimizer = TableOptimizer(result.tables, config=config)
        print_analysis(optimizer)

        if args.apply:
            apply_requested(optimizer, args.apply, args.max_rounds)
            if optimizer.changes:
                print(f"\n♻️  {len(optimizer.changes)} change(s) applied, "
                      f"saved {optimizer.history.total_tables_saved} table(s)")
                print_analysis(optimizer)

        if args.output_dir:
            export_tables(optimizer.tables, args.output_dir, args.format)

    except Exception as e:
        print(f"\nERROR: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
