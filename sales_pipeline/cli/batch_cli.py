"""
Command-line interface for the sales cleaning and rollup pipeline.

Usage:
    python -m sales_pipeline.cli.batch_cli report --input <file_path> [options]
    python -m sales_pipeline.cli.batch_cli country --input <file_path> --name <country>
    python -m sales_pipeline.cli.batch_cli profile --input <file_path>
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import BaseModel
from pyspark.sql import SparkSession

from sales_pipeline.batch.cleaner import find_duplicate_groups
from sales_pipeline.batch.pipeline import BatchPipeline
from sales_pipeline.batch.profiler import profile_missing_values
from sales_pipeline.batch.readers import FileReader
from sales_pipeline.batch.reporter import Reporter
from sales_pipeline.observability.logger import get_logger
from sales_pipeline.utils.validation import (
    InputValidationError,
    validate_country_name,
    validate_file_path,
    validate_limit,
    validate_positive_number,
)


logger = get_logger(__name__)


def create_spark_session(app_name: str = "SalesPipeline") -> SparkSession:
    """
    Create Spark session for loading input files.

    Args:
        app_name: Application name

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master("local[*]") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()

    spark.sparkContext.setLogLevel("WARN")
    return spark


def build_pipeline(args: argparse.Namespace) -> BatchPipeline:
    return BatchPipeline(
        validation_rules_path=args.validation_rules,
        outlier_threshold=validate_positive_number(args.outlier_threshold, "outlier-threshold"),
        top_n=validate_limit(args.top_n, "top-n", max_limit=100),
    )


def load_reporter(spark: SparkSession, args: argparse.Namespace) -> Reporter:
    """Run the pipeline over the input file named in args."""
    pipeline = build_pipeline(args)
    return pipeline.process_file(spark, args.input, file_format=args.format)


def _as_dict(row: Any) -> dict[str, Any]:
    if isinstance(row, BaseModel):
        return row.model_dump(mode="json")
    return dict(row)


def render_rows(rows: Sequence[Any], output: str = "text") -> str:
    """
    Render a sequence of rows as an aligned text table or a JSON array.

    Args:
        rows: Pydantic rows or mappings
        output: "text" or "json"

    Returns:
        Rendered table
    """
    dicts = [_as_dict(row) for row in rows]

    if output == "json":
        return json.dumps(dicts, indent=2)

    if not dicts:
        return "(no rows)"

    columns = list(dicts[0].keys())
    cells = [["" if d[c] is None else str(d[c]) for c in columns] for d in dicts]
    widths = [max(len(c), *(len(row[i]) for row in cells)) for i, c in enumerate(columns)]

    lines = [
        "  ".join(c.ljust(w) for c, w in zip(columns, widths)),
        "  ".join("-" * w for w in widths),
    ]
    lines.extend("  ".join(v.ljust(w) for v, w in zip(row, widths)) for row in cells)
    return "\n".join(lines)


def render_quality(reporter: Reporter, output: str = "text") -> str:
    quality = reporter.data_quality
    summary = {
        "total_records": quality.total_records,
        "malformed_records": quality.malformed_records,
        "duplicates_removed": quality.duplicates_removed,
        "clean_records": quality.clean_records,
        **{f"rejected_{reason.value}": count for reason, count in quality.rejections.items()},
    }

    if output == "json":
        return json.dumps(summary, indent=2)
    return "\n".join(f"{key}: {value}" for key, value in summary.items())


def render_report(reporter: Reporter, view: str | None = None, output: str = "text", limit: int = 10) -> str:
    """Render one named view, or every view plus the data quality summary."""
    if view == "top_countries":
        return render_rows(reporter.top_countries(limit), output)
    if view == "data_quality":
        return render_quality(reporter, output)
    if view is not None:
        return render_rows(reporter.views[view], output)

    if output == "json":
        document = {name: [_as_dict(r) for r in rows] for name, rows in reporter.views.items()}
        document["data_quality"] = json.loads(render_quality(reporter, "json"))
        return json.dumps(document, indent=2)

    sections = [f"== data_quality ==\n{render_quality(reporter)}"]
    for name, rows in reporter.views.items():
        sections.append(f"== {name} ==\n{render_rows(rows)}")
    return "\n\n".join(sections)


def _check_input(args: argparse.Namespace) -> None:
    args.input = validate_file_path(args.input, "input", allow_wildcards=True)
    if not any(ch in args.input for ch in "*?") and not Path(args.input).exists():
        raise InputValidationError(f"Input file not found: {args.input}")


def report_command(args: argparse.Namespace) -> int:
    spark = create_spark_session("SalesPipeline-report")
    try:
        reporter = load_reporter(spark, args)
        print(render_report(reporter, view=args.view, output=args.output, limit=args.limit))
    finally:
        spark.stop()
    return 0


def country_command(args: argparse.Namespace) -> int:
    country = validate_country_name(args.name)
    spark = create_spark_session("SalesPipeline-country")
    try:
        reporter = load_reporter(spark, args)
    finally:
        spark.stop()

    row = reporter.country_sales(country)
    if row is None:
        logger.error(f"No clean sales found for country: {country}")
        return 1

    print(render_rows([row], args.output))
    return 0


def profile_command(args: argparse.Namespace) -> int:
    spark = create_spark_session("SalesPipeline-profile")
    try:
        raw_rows = FileReader(spark).read_rows(args.input, file_format=args.format)
    finally:
        spark.stop()

    print(render_profile(raw_rows, build_pipeline(args), args.output))
    return 0


def render_profile(raw_rows: Sequence[Any], pipeline: BatchPipeline, output: str = "text") -> str:
    """Render missing values and duplicate groups of the raw rows."""
    missing = profile_missing_values(raw_rows)
    records, malformed = pipeline.parse_rows(raw_rows)
    duplicates = find_duplicate_groups(records)

    missing_rows = [{"field": f, "missing": n} for f, n in missing.missing_by_field.items()]
    duplicate_rows = [
        {"invoice_id": inv, "stock_code": code, "customer_id": cust, "count": n}
        for (inv, code, cust), n in duplicates.items()
    ]

    if output == "json":
        return json.dumps({
            "total_rows": missing.total_rows,
            "malformed_rows": malformed,
            "missing_values": missing_rows,
            "duplicate_groups": duplicate_rows,
        }, indent=2)

    return "\n".join([
        f"total_rows: {missing.total_rows}",
        f"malformed_rows: {malformed}",
        "",
        "== missing_values ==",
        render_rows(missing_rows),
        "",
        "== duplicate_groups ==",
        render_rows(duplicate_rows),
    ])


COMMANDS = {
    "report": report_command,
    "country": country_command,
    "profile": profile_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sales data cleaning and rollup pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print every rollup for a CSV export
  python -m sales_pipeline.cli.batch_cli report --input data/sales.csv

  # Daily revenue only, as JSON
  python -m sales_pipeline.cli.batch_cli report --input data/sales.csv \\
      --view daily_revenue --output json

  # Summary for a single country
  python -m sales_pipeline.cli.batch_cli country --input data/sales.csv --name "United Kingdom"

  # Missing values and duplicate groups in the raw file
  python -m sales_pipeline.cli.batch_cli profile --input data/sales.csv
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--input", required=True, help="Path to input file")
    common.add_argument(
        "--format",
        default="csv",
        choices=["csv", "json", "parquet"],
        help="Input file format (default: csv)"
    )
    common.add_argument(
        "--validation-rules",
        default=None,
        help="Path to validation rules YAML file (default: built-in sales rules)"
    )
    common.add_argument(
        "--output",
        default="text",
        choices=["text", "json"],
        help="Output format (default: text)"
    )
    common.add_argument(
        "--outlier-threshold",
        default="10000",
        help="Quantity or unit price above which a record is an outlier (default: 10000)"
    )
    common.add_argument(
        "--top-n",
        type=int,
        default=3,
        help="Customer ranks kept per country (default: 3)"
    )

    report_parser = subparsers.add_parser("report", parents=[common], help="Print rollup views")
    report_parser.add_argument(
        "--view",
        default=None,
        choices=[*Reporter.VIEW_NAMES, "top_countries", "data_quality"],
        help="Single view to print (default: all)"
    )
    report_parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Rows for the top_countries view (default: 10)"
    )

    country_parser = subparsers.add_parser("country", parents=[common], help="Summary for one country")
    country_parser.add_argument("--name", required=True, help="Country name")

    subparsers.add_parser("profile", parents=[common], help="Profile the raw input file")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        _check_input(args)
        return COMMANDS[args.command](args)
    except ValueError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Error during batch processing: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
