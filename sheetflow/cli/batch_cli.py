"""
Command-line interface for batch processing.

Usage:
    python -m sheetflow.cli.batch_cli process --entity <entity> --input <file_path> [options]
    python -m sheetflow.cli.batch_cli rules --entity <entity> [--rules <rules.yaml>]
"""

import argparse
import sys
from pathlib import Path

from py4j.protocol import Py4JJavaError
from pydantic import ValidationError
from pyspark.errors import PySparkException
from pyspark.sql import SparkSession

from sheetflow.batch import InMemorySink, RecordPipeline, SparkFileSink, SparkFileSource
from sheetflow.config import PipelineSettings
from sheetflow.core.errors import ContractError
from sheetflow.core.models import RunReport
from sheetflow.core.profiles import PROFILES, EntityProfile, get_profile
from sheetflow.core.rules import RuleConfigLoader
from sheetflow.observability.logger import get_logger, setup_logger
from sheetflow.observability.metrics import start_metrics_server

logger = get_logger(__name__)

FILE_FORMATS = ["csv", "json", "parquet"]


def create_spark_session(app_name: str = "sheetflow", master: str = "local[*]") -> SparkSession:
    """
    Create Spark session for batch processing.

    Args:
        app_name: Application name
        master: Spark master URL

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master(master) \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.sql.adaptive.coalescePartitions.enabled", "true") \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()

    return spark


def load_rules(profile: EntityProfile, rules_path: str | None) -> list[dict] | None:
    """
    Load a replacement rule set from YAML, None to keep the built-in rules.

    Raises:
        ContractError: If the file targets another entity or is malformed
    """
    if not rules_path:
        return None
    loader = RuleConfigLoader(rules_path)
    rules = loader.load_rules()
    if loader.entity and loader.entity.lower() != profile.name:
        raise ContractError(f"Rule file {rules_path} is for entity '{loader.entity}', not '{profile.name}'")
    logger.info(f"Loaded {len(rules)} rules from {rules_path}")
    return rules


def print_report(report: RunReport) -> None:
    """Print a run report as a readable table."""
    print(f"\n{'=' * 60}")
    print(f"{report.entity.upper()} PIPELINE: {report.state.value.upper()}")
    print(f"{'=' * 60}\n")
    print(f"  Records read:      {report.read:>8}")
    print(f"  Rows skipped:      {report.skipped_rows:>8}")
    print(f"  Valid records:     {report.valid:>8}")
    print(f"  Rejected records:  {report.rejected:>8}")
    print(f"  Records written:   {report.written:>8}")

    if report.violations_by_field:
        print("\nViolations by field:")
        for field_name, count in sorted(report.violations_by_field.items(), key=lambda item: -item[1]):
            print(f"  {field_name:<30} {count:>8}")

    summary = report.summary
    if summary is not None:
        print("\nSummary:")
        for field_name, value in summary.means.items():
            print(f"  Mean {field_name:<25} {value:>12.2f}")
        if summary.sum_field:
            print(f"  Total {summary.sum_field:<24} {summary.total:>12}")
        if summary.status_counts:
            print("\n  By status:")
            for status, count in summary.status_counts.items():
                print(f"    {getattr(status, 'value', status):<28} {count:>8}")
        if summary.group_stats:
            print("\n  By group:")
            for key, stats in summary.group_stats.items():
                print(f"    {str(getattr(key, 'value', key)):<28} {stats.count:>8}")
        if summary.histogram:
            print("\n  Histogram:")
            for label, count in summary.histogram.items():
                print(f"    {label:<28} {count:>8}")
        if summary.top_records:
            print("\n  Top records:")
            for record in summary.top_records:
                print(f"    {record.format()}")

    if report.error is not None:
        print(f"\nError: {report.error}")

    print("\nStage timings:")
    for stage, seconds in report.elapsed_per_stage.items():
        print(f"  {stage:<30} {seconds:>10.3f}s")
    print(f"\n{'=' * 60}\n")


def process_command(args, settings: PipelineSettings) -> int:
    """
    Execute batch processing command.

    Args:
        args: Command-line arguments
        settings: Environment settings (overridden by explicit options)

    Returns:
        Process exit code
    """
    profile = get_profile(args.entity)
    logger.info(f"Starting batch processing for entity: {profile.name}")
    logger.info(f"Input file: {args.input}")

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    rules = load_rules(profile, args.rules)
    top_n = args.top_n if args.top_n is not None else settings.top_n
    pipeline = RecordPipeline(profile, rules=rules, top_n=top_n)

    logger.info("Creating Spark session...")
    try:
        spark = create_spark_session(f"sheetflow-{profile.name}", settings.spark_master)
    except (PySparkException, Py4JJavaError) as e:
        logger.error(f"Cannot start Spark session: {e}")
        return 1

    try:
        source = SparkFileSource(spark, input_path, profile, file_format=args.format)
        if args.output:
            sink = SparkFileSink(spark, args.output, profile, file_format=args.output_format)
        else:
            logger.info("DRY RUN MODE: no --output given, accepted records are not written")
            sink = InMemorySink()

        report = pipeline.run(source, sink)
        print_report(report)
        return 0 if report.succeeded else 1
    finally:
        spark.stop()


def rules_command(args) -> int:
    """
    List the active rule set of an entity.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    profile = get_profile(args.entity)
    engine = profile.rule_engine(load_rules(profile, args.rules))
    summary = engine.get_rule_summary()

    print(f"\n{'=' * 80}")
    print(f"RULES FOR {profile.name.upper()} ({summary['total_rules']} active)")
    print(f"{'=' * 80}\n")
    print(f"{'Field':<20} {'Rule':<30} {'Type':<15} {'Severity':<9} {'Stops'}")
    print(f"{'-' * 80}")
    for rule in engine.describe_rules():
        stops = "yes" if rule["short_circuit"] else "no"
        print(
            f"{rule['field_name']:<20} {rule['rule_name']:<30} "
            f"{rule['rule_type']:<15} {rule['severity']:<9} {stops}"
        )
    print(f"\n{'=' * 80}\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record validation, normalization and aggregation pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate and summarize events, writing accepted records as CSV
  python -m sheetflow.cli.batch_cli process --entity event --input data/events.csv \\
      --output out/events

  # Dry run (validate and summarize, don't write)
  python -m sheetflow.cli.batch_cli process --entity employee --input data/employees.csv

  # Process with custom validation rules
  python -m sheetflow.cli.batch_cli process --entity event --input data/events.json \\
      --format json --rules config/event_rules.yaml --output out/events

  # List the active rules
  python -m sheetflow.cli.batch_cli rules --entity reservation
        """
    )
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--log-format", choices=["json", "text"], help="Log format (default: LOG_FORMAT or json)")
    parser.add_argument("--env-file", help="Path to a .env file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Process an entity file")
    process_parser.add_argument("--entity", required=True, choices=sorted(PROFILES), help="Entity type")
    process_parser.add_argument("--input", required=True, help="Path to input file")
    process_parser.add_argument(
        "--format",
        default="csv",
        choices=FILE_FORMATS,
        help="Input file format (default: csv)"
    )
    process_parser.add_argument("--output", help="Output directory for accepted records (omit for a dry run)")
    process_parser.add_argument(
        "--output-format",
        default="csv",
        choices=FILE_FORMATS,
        help="Output file format (default: csv)"
    )
    process_parser.add_argument("--rules", help="Path to a rules YAML file replacing the built-in rules")
    process_parser.add_argument("--top-n", type=int, help="Top-ranked records in the summary (default: SHEETFLOW_TOP_N or 5)")
    process_parser.add_argument("--metrics-port", type=int, help="Expose Prometheus metrics on this port")

    rules_parser = subparsers.add_parser("rules", help="List the active rules of an entity")
    rules_parser.add_argument("--entity", required=True, choices=sorted(PROFILES), help="Entity type")
    rules_parser.add_argument("--rules", help="Path to a rules YAML file replacing the built-in rules")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = PipelineSettings.from_env(args.env_file)
    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        return 2

    setup_logger(level=args.log_level or settings.log_level, format_type=args.log_format or settings.log_format)

    try:
        if args.command == "process":
            metrics_port = args.metrics_port or settings.metrics_port
            if metrics_port:
                start_metrics_server(metrics_port)
                logger.info(f"Metrics exposed on port {metrics_port}")
            return process_command(args, settings)
        if args.command == "rules":
            return rules_command(args)
    except (ContractError, FileNotFoundError) as e:
        logger.error(f"Configuration error: {e}")
        return 2

    return 1


if __name__ == "__main__":
    sys.exit(main())
