"""
Batch processing pipeline orchestration.

Coordinates the flow: parse → validate → deduplicate → aggregate → report
"""

import time
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple

from pyspark.sql import SparkSession

from sales_pipeline.core.models import DataQualitySummary, SalesRecord
from sales_pipeline.core.rules import RuleConfigLoader, RuleEngine
from sales_pipeline.batch.aggregator import Aggregator
from sales_pipeline.batch.cleaner import Cleaner
from sales_pipeline.batch.profiler import DEFAULT_OUTLIER_THRESHOLD, find_outliers
from sales_pipeline.batch.readers import FileReader, MalformedRecordError, parse_sales_row
from sales_pipeline.batch.reporter import Reporter
from sales_pipeline.observability import metrics
from sales_pipeline.observability.logger import get_logger, log_operation


logger = get_logger(__name__)


class BatchPipeline:
    """
    Orchestrates one batch run over a fixed sequence of raw sales rows.

    Flow:
    1. Parse raw rows into SalesRecords (malformed rows dropped and counted)
    2. Classify records and drop invalid ones (counted per reason)
    3. Remove duplicates, keeping first occurrences
    4. Compute daily and country rollups
    5. Expose the rollups through a Reporter

    The Reporter is only returned once every stage has completed.
    """

    def __init__(
        self,
        rule_engine: Optional[RuleEngine] = None,
        validation_rules_path: Optional[str] = None,
        outlier_threshold: Decimal | int = DEFAULT_OUTLIER_THRESHOLD,
        top_n: int = 3,
    ):
        """
        Initialize batch pipeline.

        Args:
            rule_engine: Validator to use; takes precedence over validation_rules_path
            validation_rules_path: Path to validation rules YAML file
            outlier_threshold: Quantity/unit price above which a record is flagged
            top_n: Highest customer rank kept per country
        """
        if rule_engine is None:
            rule_engine = self._load_rule_engine(validation_rules_path)

        self.rule_engine = rule_engine
        self.cleaner = Cleaner(rule_engine)
        self.aggregator = Aggregator(top_n=top_n)
        self.outlier_threshold = outlier_threshold

    @staticmethod
    def _load_rule_engine(validation_rules_path: Optional[str]) -> RuleEngine:
        if validation_rules_path is None:
            return RuleEngine()

        if not Path(validation_rules_path).exists():
            logger.warning(f"Validation rules file not found, using default rules: {validation_rules_path}")
            return RuleEngine()

        rules = RuleConfigLoader(validation_rules_path).load_rules()
        logger.info(f"Loaded {len(rules)} validation rules from {validation_rules_path}")
        return RuleEngine(rules)

    def parse_rows(self, raw_rows: Iterable[Mapping[str, Any]]) -> Tuple[list[SalesRecord], int]:
        """
        Parse raw rows, dropping malformed ones.

        Args:
            raw_rows: Column name to value mappings in ingestion order

        Returns:
            Tuple of (parsed records, malformed row count)
        """
        records = []
        malformed = 0

        for row_number, raw in enumerate(raw_rows):
            try:
                records.append(parse_sales_row(raw, row_number))
            except MalformedRecordError as e:
                malformed += 1
                logger.warning(
                    f"Dropping malformed record: {e}",
                    extra={"row_number": e.row_number, "field_name": e.field_name},
                )

        return records, malformed

    def run(self, raw_rows: Iterable[Mapping[str, Any]]) -> Reporter:
        """
        Run the full pipeline over one batch.

        Args:
            raw_rows: Column name to value mappings in ingestion order

        Returns:
            Reporter over the batch's rollups and data quality summary
        """
        started = time.perf_counter()

        try:
            with log_operation("Parsing records", logger=logger) as op:
                records, malformed = self.parse_rows(raw_rows)
            metrics.observe_stage("parse", op.duration)

            with log_operation("Cleaning records", logger=logger, records=len(records)) as op:
                cleaning = self.cleaner.clean_with_report(records)
            metrics.observe_stage("clean", op.duration)

            with log_operation("Aggregating rollups", logger=logger, records=len(cleaning.records)) as op:
                rollups = self.aggregator.aggregate(cleaning.records)
                outliers = find_outliers(cleaning.records, self.outlier_threshold)
            metrics.observe_stage("aggregate", op.duration)

        except Exception:
            metrics.record_batch_failure()
            raise

        quality = DataQualitySummary(
            total_records=len(records) + malformed,
            malformed_records=malformed,
            rejections=cleaning.rejections,
            duplicates_removed=cleaning.duplicates_removed,
            clean_records=len(cleaning.records),
        )

        duration = time.perf_counter() - started
        metrics.record_batch_processing(quality, duration)

        logger.info(
            "Batch processing complete",
            extra={
                "total_records": quality.total_records,
                "clean_records": quality.clean_records,
                "malformed_records": quality.malformed_records,
                "rejected_records": quality.rejected_records,
                "duplicates_removed": quality.duplicates_removed,
            },
        )

        if quality.total_records == 0:
            logger.warning("Empty input batch, rollups are empty")

        return Reporter(rollups, quality, outliers)

    def process_file(
        self,
        spark: SparkSession,
        file_path: str,
        file_format: str = "csv",
        **read_options
    ) -> Reporter:
        """
        Load a sales file with Spark and run the pipeline over it.

        Args:
            spark: Active Spark session
            file_path: Path to input file
            file_format: File format (csv, json, parquet)
            **read_options: Additional read options

        Returns:
            Reporter over the file's rollups
        """
        logger.info(f"Reading {file_format} file: {file_path}")
        raw_rows = FileReader(spark).read_rows(file_path, file_format=file_format, **read_options)
        logger.info(f"Read {len(raw_rows)} records")
        return self.run(raw_rows)
