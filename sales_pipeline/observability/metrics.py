"""
Prometheus metrics collection for the sales pipeline

Counts how many records each batch keeps and drops, and why,
so data quality can be tracked across runs.
"""
from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
)

from sales_pipeline.core.models import DataQualitySummary


REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

records_processed_total = Counter(
    name="pipeline_records_processed_total",
    documentation="Total number of records processed by the pipeline",
    labelnames=["status"],  # status: valid, rejected, malformed, duplicate
    registry=REGISTRY,
)

processing_duration_seconds = Histogram(
    name="pipeline_processing_duration_seconds",
    documentation="Time spent in each pipeline stage in seconds",
    labelnames=["stage"],  # stage: parse, clean, aggregate, total
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

batch_size = Histogram(
    name="pipeline_batch_size_records",
    documentation="Number of raw records in each batch",
    buckets=[100, 500, 1000, 5000, 10000, 50000, 100000, 500000],
    registry=REGISTRY,
)

batches_processed_total = Counter(
    name="pipeline_batches_processed_total",
    documentation="Total number of batches processed",
    labelnames=["status"],  # status: success, failure, empty
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

validation_failures_total = Counter(
    name="pipeline_validation_failures_total",
    documentation="Total number of records rejected, by rejection reason",
    labelnames=["reason"],
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def observe_stage(stage: str, duration_seconds: float) -> None:
    processing_duration_seconds.labels(stage=stage).observe(duration_seconds)


def record_batch_processing(quality: DataQualitySummary, duration_seconds: float) -> None:
    """
    Record batch processing metrics from a batch's data quality summary.

    Args:
        quality: Drop attribution for the batch
        duration_seconds: End-to-end processing duration in seconds
    """
    records_processed_total.labels(status="valid").inc(quality.clean_records)
    records_processed_total.labels(status="rejected").inc(quality.rejected_records)
    records_processed_total.labels(status="malformed").inc(quality.malformed_records)
    records_processed_total.labels(status="duplicate").inc(quality.duplicates_removed)

    for reason, count in quality.rejections.items():
        validation_failures_total.labels(reason=reason.value).inc(count)

    batch_size.observe(quality.total_records)
    observe_stage("total", duration_seconds)

    status = "empty" if quality.total_records == 0 else "success"
    batches_processed_total.labels(status=status).inc()


def record_batch_failure() -> None:
    batches_processed_total.labels(status="failure").inc()
