"""OpenTelemetry helpers for metrics instrumentation."""

from typing import Optional

try:
    from opentelemetry import metrics
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
except Exception:  # pragma: no cover
    metrics = None
    MeterProvider = None
    ConsoleMetricExporter = None
    PeriodicExportingMetricReader = None


_meter_provider_initialized = False
_request_duration_histogram = None


def init_metrics(console: bool = False) -> None:
    """Install a meter provider, optionally exporting to the console."""
    global _meter_provider_initialized
    if _meter_provider_initialized or metrics is None:
        return
    readers = [PeriodicExportingMetricReader(ConsoleMetricExporter())] if console else []
    provider = MeterProvider(metric_readers=readers)
    metrics.set_meter_provider(provider)
    _meter_provider_initialized = True


def get_request_duration_histogram() -> Optional[object]:
    """Return the histogram recording TikTok Shop request durations (ms)."""
    global _request_duration_histogram
    if metrics is None:
        return None
    if _request_duration_histogram is None:
        meter = metrics.get_meter("tiktok_shop_adapter")
        _request_duration_histogram = meter.create_histogram(
            name="tiktok_shop.request.duration",
            unit="ms",
            description="Duration of TikTok Shop API requests",
        )
    return _request_duration_histogram
