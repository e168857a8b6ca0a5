from prometheus_client import Counter, Gauge, Histogram


class HoldMetrics:
    """
    Hold Quota Engine Metrics Collector

    Tracks hold lifecycle outcomes and expiry sweeper throughput
    """

    def __init__(self):
        # ========== Hold Lifecycle Metrics ==========
        self.hold_requests = Counter(
            'hold_requests_total',
            'Total hold requests by outcome',
            ['category', 'outcome'],  # outcome: success/quota_exceeded/unit_unavailable/...
        )

        self.hold_releases = Counter(
            'hold_releases_total',
            'Total hold releases by reason and outcome',
            ['reason', 'outcome'],  # reason: expired/cancelled
        )

        self.hold_conversions = Counter(
            'hold_conversions_total',
            'Total hold conversions by outcome',
            ['outcome'],
        )

        self.hold_request_duration = Histogram(
            'hold_request_duration_seconds',
            'Hold request processing time (policy fetch + atomic section)',
            ['category'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0],
        )

        # ========== Expiry Sweeper Metrics ==========
        self.sweep_released = Counter(
            'hold_sweep_released_total',
            'Holds released by the expiry sweeper',
        )

        self.sweep_failures = Counter(
            'hold_sweep_failures_total',
            'Holds the sweeper failed to release after retries',
        )

        self.sweep_duration = Histogram(
            'hold_sweep_duration_seconds',
            'Duration of one sweep pass',
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
        )

        self.sweep_last_run = Gauge(
            'hold_sweep_last_run_timestamp_seconds',
            'Unix time of the last completed sweep pass',
        )

    # ========== Helper Methods ==========

    def record_hold_request(self, *, category: str, outcome: str, duration: float):
        self.hold_requests.labels(category=category, outcome=outcome).inc()
        self.hold_request_duration.labels(category=category).observe(duration)

    def record_release(self, *, reason: str, outcome: str):
        self.hold_releases.labels(reason=reason, outcome=outcome).inc()

    def record_conversion(self, *, outcome: str):
        self.hold_conversions.labels(outcome=outcome).inc()

    def record_sweep(self, *, released: int, failed: int, duration: float):
        self.sweep_released.inc(released)
        self.sweep_failures.inc(failed)
        self.sweep_duration.observe(duration)
        self.sweep_last_run.set_to_current_time()


# Global metrics instance
metrics = HoldMetrics()
