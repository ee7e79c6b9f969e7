"""
Metrics definitions for LuLu Monitor.

This module defines Prometheus metrics for monitoring
the alert lifecycle.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
alerts_detected = Counter(
    "lulu_alerts_detected_total",
    "Number of distinct LuLu alerts detected"
)

alerts_duplicate = Counter(
    "lulu_alerts_duplicate_total",
    "Number of poll ticks that saw an already processed alert"
)

dispatch_total = Counter(
    "lulu_dispatch_total",
    "Alert dispatches to the analysis gateway",
    ["outcome"]
)

notifications_sent = Counter(
    "lulu_notifications_sent_total",
    "Per-recipient notification sends",
    ["result"]
)

message_edits = Counter(
    "lulu_message_edits_total",
    "Per-recipient notification edits",
    ["result"]
)

actions_executed = Counter(
    "lulu_actions_executed_total",
    "Actions applied to the alert window",
    ["action", "result"]
)

poll_errors = Counter(
    "lulu_poll_errors_total",
    "Unexpected errors inside a poll tick"
)

# 히스토그램 메트릭
artifact_wait_seconds = Histogram(
    "lulu_artifact_wait_seconds",
    "Time spent waiting for the analysis artifact",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0]
)

# 게이지 메트릭
tracked_messages = Gauge(
    "lulu_tracked_messages",
    "Outbound messages tracked for the active alert"
)
