"""Prometheus metrics for the document verification service.

Defines operational metrics for uploads, previews and comparisons.
"""

from prometheus_client import Counter

# Lifecycle metrics
document_operations_total = Counter(
    "docverify_document_operations_total",
    "Total document create/update operations by outcome",
    ["operation", "outcome"]  # operation: create|update, outcome: success|duplicate|rejected|metadata_error|storage_error
)

orphaned_blobs_total = Counter(
    "docverify_orphaned_blobs_total",
    "Blobs written to storage whose metadata write failed",
)

# Preview metrics
preview_links_total = Counter(
    "docverify_preview_links_total",
    "Total preview link requests by outcome",
    ["outcome"]  # outcome: issued|unavailable
)

# Comparison metrics
comparisons_total = Counter(
    "docverify_comparisons_total",
    "Total file comparisons by verdict",
    ["verdict"]  # verdict: identical|different|unsupported
)
