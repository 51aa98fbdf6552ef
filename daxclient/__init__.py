"""Client-side helpers for a DynamoDB accelerator: errors, retries, projections, options, legacy translation."""

__version__ = "0.1.0"

__all__ = ["conditions", "errors", "legacy", "projection", "request_options", "retryer"]