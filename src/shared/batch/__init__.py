"""Shared batch processing infrastructure.

Provides the transient-failure policy used around external service calls:
- classify_error: Pure TRANSIENT/PERMANENT mapping for exceptions
- with_retry: Exponential-backoff retry for transient failures
- RetryPolicy: Injectable retry settings

Usage:
    from src.shared.batch import RetryPolicy, with_retry
"""

from .retry import ErrorClass, RetryPolicy, classify_error, is_transient, with_retry

__all__ = [
    "ErrorClass",
    "RetryPolicy",
    "classify_error",
    "is_transient",
    "with_retry",
]
