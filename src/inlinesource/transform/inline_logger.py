"""Centralized decision logging for the inlining pass.

These helpers keep log wording consistent between the resolver and the CLI.
They are for debugging and troubleshooting; user-facing output is the CLI's
summary table.
"""

from __future__ import annotations

import logging
from typing import Any

from inlinesource.model.options import BuildContext, InlineOptions

logger = logging.getLogger(__name__)


def log_inline_configuration(options: InlineOptions, context: BuildContext) -> None:
    """Log the options and build context of an inlining pass."""
    logger.info("Inline configuration:")
    logger.info("  Pattern: %s", options.inline_source or "(disabled)")
    logger.info("  Strictness: %s", options.strictness.value)
    logger.info("  Inject target: %s", options.inject_target.value)
    logger.info("  Output path: %s", context.output_dir)
    logger.info("  Public path: %r", context.public_path)
    logger.info("  Document: %s", context.filename)


def log_tag_decision(reference: str, decision: str, context: dict[str, Any] | None = None) -> None:
    """Log what happened to a single tag reference.

    Args:
        reference: The src/href value of the tag
        decision: The decision made (e.g., "inlined", "skipped", "not found")
        context: Optional context information
    """
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        logger.debug("%s: %s (%s)", reference, decision, context_str)
    else:
        logger.debug("%s: %s", reference, decision)


def log_error_policy(
    error_type: str, action: str, details: str | None = None, *, level: int = logging.WARNING
) -> None:
    """Log an error handling policy decision.

    Args:
        error_type: Type of error (e.g., "asset_not_found")
        action: Action taken (e.g., "keep external reference", "raise")
        details: Optional additional details
        level: Logging level to emit at
    """
    if details:
        logger.log(level, "Inline error policy: %s -> %s (%s)", error_type, action, details)
    else:
        logger.log(level, "Inline error policy: %s -> %s", error_type, action)


__all__ = [
    "log_error_policy",
    "log_inline_configuration",
    "log_tag_decision",
]
