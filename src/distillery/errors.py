"""
Extraction error taxonomy.

These exceptions are raised and recovered inside the extraction core; the
public ``extract()`` entry point never lets them escape. They exist so each
fallback tier can signal precisely why it gave up.
"""

from __future__ import annotations


class DistilleryError(Exception):
    """Base exception for extraction errors."""

    pass


class NoCandidateFound(DistilleryError):
    """Raised when no element clears the minimal text-length bar."""

    pass


class BelowConfidenceThreshold(DistilleryError):
    """Raised when the best candidate scores below the active minimum."""

    def __init__(self, score: float, threshold: float) -> None:
        super().__init__(f"best candidate scored {score:.3f}, below threshold {threshold:.3f}")
        self.score = score
        self.threshold = threshold


class MalformedFilterRule(DistilleryError):
    """Raised when a boilerplate filter rule cannot be compiled."""

    def __init__(self, rule: str, reason: str) -> None:
        super().__init__(f"invalid filter rule {rule!r}: {reason}")
        self.rule = rule
        self.reason = reason


class StructuredDataParseError(DistilleryError):
    """Raised when a JSON-LD block is not valid JSON."""

    pass
