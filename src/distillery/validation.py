"""
Content validation for extraction results.

Checks an ``ExtractionResult`` against what a page is expected to yield:
minimum length, terms that must and must not appear, and chunk kinds that
must be present. Used by the scenario tests and handy for site regression
suites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .models import ExtractionResult

VALID_SCORE = 0.6


@dataclass
class Expectation:
    min_length: int = 0
    should_contain: Sequence[str] = ()
    should_not_contain: Sequence[str] = ()
    structure: Sequence[str] = ()  # chunk kinds, e.g. ("heading", "paragraph")


@dataclass
class ValidationReport:
    score: float = 0.0
    is_valid: bool = False
    issues: List[str] = field(default_factory=list)
    noise_filtered: bool = False
    structure_preserved: bool = False


class ContentValidator:
    """Scores how well an extraction matches an ``Expectation``."""

    def validate(self, result: Optional[ExtractionResult], expected: Expectation) -> ValidationReport:
        report = ValidationReport()
        if result is None or not result.ok:
            report.issues.append("No content extracted")
            return report

        body = self._body(result)
        lowered = body.lower()
        score = 0.0

        if expected.min_length and len(body) < expected.min_length:
            report.issues.append(f"Content too short: {len(body)} < {expected.min_length}")
            score -= 0.3
        else:
            score += 0.3

        if expected.should_contain:
            if all(term.lower() in lowered for term in expected.should_contain):
                score += 0.3
            else:
                missing = [t for t in expected.should_contain if t.lower() not in lowered]
                report.issues.append(f"Missing expected content terms: {missing}")
                score -= 0.2

        if expected.should_not_contain:
            found = [t for t in expected.should_not_contain if t.lower() in lowered]
            if not found:
                score += 0.2
                report.noise_filtered = True
            else:
                report.issues.append(f"Contains noise content: {found}")
                score -= 0.3

        if expected.structure:
            kinds = {chunk.kind for chunk in result.chunks}
            if all(kind in kinds for kind in expected.structure):
                score += 0.2
                report.structure_preserved = True
            else:
                report.issues.append("Missing expected structure elements")
                score -= 0.1

        report.score = max(0.0, min(1.0, score))
        report.is_valid = report.score >= VALID_SCORE
        return report

    @staticmethod
    def _body(result: ExtractionResult) -> str:
        """Extracted text without the metadata header, as it survived filtering."""
        header_end = result.text.find("\n---\n")
        if header_end == -1:
            return result.text
        return result.text[header_end + len("\n---\n"):]
