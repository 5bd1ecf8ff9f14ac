"""Human-readable and machine-readable validation reports."""

import json
from pathlib import Path

from maginhawa.models.validation import BatchReport, ValidationResult


def format_result(result: ValidationResult) -> str:
    """Format one invalid record as a heading plus bulleted errors."""
    lines = [f"✗ {Path(result.file).name}"]
    for error in result.errors:
        lines.append(f"  • {error.path}: {error.message}")
    return "\n".join(lines)


def format_report(report: BatchReport) -> str:
    """Format a batch report for people reading CI logs or a terminal."""
    sections = []

    invalid = report.invalid_results()
    if invalid:
        sections.append("Validation Failed\n")
        sections.extend(format_result(result) + "\n" for result in invalid)

    sections.append(
        "Summary:\n"
        f"  Valid: {report.valid}\n"
        f"  Invalid: {report.invalid}\n"
        f"  Total: {report.total}"
    )

    if report.all_valid:
        sections.append("\n✓ All validations passed!")

    return "\n".join(sections)


def format_summary_json(report: BatchReport) -> str:
    """Serialize a batch report for automated pipelines."""
    return json.dumps(report.summary(), indent=2, ensure_ascii=False)
