"""Data models for validation results."""

from pydantic import BaseModel, Field

ROOT_PATH = "root"


class FieldError(BaseModel):
    """A single rule violation inside one record."""

    path: str = Field(..., description="Dotted field path, or 'root' for the whole record")
    message: str = Field(..., description="Human-readable reason")
    code: str = Field(..., description="Machine-readable error type")


class ValidationResult(BaseModel):
    """Outcome of validating one record."""

    file: str = Field(..., description="File identifier of the record")
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def summary(self) -> dict:
        """Machine-readable view of this result."""
        return {
            "file": self.file,
            "valid": self.valid,
            "errors": [error.model_dump() for error in self.errors],
        }


class BatchReport(BaseModel):
    """Outcome of validating a whole collection of records."""

    results: list[ValidationResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def valid(self) -> int:
        return sum(1 for result in self.results if result.valid)

    @property
    def invalid(self) -> int:
        return self.total - self.valid

    @property
    def all_valid(self) -> bool:
        return self.invalid == 0

    def invalid_results(self) -> list[ValidationResult]:
        return [result for result in self.results if not result.valid]

    def summary(self) -> dict:
        """Machine-readable summary for automated pipelines."""
        return {
            "total": self.total,
            "valid": self.valid,
            "invalid": self.invalid,
            "results": [result.summary() for result in self.results],
        }
