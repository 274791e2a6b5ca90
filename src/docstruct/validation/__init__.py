from .config import ValidationThresholds
from .models import (
    CheckResult,
    IssueKind,
    IssueLocation,
    Severity,
    ValidationCode,
    ValidationIssue,
    ValidationReport,
)
from .validator import StructureValidator

__all__ = [
    "CheckResult",
    "IssueKind",
    "IssueLocation",
    "Severity",
    "StructureValidator",
    "ValidationCode",
    "ValidationIssue",
    "ValidationReport",
    "ValidationThresholds",
]
