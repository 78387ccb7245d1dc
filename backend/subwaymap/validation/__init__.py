"""
Validation module for topology checks.
"""

from subwaymap.validation.topology_validator import (
    TopologyValidationResult,
    TopologyValidator,
    ValidationIssue,
    ValidationSeverity,
    raise_on_errors,
    validate_topology,
)

__all__ = [
    "TopologyValidationResult",
    "TopologyValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "raise_on_errors",
    "validate_topology",
]
