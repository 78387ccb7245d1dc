"""
Topology Validator - Checks hard-coded and fixture-built maps before rendering.

Catches issues like:
- Duplicate node IDs
- Edges pointing at nodes that do not exist
- Orphaned nodes (no connections)
- Cluster members that are not on the map
- Manual maps with nodes that were never positioned
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from subwaymap.ir.topology import Topology


class ValidationSeverity(Enum):
    ERROR = "error"      # Map will not render correctly
    WARNING = "warning"  # Map renders but has issues
    INFO = "info"        # Cosmetic or informational


@dataclass
class ValidationIssue:
    """A single validation issue found in the topology"""
    severity: ValidationSeverity
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    node_id: Optional[str] = None
    edge_info: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_info": self.edge_info,
            "suggestion": self.suggestion,
        }


@dataclass
class TopologyValidationResult:
    """Result of topology validation"""
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.INFO)

    def codes(self) -> Set[str]:
        return {i.code for i in self.issues}

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        """Get human-readable summary"""
        status = "Valid" if self.is_valid else "Invalid"
        return (
            f"{status} | "
            f"Errors: {self.error_count}, Warnings: {self.warning_count}, Info: {self.info_count}"
        )


class TopologyValidator:
    """
    Validates a Topology for structural problems.

    Usage:
        validator = TopologyValidator()
        result = validator.validate(topology)

        if not result.is_valid:
            for issue in result.issues:
                print(f"[{issue.severity.value}] {issue.message}")
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def validate(self, topology: Topology) -> TopologyValidationResult:
        issues: List[ValidationIssue] = []
        node_ids = {node.id for node in topology.nodes}

        issues.extend(self._check_empty(topology))
        issues.extend(self._check_duplicate_node_ids(topology))
        issues.extend(self._check_empty_labels(topology))
        issues.extend(self._check_missing_edge_references(topology, node_ids))
        issues.extend(self._check_self_loops(topology))
        issues.extend(self._check_duplicate_edge_ids(topology))
        issues.extend(self._check_orphaned_nodes(topology, node_ids))
        issues.extend(self._check_clusters(topology, node_ids))
        issues.extend(self._check_unpositioned_nodes(topology))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == ValidationSeverity.WARNING for i in issues)

        is_valid = not has_errors
        if self.strict_mode:
            is_valid = not has_errors and not has_warnings

        return TopologyValidationResult(
            is_valid=is_valid,
            issues=issues,
            stats=self._calculate_stats(topology, node_ids),
        )

    def _check_empty(self, topology: Topology) -> List[ValidationIssue]:
        if topology.nodes:
            return []
        return [ValidationIssue(
            severity=ValidationSeverity.ERROR,
            code="NO_NODES",
            message=f"Map '{topology.id}' has no nodes",
        )]

    def _check_duplicate_node_ids(self, topology: Topology) -> List[ValidationIssue]:
        issues = []
        seen_ids: Dict[str, int] = defaultdict(int)
        for node in topology.nodes:
            seen_ids[node.id] += 1
        for node_id, count in seen_ids.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DUPLICATE_NODE_ID",
                    message=f"Duplicate node ID '{node_id}' appears {count} times",
                    node_id=node_id,
                    suggestion="Suffix the id with its line, e.g. 'S-global'",
                ))
        return issues

    def _check_empty_labels(self, topology: Topology) -> List[ValidationIssue]:
        issues = []
        for node in topology.nodes:
            if not node.label or not node.label.strip():
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EMPTY_LABEL",
                    message=f"Node '{node.id}' has empty label",
                    node_id=node.id,
                ))
        return issues

    def _check_missing_edge_references(self, topology: Topology, node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for edge in topology.edges:
            if edge.source not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_SOURCE_NODE",
                    message=f"Edge '{edge.id}' references non-existent source node '{edge.source}'",
                    edge_info=f"{edge.source} -> {edge.target}",
                    suggestion=f"Add node '{edge.source}' or fix the edge reference",
                ))
            if edge.target not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_TARGET_NODE",
                    message=f"Edge '{edge.id}' references non-existent target node '{edge.target}'",
                    edge_info=f"{edge.source} -> {edge.target}",
                    suggestion=f"Add node '{edge.target}' or fix the edge reference",
                ))
        return issues

    def _check_self_loops(self, topology: Topology) -> List[ValidationIssue]:
        issues = []
        for edge in topology.edges:
            if edge.source == edge.target:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="SELF_LOOP",
                    message=f"Edge '{edge.id}' loops on node '{edge.source}'",
                    node_id=edge.source,
                    edge_info=f"{edge.source} -> {edge.target}",
                ))
        return issues

    def _check_duplicate_edge_ids(self, topology: Topology) -> List[ValidationIssue]:
        issues = []
        counts: Dict[str, int] = defaultdict(int)
        for edge in topology.edges:
            counts[edge.id] += 1
        for edge_id, count in counts.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.INFO,
                    code="DUPLICATE_EDGE_ID",
                    message=f"Edge ID '{edge_id}' appears {count} times",
                    edge_info=edge_id,
                ))
        return issues

    def _check_orphaned_nodes(self, topology: Topology, node_ids: Set[str]) -> List[ValidationIssue]:
        connected: Set[str] = set()
        for edge in topology.edges:
            connected.add(edge.source)
            connected.add(edge.target)

        issues = []
        for node in topology.nodes:
            if node.id in connected:
                continue
            issues.append(ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="ORPHANED_NODE",
                message=f"Node '{node.label}' ({node.id}, kind={node.kind.value}) has no connections",
                node_id=node.id,
                suggestion="Connect it to its line or remove it",
            ))
        return issues

    def _check_clusters(self, topology: Topology, node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for cluster in topology.clusters:
            if not cluster.member_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EMPTY_CLUSTER",
                    message=f"Cluster '{cluster.name}' has no members",
                ))
                continue
            for member in cluster.member_ids:
                if member not in node_ids:
                    issues.append(ValidationIssue(
                        severity=ValidationSeverity.WARNING,
                        code="UNKNOWN_CLUSTER_MEMBER",
                        message=f"Cluster '{cluster.name}' lists unknown node '{member}'",
                        node_id=member,
                    ))
        return issues

    def _check_unpositioned_nodes(self, topology: Topology) -> List[ValidationIssue]:
        if topology.layout is not None:
            return []
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="UNPOSITIONED_NODE",
                message=f"Node '{node.id}' has no manual position and will be auto-placed",
                node_id=node.id,
            )
            for node in topology.nodes
            if node.position is None
        ]

    def _calculate_stats(self, topology: Topology, node_ids: Set[str]) -> Dict[str, int]:
        kind_counts: Dict[str, int] = defaultdict(int)
        for node in topology.nodes:
            kind_counts[node.kind.value] += 1

        connected = set()
        for edge in topology.edges:
            connected.add(edge.source)
            connected.add(edge.target)

        return {
            "nodes": len(topology.nodes),
            "edges": len(topology.edges),
            "clusters": len(topology.clusters),
            "orphaned_nodes": len(node_ids - connected),
            "engines": kind_counts.get("engine", 0),
            "routers": kind_counts.get("router", 0),
            "services": kind_counts.get("service", 0),
            "databases": kind_counts.get("database", 0),
            "queues": kind_counts.get("queue", 0),
        }


def validate_topology(topology: Topology, strict: bool = False) -> TopologyValidationResult:
    """Convenience function to validate a topology."""
    return TopologyValidator(strict_mode=strict).validate(topology)


def raise_on_errors(topology: Topology) -> None:
    """Validate and raise ValueError listing every error-level issue."""
    result = validate_topology(topology)
    if not result.is_valid:
        error_messages = [
            f"[{i.code}] {i.message}"
            for i in result.issues
            if i.severity == ValidationSeverity.ERROR
        ]
        raise ValueError(
            f"Topology validation failed with {result.error_count} errors:\n" +
            "\n".join(error_messages)
        )
