"""License compliance analysis for sbom-compliance."""
from sbom_compliance.analysis.compatibility import (
    DEFAULT_NETWORK_COPYLEFT,
    CompatibilityEngine,
    build_decision_table,
    evaluate,
    evaluate_batch,
)
from sbom_compliance.analysis.conflicts import (
    DEFAULT_LICENSE_CONFLICTS,
    ConflictDetector,
    detect_conflicts,
)
from sbom_compliance.analysis.report import assess_product
from sbom_compliance.analysis.spdx import extract_license_ids, unique_license_ids

__all__ = [
    "DEFAULT_LICENSE_CONFLICTS",
    "DEFAULT_NETWORK_COPYLEFT",
    "CompatibilityEngine",
    "ConflictDetector",
    "assess_product",
    "build_decision_table",
    "detect_conflicts",
    "evaluate",
    "evaluate_batch",
    "extract_license_ids",
    "unique_license_ids",
]
