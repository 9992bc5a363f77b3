"""Product-level compliance assessment.

Applies the rule engine to every finding of a product and the conflict
detector to the product's whole set of declared expressions.
"""
from collections.abc import Iterable
from typing import Optional

from sbom_compliance.analysis.compatibility import CompatibilityEngine
from sbom_compliance.analysis.conflicts import ConflictDetector
from sbom_compliance.models.compatibility import DistributionModel, LicenseFinding
from sbom_compliance.models.report import ComplianceReport


def assess_product(
    model: DistributionModel,
    findings: Iterable[LicenseFinding],
    engine: Optional[CompatibilityEngine] = None,
    detector: Optional[ConflictDetector] = None,
) -> ComplianceReport:
    """Build the compliance report for one product.

    Args:
        model: Product distribution model.
        findings: License findings of the product's dependencies.
        engine: Rule engine to use. Defaults to the built-in rules.
        detector: Conflict detector to use. Defaults to the built-in table.

    Returns:
        ComplianceReport with one result per purl and all conflicts.
    """
    finding_list = list(findings)
    engine = engine if engine is not None else CompatibilityEngine()
    detector = detector if detector is not None else ConflictDetector()

    return ComplianceReport(
        distribution_model=model,
        results=engine.evaluate_batch(model, finding_list),
        conflicts=detector.detect(f.license_declared for f in finding_list),
    )
