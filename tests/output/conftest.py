"""Shared fixtures for output formatter tests."""
import pytest

from sbom_compliance.analysis.report import assess_product
from sbom_compliance.models.compatibility import (
    DistributionModel,
    LicenseCategory,
    LicenseFinding,
)
from sbom_compliance.models.report import ComplianceReport


@pytest.fixture
def mixed_report() -> ComplianceReport:
    """Report with one verdict of each kind and one conflict."""
    findings = [
        LicenseFinding(
            dependency_purl="pkg:npm/express@4.18.2",
            license_declared="MIT",
            license_category=LicenseCategory.PERMISSIVE,
        ),
        LicenseFinding(
            dependency_purl="pkg:npm/readline@1.0.0",
            license_declared="GPL-2.0-only",
            license_category=LicenseCategory.COPYLEFT_STRONG,
        ),
        LicenseFinding(
            dependency_purl="pkg:npm/openssl-wrapper@2.0.0",
            license_declared="Apache-2.0",
            license_category=LicenseCategory.PERMISSIVE,
        ),
        LicenseFinding(
            dependency_purl="pkg:npm/mystery@0.1.0",
            license_declared="",
            license_category=LicenseCategory.NO_ASSERTION,
        ),
    ]
    return assess_product(DistributionModel.PROPRIETARY_BINARY, findings)


@pytest.fixture
def clean_report() -> ComplianceReport:
    """Report without any issues."""
    findings = [
        LicenseFinding(
            dependency_purl="pkg:npm/express@4.18.2",
            license_declared="MIT",
            license_category=LicenseCategory.PERMISSIVE,
        ),
    ]
    return assess_product(DistributionModel.SAAS_HOSTED, findings)
