"""Cross-license conflict detection for sbom-compliance.

Reports pairs of licenses from a curated FSF/SPDX incompatibility table
that both occur somewhere in a product's dependency set.
"""
from collections.abc import Iterable
from typing import Optional

from sbom_compliance.analysis.spdx import unique_license_ids
from sbom_compliance.models.conflict import LicenseConflict


def _conflict(license_a: str, license_b: str, reason: str) -> LicenseConflict:
    return LicenseConflict(license_a=license_a, license_b=license_b, reason=reason)


_GPL2_APACHE = (
    "{gpl} is incompatible with Apache-2.0 due to patent clause conflicts. "
    "GPL-3.0 resolves this."
)
_GPL2_CDDL = (
    "GPL-2.0 and CDDL-1.0 have conflicting copyleft requirements and cannot be combined."
)
_GPL2_MPL11 = "GPL-2.0 and MPL-1.1 are incompatible without explicit dual-licensing."
_EPL_GPL2 = "EPL-1.0 and GPL-2.0 have incompatible patent and distribution terms."
_EPL_GPL3 = "EPL-1.0 and GPL-3.0 have incompatible copyleft terms."
_EUPL_GPL2 = "EUPL-1.2 is compatible with GPL-3.0 but not GPL-2.0-only."
_CDDL_GPL3 = "CDDL-1.0 and GPL-3.0 have conflicting copyleft requirements."

# Deprecated bare identifiers (GPL-2.0, GPL-3.0) are listed alongside their
# -only forms because SBOM exports still emit them.
DEFAULT_LICENSE_CONFLICTS: tuple[LicenseConflict, ...] = (
    _conflict("GPL-2.0-only", "Apache-2.0", _GPL2_APACHE.format(gpl="GPL-2.0-only")),
    _conflict("GPL-2.0", "Apache-2.0", _GPL2_APACHE.format(gpl="GPL-2.0")),
    _conflict("GPL-2.0-only", "CDDL-1.0", _GPL2_CDDL),
    _conflict("GPL-2.0", "CDDL-1.0", _GPL2_CDDL),
    _conflict("GPL-2.0-only", "MPL-1.1", _GPL2_MPL11),
    _conflict("GPL-2.0", "MPL-1.1", _GPL2_MPL11),
    _conflict("EPL-1.0", "GPL-2.0-only", _EPL_GPL2),
    _conflict("EPL-1.0", "GPL-2.0", _EPL_GPL2),
    _conflict("EPL-1.0", "GPL-3.0-only", _EPL_GPL3),
    _conflict("EPL-1.0", "GPL-3.0", _EPL_GPL3),
    _conflict("EUPL-1.2", "GPL-2.0-only", _EUPL_GPL2),
    _conflict("EUPL-1.2", "GPL-2.0", _EUPL_GPL2),
    _conflict("CDDL-1.0", "GPL-3.0-only", _CDDL_GPL3),
    _conflict("CDDL-1.0", "GPL-3.0", _CDDL_GPL3),
)


class ConflictDetector:
    """Detects conflicting license pairs across a set of SPDX expressions.

    A table entry fires when both of its identifiers occur anywhere in the
    input, so the result does not depend on expression order. An entry and
    its mirror image describe the same unordered pair; only the first one
    registered is kept.
    """

    def __init__(self, conflicts: Optional[Iterable[LicenseConflict]] = None) -> None:
        """Initialize the detector.

        Args:
            conflicts: Conflict table. Defaults to DEFAULT_LICENSE_CONFLICTS.
        """
        source = DEFAULT_LICENSE_CONFLICTS if conflicts is None else conflicts
        table: list[LicenseConflict] = []
        seen: set[frozenset[str]] = set()
        for entry in source:
            if entry.pair in seen:
                continue
            seen.add(entry.pair)
            table.append(entry)
        self._conflicts: tuple[LicenseConflict, ...] = tuple(table)

    @property
    def conflicts(self) -> tuple[LicenseConflict, ...]:
        """The conflict table in registration order."""
        return self._conflicts

    def detect(self, expressions: Iterable[Optional[str]]) -> list[LicenseConflict]:
        """Detect conflicts across every expression of a dependency set.

        Args:
            expressions: SPDX expressions of all dependencies of a product.

        Returns:
            Conflicting pairs in table order; empty when none are present.
        """
        present = unique_license_ids(expressions)
        if not present:
            return []

        return [
            entry
            for entry in self._conflicts
            if entry.license_a in present and entry.license_b in present
        ]


_default_detector = ConflictDetector()


def detect_conflicts(expressions: Iterable[Optional[str]]) -> list[LicenseConflict]:
    """Detect conflicts using the default conflict table."""
    return _default_detector.detect(expressions)
