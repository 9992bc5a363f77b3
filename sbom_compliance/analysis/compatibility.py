"""License compatibility rules for sbom-compliance.

Decides whether a dependency's license is compatible with the product's
distribution model. The rules form an explicit decision table keyed by
(distribution model, license category); every combination maps to exactly
one rule, and any combination missing from the table resolves to the
``fallback_unknown`` rule, so evaluation is total.

Rule precedence, first match wins:

1. unknown / no_assertion category: review needed, for every model
2. permissive category: compatible, for every model
3. internal_only: compatible
4. saas_hosted: incompatible only for network copyleft (AGPL, SSPL)
5. source_available: compatible, source disclosure is already met
6. proprietary_binary: strong copyleft incompatible, weak needs review
7. library_component: strong copyleft incompatible, weak needs review
"""

from collections.abc import Iterable
from typing import Callable, NamedTuple, Optional, Union

from sbom_compliance.analysis.spdx import extract_license_ids
from sbom_compliance.models.compatibility import (
    CompatibilityResult,
    CompatibilityVerdict,
    DependencyDepth,
    DistributionModel,
    LicenseCategory,
    LicenseFinding,
)

# Licenses whose copyleft is triggered by network use, not only distribution
DEFAULT_NETWORK_COPYLEFT: frozenset[str] = frozenset(
    {
        "AGPL-1.0-only",
        "AGPL-1.0-or-later",
        "AGPL-3.0",
        "AGPL-3.0-only",
        "AGPL-3.0-or-later",
        "SSPL-1.0",
    }
)

# Stable rule identifiers
RULE_UNKNOWN_LICENCE = "unknown_licence"
RULE_PERMISSIVE = "permissive_always_ok"
RULE_INTERNAL = "internal_no_distribution"
RULE_SAAS_NETWORK_COPYLEFT = "saas_network_copyleft"
RULE_SAAS_NO_DISTRIBUTION = "saas_no_distribution"
RULE_SOURCE_AVAILABLE = "source_available_satisfies_copyleft"
RULE_PROPRIETARY_STRONG = "proprietary_strong_copyleft"
RULE_PROPRIETARY_WEAK = "proprietary_weak_copyleft_linking"
RULE_LIBRARY_STRONG = "library_strong_copyleft_downstream"
RULE_LIBRARY_WEAK = "library_weak_copyleft_downstream"
RULE_FALLBACK = "fallback_unknown"


class RuleContext(NamedTuple):
    """Inputs a rule needs to build its result."""

    model: DistributionModel
    category: LicenseCategory
    expression: str
    depth: DependencyDepth
    network_copyleft: bool

    @property
    def display(self) -> str:
        """Expression for use in reasons, with a placeholder when empty."""
        return self.expression or "an undeclared licence"


Rule = Callable[[RuleContext], CompatibilityResult]


def _result(verdict: CompatibilityVerdict, rule: str, reason: str) -> CompatibilityResult:
    return CompatibilityResult(verdict=verdict, reason=reason, rule=rule)


def _unknown_licence(ctx: RuleContext) -> CompatibilityResult:
    shown = ctx.expression or "not declared"
    return _result(
        CompatibilityVerdict.REVIEW_NEEDED,
        RULE_UNKNOWN_LICENCE,
        f'Licence "{shown}" is not recognised. Manual review needed to determine '
        f"compatibility with {ctx.model.label} distribution.",
    )


def _permissive(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.COMPATIBLE,
        RULE_PERMISSIVE,
        f"{ctx.display} is a permissive licence with no distribution restrictions "
        f"for {ctx.model.label} products.",
    )


def _internal_only(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.COMPATIBLE,
        RULE_INTERNAL,
        f"{ctx.model.label} use involves no external distribution, so the copyleft "
        f"obligations of {ctx.display} are not triggered.",
    )


def _saas_hosted(ctx: RuleContext) -> CompatibilityResult:
    if ctx.network_copyleft:
        return _result(
            CompatibilityVerdict.INCOMPATIBLE,
            RULE_SAAS_NETWORK_COPYLEFT,
            f"{ctx.display} triggers copyleft obligations for network use (AGPL/SSPL). "
            f"{ctx.model.label} products must offer source code to users even "
            "without distributing binaries.",
        )
    return _result(
        CompatibilityVerdict.COMPATIBLE,
        RULE_SAAS_NO_DISTRIBUTION,
        f"{ctx.model.label} distribution does not trigger copyleft obligations for "
        f"{ctx.display}; no binary or source is distributed to end users.",
    )


def _source_available(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.COMPATIBLE,
        RULE_SOURCE_AVAILABLE,
        f"{ctx.model.label} distribution satisfies the copyleft requirements of "
        f"{ctx.display}; source code disclosure is already part of the distribution model.",
    )


def _proprietary_strong(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.INCOMPATIBLE,
        RULE_PROPRIETARY_STRONG,
        f"{ctx.display} requires source code disclosure when distributing binaries. "
        f"{ctx.model.label} distribution is incompatible unless the dependency is "
        "replaced or the product is relicensed.",
    )


def _proprietary_weak(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.REVIEW_NEEDED,
        RULE_PROPRIETARY_WEAK,
        f"{ctx.display} is weak copyleft. It is compatible with {ctx.model.label} "
        "distribution if dynamically linked as a separate shared library; static "
        "linking or modifying the library requires sharing those modifications.",
    )


def _library_strong(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.INCOMPATIBLE,
        RULE_LIBRARY_STRONG,
        f"{ctx.display} is strong copyleft. Distributing it as part of a "
        f"{ctx.model.label} forces downstream consumers to comply with its copyleft "
        "terms, which may make the component unusable in proprietary projects.",
    )


def _library_weak(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.REVIEW_NEEDED,
        RULE_LIBRARY_WEAK,
        f"{ctx.display} is weak copyleft. Downstream consumers of a "
        f"{ctx.model.label} may need to comply with its terms for this "
        f"{ctx.depth.value} dependency. Review linking and distribution requirements.",
    )


def _fallback(ctx: RuleContext) -> CompatibilityResult:
    return _result(
        CompatibilityVerdict.REVIEW_NEEDED,
        RULE_FALLBACK,
        f"Could not determine compatibility of {ctx.display} ({ctx.category.value}) "
        f"with {ctx.model.label} distribution.",
    )


_COPYLEFT = (LicenseCategory.COPYLEFT_STRONG, LicenseCategory.COPYLEFT_WEAK)


def build_decision_table() -> dict[tuple[DistributionModel, LicenseCategory], Rule]:
    """Build the (distribution model, license category) decision table.

    Category-wide rules are laid down first for every model; the copyleft
    rows are then filled per distribution model.

    Returns:
        Mapping from every known combination to the rule that decides it.
    """
    table: dict[tuple[DistributionModel, LicenseCategory], Rule] = {}

    for model in DistributionModel:
        table[(model, LicenseCategory.UNKNOWN)] = _unknown_licence
        table[(model, LicenseCategory.NO_ASSERTION)] = _unknown_licence
        table[(model, LicenseCategory.PERMISSIVE)] = _permissive

    for category in _COPYLEFT:
        table[(DistributionModel.INTERNAL_ONLY, category)] = _internal_only
        table[(DistributionModel.SAAS_HOSTED, category)] = _saas_hosted
        table[(DistributionModel.SOURCE_AVAILABLE, category)] = _source_available

    table[(DistributionModel.PROPRIETARY_BINARY, LicenseCategory.COPYLEFT_STRONG)] = (
        _proprietary_strong
    )
    table[(DistributionModel.PROPRIETARY_BINARY, LicenseCategory.COPYLEFT_WEAK)] = (
        _proprietary_weak
    )
    table[(DistributionModel.LIBRARY_COMPONENT, LicenseCategory.COPYLEFT_STRONG)] = (
        _library_strong
    )
    table[(DistributionModel.LIBRARY_COMPONENT, LicenseCategory.COPYLEFT_WEAK)] = (
        _library_weak
    )

    return table


class CompatibilityEngine:
    """Evaluates dependency licenses against a distribution model.

    The engine holds only immutable configuration (the network-copyleft
    set and the decision table), so one instance can be shared freely
    across callers and threads.
    """

    def __init__(
        self,
        network_copyleft: Optional[Iterable[str]] = None,
        table: Optional[dict[tuple[DistributionModel, LicenseCategory], Rule]] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            network_copyleft: SPDX identifiers treated as network copyleft.
                Defaults to DEFAULT_NETWORK_COPYLEFT.
            table: Decision table override. Defaults to build_decision_table().
        """
        self._network_copyleft = (
            frozenset(network_copyleft)
            if network_copyleft is not None
            else DEFAULT_NETWORK_COPYLEFT
        )
        self._table = dict(table) if table is not None else build_decision_table()

    @property
    def network_copyleft(self) -> frozenset[str]:
        """Identifiers treated as network copyleft."""
        return self._network_copyleft

    def has_network_copyleft(self, spdx_expression: Optional[str]) -> bool:
        """Check whether any identifier in the expression is network copyleft."""
        return any(
            license_id in self._network_copyleft
            for license_id in extract_license_ids(spdx_expression)
        )

    def uncovered_combinations(self) -> list[tuple[DistributionModel, LicenseCategory]]:
        """List combinations with no table entry; these hit the fallback rule."""
        return [
            (model, category)
            for model in DistributionModel
            for category in LicenseCategory
            if (model, category) not in self._table
        ]

    def evaluate(
        self,
        model: DistributionModel,
        category: LicenseCategory,
        spdx_expression: Optional[str],
        depth: Union[DependencyDepth, str, None] = DependencyDepth.TRANSITIVE,
    ) -> CompatibilityResult:
        """Evaluate one dependency license against a distribution model.

        Args:
            model: Product distribution model.
            category: License category from the upstream classifier.
            spdx_expression: Declared SPDX expression (may be empty).
            depth: Dependency depth; anything but "direct" is transitive.

        Returns:
            CompatibilityResult with verdict, reason and rule identifier.
        """
        expression = (spdx_expression or "").strip()
        ctx = RuleContext(
            model=model,
            category=category,
            expression=expression,
            depth=DependencyDepth.coerce(depth),
            network_copyleft=self.has_network_copyleft(expression),
        )
        rule = self._table.get((model, category), _fallback)
        return rule(ctx)

    def evaluate_batch(
        self,
        model: DistributionModel,
        findings: Iterable[LicenseFinding],
    ) -> dict[str, CompatibilityResult]:
        """Evaluate every finding of a product.

        Args:
            model: Product distribution model.
            findings: Findings to evaluate.

        Returns:
            Results keyed by dependency purl. A purl seen twice keeps the
            result of its last finding.
        """
        return {
            finding.dependency_purl: self.evaluate(
                model,
                finding.license_category,
                finding.license_declared,
                finding.dependency_depth,
            )
            for finding in findings
        }


_default_engine = CompatibilityEngine()


def evaluate(
    model: DistributionModel,
    category: LicenseCategory,
    spdx_expression: Optional[str],
    depth: Union[DependencyDepth, str, None] = DependencyDepth.TRANSITIVE,
) -> CompatibilityResult:
    """Evaluate one dependency license using the default engine."""
    return _default_engine.evaluate(model, category, spdx_expression, depth)


def evaluate_batch(
    model: DistributionModel,
    findings: Iterable[LicenseFinding],
) -> dict[str, CompatibilityResult]:
    """Evaluate every finding of a product using the default engine."""
    return _default_engine.evaluate_batch(model, findings)
