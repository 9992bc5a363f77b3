"""Tests for SPDX identifier extraction."""
import pytest

from sbom_compliance.analysis.spdx import extract_license_ids, unique_license_ids


class TestExtractLicenseIds:
    """Tests for extract_license_ids."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("MIT", ["MIT"]),
            ("(MIT OR Apache-2.0)", ["MIT", "Apache-2.0"]),
            ("GPL-2.0-only WITH Classpath-exception-2.0", ["GPL-2.0-only", "Classpath-exception-2.0"]),
            ("(MIT AND (BSD-3-Clause OR ISC))", ["MIT", "BSD-3-Clause", "ISC"]),
            ("mit or apache-2.0", ["mit", "apache-2.0"]),
            ("GPL-2.0 +", ["GPL-2.0"]),
            ("GPL-2.0+", ["GPL-2.0+"]),
            ("  MIT   OR\tISC ", ["MIT", "ISC"]),
        ],
    )
    def test_extracts_identifiers(self, expression: str, expected: list[str]) -> None:
        """Test tokenizing expressions into identifiers."""
        assert extract_license_ids(expression) == expected

    @pytest.mark.parametrize("expression", ["", None, "()", "AND OR WITH", "   "])
    def test_empty_results(self, expression: str | None) -> None:
        """Test that empty or operator-only input yields no identifiers."""
        assert extract_license_ids(expression) == []

    def test_keeps_duplicates_in_order(self) -> None:
        """Test that duplicates are preserved."""
        assert extract_license_ids("MIT OR MIT") == ["MIT", "MIT"]

    def test_operator_inside_identifier_is_kept(self) -> None:
        """Test that AND/OR are only removed as whole words."""
        assert extract_license_ids("ORACLE-License") == ["ORACLE-License"]

    def test_malformed_input_degrades(self) -> None:
        """Test that malformed input returns the remaining tokens."""
        assert extract_license_ids("((MIT OR") == ["MIT"]


class TestUniqueLicenseIds:
    """Tests for unique_license_ids."""

    def test_deduplicates_across_expressions(self) -> None:
        """Test that identifiers are collected once across expressions."""
        assert unique_license_ids(["MIT", "(MIT OR ISC)", None, ""]) == {"MIT", "ISC"}


class TestOrLaterIdentifiers:
    """Tests for identifiers that contain an operator word."""

    @pytest.mark.parametrize(
        "identifier",
        ["GPL-2.0-or-later", "AGPL-3.0-or-later", "LGPL-2.1-OR-LATER"],
    )
    def test_or_later_kept_whole(self, identifier: str) -> None:
        """Test that -or- inside an identifier is not treated as an operator."""
        assert extract_license_ids(f"({identifier} OR MIT)") == [identifier, "MIT"]
