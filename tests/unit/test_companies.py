"""Tests for company normalization."""

from __future__ import annotations

from estiba_wages.companies import find_company, is_company_line, normalize_company


def test_full_legal_name():
    assert normalize_company("CSP IBERIAN VALENCIA TERMINAL") == "CSP"
    assert normalize_company("Valencia Terminal Europa") == "VTE"


def test_partial_name_matching_one_company():
    assert normalize_company("MEDITERRANEAN") == "MSC"
    assert normalize_company("IBERIAN") == "CSP"


def test_spacing_variant():
    assert normalize_company("MEDITERRANEAN SHIPPING C.TV") == "MSC"
    assert normalize_company("Mediterranean Shipping C TV") == "MSC"


def test_codes_and_aliases():
    assert normalize_company("apm") == "APM"
    assert normalize_company("MSCTV") == "MSC"


def test_ambiguous_fragment_passes_through():
    assert normalize_company("valencia") == "VALENCIA"


def test_unknown_company_uppercased():
    assert normalize_company("Acme Stevedores") == "ACME STEVEDORES"


def test_empty():
    assert normalize_company(None) is None
    assert normalize_company("  ") is None


def test_find_company_prefers_full_name():
    m = find_company("AMARRADOR APM TERMINALS VALENCIA EVER GIVEN")
    assert m.group(1) == "APM TERMINALS VALENCIA"


def test_company_line():
    assert is_company_line("CSP IBERIAN VALENCIA TERMINAL")
    assert not is_company_line("MSC AURORA")
