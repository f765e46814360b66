"""Tests for category label mapping."""

from __future__ import annotations

import pytest

from finder.services.categories import (
    CATEGORY_CODES,
    CATEGORY_DISPLAY_NAMES,
    category_display_name,
    map_category,
    normalize_category,
)


@pytest.mark.parametrize("label", ["", "   ", "all", "All Categories", "view-all", None])
def test_unconstrained_labels_map_to_empty(label):
    assert map_category(label) == ""
    assert normalize_category(label) == "all"


def test_every_canonical_code_maps_to_itself():
    for code in CATEGORY_CODES:
        assert map_category(code) == code
        assert map_category(code.upper()) == code


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Emergency Plumber", "plumbing"),
        ("Pet Services", "pet"),
        ("Pest Control", "pest"),
        ("Landscaping", "gardening"),
        ("Healthcare Clinic", "medical"),
        ("Car Wash", "automotive"),
        ("Gym trainer", "fitness"),
        ("Web Design", "technology"),
        ("Hair Salon", "beauty"),
        ("DJ for weddings", "entertainment"),
        ("Tax filing", "accounting"),
    ],
)
def test_labels_match_first_rule(label, expected):
    assert map_category(label) == expected


def test_unknown_label_is_no_constraint():
    assert map_category("quantum knitting") == ""
    assert normalize_category("quantum knitting") == "all"


def test_mapping_is_stable():
    results = {map_category("Electrician near me") for _ in range(10)}
    assert results == {"electrical"}


def test_display_names():
    assert category_display_name("plumbing") == "Plumbing"
    assert category_display_name("all") == "All"
    assert category_display_name("photography") == "Photography"


def test_view_all_has_no_display_entry():
    assert "view-all" not in CATEGORY_DISPLAY_NAMES
    assert category_display_name(normalize_category("view-all")) == "All"
