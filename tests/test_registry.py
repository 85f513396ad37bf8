"""Tests for builder discovery and slug aliases."""
import pytest

from bracket_forge.models import REGISTRY, get_builder, resolve_slug
from bracket_forge.models.psu_bracket import make_model


def test_bracket_module_registered():
    assert REGISTRY["psu_bracket"] is make_model


def test_helpers_not_registered():
    assert "_helpers" not in REGISTRY
    assert "_booleans" not in REGISTRY


@pytest.mark.parametrize("slug", ["psu_bracket", "psu-bracket", "PSU-Bracket", "bracket", "soporte-fuente"])
def test_aliases(slug):
    assert resolve_slug(slug) == "psu_bracket"
    assert get_builder(slug) is make_model


@pytest.mark.parametrize("slug", ["", "shelf", "vesa-adapter"])
def test_unknown(slug):
    assert get_builder(slug) is None
