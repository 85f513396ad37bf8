"""
Shared fixtures for the bracket builder tests.
"""
import pytest

from bracket_forge.params import BracketParams


@pytest.fixture(scope="session")
def engine():
    """CSG engine handle; geometry tests are skipped without manifold3d."""
    pytest.importorskip("manifold3d")
    from bracket_forge.models._booleans import setup_engine

    return setup_engine()


@pytest.fixture
def default_params():
    return BracketParams()


@pytest.fixture
def small_params():
    """A narrow bracket that builds quickly: 60 x 25 x 16, ear 10, thickness 3."""
    return BracketParams(width=60, depth=25, height=16)
