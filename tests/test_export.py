"""Tests for mesh export and file naming."""
import pytest
import trimesh

from bracket_forge.export import export_bytes, export_filename, normalize_format
from bracket_forge.params import BracketParams


@pytest.fixture
def box():
    return trimesh.creation.box(extents=(10, 20, 30))


class TestFilename:

    def test_default_params(self, default_params):
        assert export_filename(default_params) == "bracket-200x25x16.3mf"

    def test_fractional_dimensions(self):
        p = BracketParams(width=150.5, depth=30, height=12.25)
        assert export_filename(p, "stl") == "bracket-150.5x30x12.25.stl"

    def test_format_is_normalized(self, default_params):
        assert export_filename(default_params, ".STL") == "bracket-200x25x16.stl"


class TestExportBytes:

    def test_binary_stl(self, box):
        data = export_bytes(box, "stl")
        # 80 byte header + count + 50 bytes per triangle
        assert len(data) == 84 + 50 * len(box.faces)

    def test_3mf_is_a_zip_package(self, box):
        pytest.importorskip("lxml")
        pytest.importorskip("networkx")
        data = export_bytes(box, "3mf")
        assert data[:2] == b"PK"

    def test_input_not_mutated(self, box):
        export_bytes(box, "stl")
        assert "unit" not in box.metadata

    def test_unknown_format(self, box):
        with pytest.raises(ValueError):
            export_bytes(box, "obj")

    def test_empty_mesh(self):
        with pytest.raises(ValueError):
            export_bytes(trimesh.Trimesh(), "stl")


def test_normalize_format_default():
    assert normalize_format(None) == "3mf"
    assert normalize_format("", "stl") == "stl"
