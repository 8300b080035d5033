"""Unit tests for the format catalog and target selection."""

import pytest

from format_converter.core.catalog import FormatCatalog, normalize_extension
from format_converter.core.constants import DEFAULT_FORMAT_TABLE
from format_converter.core.exceptions import ErrorKind, InvalidSelectionError
from format_converter.models.conversion import SourceCategory


class TestNormalizeExtension:
    """Test extension normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(".PNG", ".png"), ("jpg", ".jpg"), ("  .Tiff ", ".tiff"), ("", "")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_extension(raw) == expected


class TestFormatCatalog:
    """Test suite for FormatCatalog."""

    def test_every_key_is_supported_in_any_case(self, catalog):
        """Lookups are case-insensitive for every key."""
        for extension in DEFAULT_FORMAT_TABLE:
            assert catalog.is_supported(extension)
            assert catalog.is_supported(extension.upper())

    def test_unknown_extension_not_supported(self, catalog):
        assert not catalog.is_supported(".docx")
        assert not catalog.is_supported("")
        assert ".docx" not in catalog

    def test_extension_without_dot_is_supported(self, catalog):
        assert catalog.is_supported("png")

    def test_list_all_targets_has_no_duplicates(self, catalog):
        targets = catalog.list_all_targets()
        assert len(targets) == len(set(targets))

    def test_list_all_targets_first_seen_order(self, catalog):
        """Union follows key order, then target order inside each key."""
        targets = catalog.list_all_targets()

        assert targets[:7] == DEFAULT_FORMAT_TABLE[".jpg"]
        assert targets[7] == ".jpg"
        assert targets.index(".dng") < targets.index(".pdf")
        assert targets.index(".pdf") < targets.index(".stl")

    def test_list_all_targets_not_filtered_by_source(self, catalog):
        """Mesh targets are offered even though no raster source lists them."""
        targets = catalog.list_all_targets()
        assert ".stl" in targets
        assert ".png" in targets

    def test_targets_for_source(self, catalog):
        assert catalog.targets_for(".OBJ") == (".stl", ".fbx")
        assert catalog.targets_for(".unknown") == ()

    def test_is_known_target(self, catalog):
        assert catalog.is_known_target(".pdf")
        assert catalog.is_known_target("JPG")
        assert not catalog.is_known_target(".pcx")

    def test_category_for(self, catalog):
        assert catalog.category_for(".SVG") is SourceCategory.VECTOR
        assert catalog.category_for(".stl") is SourceCategory.MESH
        assert catalog.category_for(".dcm") is SourceCategory.SCIENTIFIC
        assert catalog.category_for(".dxf") is SourceCategory.RASTER

    def test_table_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.table[".new"] = (".png",)

    def test_constructor_normalizes_and_deduplicates(self):
        catalog = FormatCatalog({"PNG": ["JPG", ".jpg", "gif"]})

        assert catalog.keys() == (".png",)
        assert catalog.targets_for(".png") == (".jpg", ".gif")

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError):
            FormatCatalog({"": [".png"]})

    def test_suggest_close_match(self, catalog):
        assert catalog.suggest(".pnng") == ".png"
        assert catalog.suggest(".zzzzzz") is None

    def test_len_and_repr(self, catalog):
        assert len(catalog) == len(DEFAULT_FORMAT_TABLE)
        assert "FormatCatalog" in repr(catalog)


class TestSelectTarget:
    """Test 1-based menu selection."""

    def test_first_and_last_choice(self, catalog):
        targets = catalog.list_all_targets()

        assert catalog.select_target("1") == targets[0]
        assert catalog.select_target(len(targets)) == targets[-1]

    def test_whitespace_is_ignored(self, catalog):
        assert catalog.select_target("  2 \n") == catalog.list_all_targets()[1]

    @pytest.mark.parametrize("choice", ["0", "-1", "abc", "", "1.5"])
    def test_invalid_choices_raise(self, catalog, choice):
        with pytest.raises(InvalidSelectionError) as exc_info:
            catalog.select_target(choice)

        assert exc_info.value.kind is ErrorKind.INVALID_SELECTION

    def test_choice_past_end_raises(self, catalog):
        count = len(catalog.list_all_targets())

        with pytest.raises(InvalidSelectionError, match=f"between 1 and {count}"):
            catalog.select_target(str(count + 1))

    def test_selection_against_custom_menu(self, catalog):
        menu = catalog.targets_for(".obj")

        assert catalog.select_target("2", menu) == ".fbx"
        with pytest.raises(InvalidSelectionError):
            catalog.select_target("3", menu)

    def test_error_details_report_option_count(self, catalog):
        with pytest.raises(InvalidSelectionError) as exc_info:
            catalog.select_target("0", (".png",))

        assert exc_info.value.details["option_count"] == 1
        assert exc_info.value.details["raw_input"] == "0"


class TestCatalogSymmetry:
    """Test asymmetry reporting and the symmetric closure."""

    def test_known_asymmetries_are_reported(self, catalog):
        asymmetries = catalog.asymmetries()

        # RAW sources list .jpg, but .jpg does not list them back
        assert (".cr2", ".jpg") in asymmetries
        assert (".fits", ".png") in asymmetries

    def test_mutual_pairs_are_not_reported(self, catalog):
        asymmetries = catalog.asymmetries()

        assert (".jpg", ".png") not in asymmetries
        assert (".dng", ".cr2") not in asymmetries
        assert (".obj", ".stl") not in asymmetries

    def test_non_key_targets_are_ignored(self, catalog):
        """.pdf is never a source, so it cannot be asymmetric."""
        assert all(target != ".pdf" for _, target in catalog.asymmetries())

    def test_symmetric_closure_has_no_asymmetries(self, catalog):
        symmetric = catalog.symmetric()

        assert symmetric.asymmetries() == []
        assert ".cr2" in symmetric.targets_for(".jpg")

    def test_symmetric_keeps_original_order_first(self, catalog):
        symmetric = catalog.symmetric()
        original = catalog.targets_for(".jpg")

        assert symmetric.targets_for(".jpg")[: len(original)] == original

    def test_symmetric_returns_new_catalog(self, catalog):
        symmetric = catalog.symmetric()

        assert symmetric is not catalog
        assert ".cr2" not in catalog.targets_for(".jpg")
