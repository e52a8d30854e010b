"""Tests for additional field suffix typing."""

import pytest

from urispine.core.errors import UnsupportedObjectTypeError
from urispine.core.fields import solr_field_name, solr_suffix_for


class TestSolrSuffixFor:
    @pytest.mark.parametrize(
        "value, suffix",
        [
            ("text", "_ssi"),
            ("", "_ssi"),
            (True, "_bsi"),
            (False, "_bsi"),
            (0, "_isi"),
            (1850, "_isi"),
            (-3, "_isi"),
            ([1, 2, 3], "_isim"),
            (["a", "b"], "_ssim"),
            ([], "_ssim"),
            ([True, False], "_ssim"),
            (("x",), "_ssim"),
        ],
    )
    def test_supported_shapes(self, value, suffix):
        assert solr_suffix_for(value) == suffix

    def test_list_typed_by_first_element(self):
        assert solr_suffix_for([1, "two"]) == "_isim"
        assert solr_suffix_for(["one", 2]) == "_ssim"

    @pytest.mark.parametrize("value", [1.5, None, {"a": 1}, object(), b"bytes"])
    def test_unsupported_shapes(self, value):
        with pytest.raises(UnsupportedObjectTypeError):
            solr_suffix_for(value)


class TestSolrFieldName:
    def test_appends_suffix(self):
        assert solr_field_name("birth_year", 1850) == "birth_year_isi"
        assert solr_field_name("cool", "Yes") == "cool_ssi"
        assert solr_field_name("tags", ["a"]) == "tags_ssim"
