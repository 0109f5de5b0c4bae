"""
Tests for FORMAT key indexing and per-sample evidence extraction.
"""

import pytest

from vcfrank.errors import SampleDataError
from vcfrank.evidence import (
    FormatKeyIndex,
    SampleEvidence,
    expand_missing_sample,
    extract_evidence,
    max_subvalue,
    read_sample_evidence,
)


# ============================================================================
# Tests: FormatKeyIndex
# ============================================================================


class TestFormatKeyIndex:
    """Tests for FormatKeyIndex.from_format."""

    def test_positions_follow_split_order(self):
        index = FormatKeyIndex.from_format("GT:DP:AO:QA")
        assert index.position("DP") == 1
        assert index.position("AO") == 2
        assert index.key_count == 4

    def test_absent_keys(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert "SU" not in index
        assert index.position("SU") is None

    def test_unknown_codes_are_not_indexed(self):
        """Only the five evidence codes are looked up."""
        index = FormatKeyIndex.from_format("GT:QA:DP")
        assert "QA" not in index
        assert index.position("QA") is None
        assert index.key_count == 3

    def test_duplicate_key_last_wins(self):
        index = FormatKeyIndex.from_format("DP:AO:DP")
        assert index.position("DP") == 2
        assert index.key_count == 2

    def test_present(self):
        index = FormatKeyIndex.from_format("GT:SR:SU:PE")
        assert index.present() == ("SU", "PE", "SR")
        assert index.present(("DP", "AO")) == ()


# ============================================================================
# Tests: Extraction
# ============================================================================


class TestExtractEvidence:
    """Tests for extract_evidence and max_subvalue."""

    def test_single_value(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert extract_evidence("0/1:20:7", index, "DP") == 20
        assert extract_evidence("0/1:20:7", index, "AO") == 7

    def test_multiallelic_takes_maximum(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert extract_evidence("1/2:20:3,11,4", index, "AO") == 11

    def test_absent_key_is_zero(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert extract_evidence("0/1:20:7", index, "SU") == 0

    def test_short_sample_field_is_zero(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert extract_evidence("0/1", index, "AO") == 0

    def test_dot_subvalue_is_zero(self):
        assert max_subvalue(".") == 0
        assert max_subvalue("3,.") == 3

    def test_non_numeric_raises(self):
        with pytest.raises(SampleDataError):
            max_subvalue("abc")

    @pytest.mark.parametrize("raw", ["inf", "-inf", "nan", "1e400", "3,inf"])
    def test_non_finite_raises(self, raw):
        with pytest.raises(SampleDataError):
            max_subvalue(raw)

    def test_float_text_truncated(self):
        assert max_subvalue("7.9") == 7


class TestMissingSample:
    """Tests for the missing-sample marker."""

    def test_expands_to_key_count(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert expand_missing_sample(".", index) == "0:0:0"

    def test_present_sample_untouched(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert expand_missing_sample("0/1:5:2", index) == "0/1:5:2"

    def test_missing_sample_is_zero_evidence(self):
        index = FormatKeyIndex.from_format("GT:DP:AO")
        assert read_sample_evidence(".", index) == SampleEvidence()


class TestReadSampleEvidence:
    """Tests for read_sample_evidence."""

    def test_sv_and_snp_codes(self):
        index = FormatKeyIndex.from_format("GT:DP:AO:SU:PE:SR")
        ev = read_sample_evidence("0/1:30:12,2:9:4:5", index)
        assert ev == SampleEvidence(dp=30, ao=12, su=9, pe=4, sr=5)

    def test_support_ratio(self):
        assert SampleEvidence(dp=10, ao=8).support_ratio == pytest.approx(0.8)
        assert SampleEvidence(dp=0, ao=3).support_ratio == 0.0
