"""
Tests for the ranking comparator.
"""

import random

from vcfrank.ranking import compare_records, rank_metrics, rank_records
from vcfrank.records import EvidenceKind, HitSupport, RankedRecord


def snp_record(samples, ratios, row="row"):
    """RankedRecord with AO/DP supports, e.g. ratios=[(8, 10)]."""
    supports = tuple(HitSupport(ao=ao, dp=dp, label=f"{ao}/{dp}") for ao, dp in ratios)
    return RankedRecord(f"{len(samples)},HITS>0", EvidenceKind.RATIO, supports, tuple(samples), row)


def sv_record(samples, counts, row="row"):
    """RankedRecord with coded SV supports, e.g. counts=[(su, pe, sr)]."""
    supports = tuple(
        HitSupport(su=su, pe=pe, sr=sr, label=f"SU{su}/PE{pe}/SR{sr}") for su, pe, sr in counts
    )
    return RankedRecord(f"{len(samples)},HITS>0", EvidenceKind.CODED, supports, tuple(samples), row)


# ============================================================================
# Tests: Metrics
# ============================================================================


class TestRankMetrics:
    """Tests for rank_metrics."""

    def test_snp_sums(self):
        m = rank_metrics(snp_record(["S1", "S2"], [(8, 10), (2, 10)]))
        assert (m.ao_sum, m.dp_sum) == (10, 20)
        assert m.support == 0.5

    def test_zero_depth_guarded(self):
        m = rank_metrics(snp_record([], []))
        assert m.support == 0.0

    def test_sv_sums(self):
        m = rank_metrics(sv_record(["S1", "S2"], [(5, 2, 3), (4, 4, 0)]))
        assert (m.su_sum, m.pe_sum, m.sr_sum) == (9, 6, 3)
        # only S1 has both split and discordant support
        assert m.both_sum == 5

    def test_sv_support_falls_back_to_splits_and_discordants(self):
        m = rank_metrics(sv_record(["S1"], [(0, 2, 3)]))
        assert m.sv_support == 5


# ============================================================================
# Tests: Ordering
# ============================================================================


class TestRankRecords:
    """Tests for rank_records ordering."""

    def test_more_hits_first(self):
        one = snp_record(["S1"], [(10, 10)])
        two = snp_record(["S1", "S2"], [(5, 10), (5, 10)])
        assert rank_records([one, two]) == [two, one]

    def test_higher_ratio_first(self):
        low = snp_record(["S1"], [(5, 10)])
        high = snp_record(["S2"], [(8, 10)])
        assert rank_records([low, high]) == [high, low]

    def test_depth_breaks_ratio_tie(self):
        shallow = snp_record(["S1"], [(4, 5)])
        deep = snp_record(["S2"], [(8, 10)])
        assert rank_records([shallow, deep]) == [deep, shallow]

    def test_sample_names_ascending(self):
        b = snp_record(["S2"], [(8, 10)], row="b")
        a = snp_record(["S1"], [(8, 10)], row="a")
        assert rank_records([b, a]) == [a, b]

    def test_sv_both_support_first(self):
        splits_only = sv_record(["S1"], [(9, 0, 9)])
        both = sv_record(["S2"], [(4, 2, 2)])
        assert rank_records([splits_only, both]) == [both, splits_only]

    def test_sv_su_then_sr_then_pe(self):
        a = sv_record(["S1"], [(6, 0, 0)], row="a")
        b = sv_record(["S1"], [(5, 0, 9)], row="b")
        assert rank_records([b, a]) == [a, b]
        c = sv_record(["S1"], [(5, 9, 0)], row="c")
        d = sv_record(["S1"], [(5, 0, 1)], row="d")
        assert rank_records([c, d]) == [d, c]

    def test_mixed_sv_support_against_snp_reads(self):
        snp = snp_record(["S1"], [(8, 10)])
        strong_sv = sv_record(["S2"], [(12, 6, 6)])
        weak_sv = sv_record(["S3"], [(3, 2, 1)])
        assert rank_records([snp, strong_sv]) == [strong_sv, snp]
        assert rank_records([weak_sv, snp]) == [snp, weak_sv]

    def test_mixed_tie_falls_to_names(self):
        snp = snp_record(["S2"], [(5, 10)])
        sv = sv_record(["S1"], [(5, 5, 0)])
        # SU ties with AO; both-support 0 < 5 decides for the SNP record
        assert rank_records([sv, snp]) == [snp, sv]

    def test_hit_count_beats_mode(self):
        snp = snp_record(["S1", "S2"], [(1, 2), (1, 2)])
        sv = sv_record(["S3"], [(100, 50, 50)])
        assert rank_records([sv, snp]) == [snp, sv]

    def test_idempotent(self):
        rng = random.Random(7)
        records = [
            snp_record([f"S{i}"], [(rng.randint(1, 10), 10)], row=str(i)) for i in range(20)
        ] + [
            snp_record([f"S{i}", "T"], [(rng.randint(1, 10), 10), (5, 10)], row=f"t{i}") for i in range(5)
        ]
        once = rank_records(records)
        assert rank_records(once) == once
        shuffled = list(records)
        rng.shuffle(shuffled)
        assert rank_records(shuffled) == once

    def test_comparator_antisymmetric(self):
        a = snp_record(["S1"], [(8, 10)])
        b = snp_record(["S2"], [(5, 10)])
        assert compare_records(a, b) < 0
        assert compare_records(b, a) > 0
        assert compare_records(a, a) == 0
