"""
Ranking of Passing Records

Records are sorted in descending order of:

1. number of hit samples
2. support, measured per evidence kind:
   - SNP vs SNP: pooled AO/DP ratio over hits, then pooled depth
   - SV vs SV: split+discordant support from hits having both, then SU,
     SR and PE totals
   - SNP vs SV: the SV record's total support (SU, or SR+PE when SU was not
     reported), then its both-support, SU, SR and PE totals, each weighed
     against the SNP record's pooled AO
3. hit sample names, ascending

The mixed SNP/SV comparison puts read counts against read counts without any
normalisation. Downstream consumers rely on this ordering, keep it as is.
"""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, List, Tuple

from .records import EvidenceKind, RankedRecord


@dataclass(frozen=True)
class RankMetrics:
    """Comparison keys derived from a RankedRecord."""
    hits: int
    kind: EvidenceKind
    samples: str
    ao_sum: int = 0
    dp_sum: int = 0
    su_sum: int = 0
    sr_sum: int = 0
    pe_sum: int = 0
    both_sum: int = 0

    @property
    def support(self) -> float:
        if self.dp_sum == 0:
            return 0.0
        return self.ao_sum / self.dp_sum

    @property
    def sv_support(self) -> int:
        return self.su_sum if self.su_sum else self.sr_sum + self.pe_sum

    def mixed_keys(self) -> Tuple[float, ...]:
        """Keys used against a record of the other evidence kind."""
        if self.kind is EvidenceKind.RATIO:
            return (self.ao_sum,) * 5
        return (self.sv_support, self.both_sum, self.su_sum, self.sr_sum, self.pe_sum)

    def matched_keys(self) -> Tuple[float, ...]:
        """Keys used against a record of the same evidence kind."""
        if self.kind is EvidenceKind.RATIO:
            return (self.support, self.dp_sum)
        return (self.both_sum, self.su_sum, self.sr_sum, self.pe_sum)


def rank_metrics(record: RankedRecord) -> RankMetrics:
    """
    Sum the per-hit support of a record.

    Examples:
        >>> from vcfrank.records import HitSupport
        >>> rec = RankedRecord("2,HITS>0", EvidenceKind.RATIO,
        ...                    (HitSupport(ao=8, dp=10), HitSupport(ao=3, dp=5)),
        ...                    ("S1", "S2"), "row")
        >>> rank_metrics(rec).support
        0.7333333333333333
    """
    ao = dp = su = sr = pe = both = 0
    for s in record.supports:
        ao += s.ao
        dp += s.dp
        su += s.su
        sr += s.sr
        pe += s.pe
        if s.sr and s.pe:
            both += s.sr + s.pe
    return RankMetrics(
        hits=record.hit_count,
        kind=record.kind,
        samples=record.sample_column,
        ao_sum=ao,
        dp_sum=dp,
        su_sum=su,
        sr_sum=sr,
        pe_sum=pe,
        both_sum=both,
    )


def _descending(a_keys: Iterable[float], b_keys: Iterable[float]) -> int:
    for a, b in zip(a_keys, b_keys):
        if a != b:
            return -1 if a > b else 1
    return 0


def compare_metrics(a: RankMetrics, b: RankMetrics) -> int:
    """Negative when ``a`` ranks before ``b``."""
    result = _descending((a.hits,), (b.hits,))
    if result:
        return result

    if a.kind is not b.kind:
        result = _descending(a.mixed_keys(), b.mixed_keys())
    else:
        result = _descending(a.matched_keys(), b.matched_keys())
    if result:
        return result

    if a.samples != b.samples:
        return -1 if a.samples < b.samples else 1
    return 0


def compare_records(a: RankedRecord, b: RankedRecord) -> int:
    return compare_metrics(rank_metrics(a), rank_metrics(b))


def rank_records(records: Iterable[RankedRecord]) -> List[RankedRecord]:
    """
    Sort passing records, best first.

    The sort is stable, so records equal on every key keep input order.
    """
    keyed = [(rank_metrics(r), r) for r in records]
    keyed.sort(key=cmp_to_key(lambda x, y: compare_metrics(x[0], y[0])))
    return [r for _, r in keyed]
