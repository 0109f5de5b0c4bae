"""
Record Filtering

Every sample of a record is tested against the thresholds of the record's
variant mode:

    SNP   DP >= min_read_depth, DP > 0, AO/DP >= min_support_ratio
    SV    SU >= min_sv_reads, PE >= min_discordants, SR >= min_splits
    BOTH  all of the above

Samples passing the test are hits. A record with no hits, or with every
sample a hit, says nothing about which samples carry the variant and is
dropped. When sample groups are configured the record must additionally
pass at least one group pair's difference rule.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence

from .criteria import FilterCriteria
from .evidence import FormatKeyIndex, SampleEvidence, read_sample_evidence
from .groups import GroupPair
from .modes import GlobalMode, VariantMode
from .records import EvidenceKind, HitSupport, RankedRecord

logger = logging.getLogger(__name__)


@dataclass
class FilterOutcome:
    """Result of filtering one record."""
    mode: VariantMode
    total_samples: int
    hits: List[str] = field(default_factory=list)
    supports: List[HitSupport] = field(default_factory=list)
    adequate: FrozenSet[str] = frozenset()
    passing_pairs: List[GroupPair] = field(default_factory=list)
    passed: bool = False

    @property
    def got(self) -> int:
        return len(self.hits)

    @property
    def within_bounds(self) -> bool:
        return 0 < self.got < self.total_samples


class RecordFilter:
    """
    Per-sample and record-level filtering with optional group pairs.

    Examples:
        >>> from vcfrank.criteria import resolve_criteria
        >>> from vcfrank.evidence import FormatKeyIndex
        >>> rf = RecordFilter(resolve_criteria(min_support_ratio=0.5))
        >>> index = FormatKeyIndex.from_format("DP:AO")
        >>> outcome = rf.evaluate(index, VariantMode.SNP, ["S1", "S2"], ["10:8", "10:1"])
        >>> outcome.hits
        ['S1']
    """

    def __init__(self, criteria: FilterCriteria, group_pairs: Optional[Sequence[GroupPair]] = None):
        self.criteria = criteria
        self.group_pairs = list(group_pairs or [])

    def passes_snp(self, evidence: SampleEvidence) -> bool:
        c = self.criteria
        return (
            evidence.dp >= c.min_read_depth
            and evidence.dp > 0
            and evidence.ao / evidence.dp >= c.min_support_ratio
        )

    def passes_sv(self, evidence: SampleEvidence) -> bool:
        c = self.criteria
        return (
            evidence.su >= c.min_sv_reads
            and evidence.pe >= c.min_discordants
            and evidence.sr >= c.min_splits
        )

    def sample_passes(self, evidence: SampleEvidence, mode: VariantMode) -> bool:
        if mode.uses_snp_evidence and not self.passes_snp(evidence):
            return False
        if mode.uses_sv_evidence and not self.passes_sv(evidence):
            return False
        return True

    def has_adequate_depth(self, evidence: SampleEvidence, mode: VariantMode) -> bool:
        """SV-only records have no depth field, so every sample counts."""
        if mode is VariantMode.SV:
            return True
        return evidence.dp >= self.criteria.min_read_depth

    def hit_support(self, evidence: SampleEvidence, mode: VariantMode) -> HitSupport:
        """
        Support entry for a hit sample.

        SNP and BOTH records report ``AO/DP``. SV records report only the
        counts whose threshold is positive, e.g. ``SU7/PE3/SR4`` or ``PE3``.
        """
        if mode.uses_snp_evidence:
            return HitSupport(ao=evidence.ao, dp=evidence.dp, label=f"{evidence.ao}/{evidence.dp}")

        c = self.criteria
        su = evidence.su if c.min_sv_reads > 0 else 0
        pe = evidence.pe if c.min_discordants > 0 else 0
        sr = evidence.sr if c.min_splits > 0 else 0
        terms = []
        if c.min_sv_reads > 0:
            terms.append(f"SU{su}")
        if c.min_discordants > 0:
            terms.append(f"PE{pe}")
        if c.min_splits > 0:
            terms.append(f"SR{sr}")
        return HitSupport(su=su, pe=pe, sr=sr, label="/".join(terms))

    def evaluate(
        self,
        index: FormatKeyIndex,
        mode: VariantMode,
        sample_names: Sequence[str],
        sample_fields: Sequence[str],
    ) -> FilterOutcome:
        """
        Filter one record.

        Args:
            index: FORMAT key index of the record
            mode: Variant mode of the record
            sample_names: Sample names from the column header
            sample_fields: Sample columns of the record, aligned with names;
                absent trailing columns count as missing samples

        Returns:
            FilterOutcome with hits, supports and the pass decision

        Raises:
            SampleDataError: If a sample carries non-numeric evidence
        """
        outcome = FilterOutcome(mode=mode, total_samples=len(sample_names))
        adequate = set()

        for i, sample in enumerate(sample_names):
            raw = sample_fields[i] if i < len(sample_fields) else "."
            evidence = read_sample_evidence(raw, index)
            logger.debug(f"Data for sample [{sample}]: [{raw}] -> {evidence}")

            if self.has_adequate_depth(evidence, mode):
                adequate.add(sample)
            if self.sample_passes(evidence, mode):
                outcome.hits.append(sample)
                outcome.supports.append(self.hit_support(evidence, mode))

        outcome.adequate = frozenset(adequate)

        if not outcome.within_bounds:
            return outcome
        if not self.group_pairs:
            outcome.passed = True
            return outcome

        hit_set = set(outcome.hits)
        outcome.passing_pairs = [
            pair for pair in self.group_pairs if pair.passes(hit_set, outcome.adequate)
        ]
        outcome.passed = bool(outcome.passing_pairs)
        return outcome

    def pass_summary(self, outcome: FilterOutcome, global_mode: GlobalMode) -> str:
        """
        First output column: hit count, criteria passed and group rules.

        Examples:
            >>> from vcfrank.criteria import resolve_criteria
            >>> rf = RecordFilter(resolve_criteria())
            >>> outcome = FilterOutcome(mode=VariantMode.SNP, total_samples=3, hits=["S1"])
            >>> rf.pass_summary(outcome, GlobalMode.SNP)
            '1,HITS>0,HITS<3,SNP/DEP>=0.7,DEP>=2'
        """
        summary = f"{outcome.got},HITS>0,HITS<{outcome.total_samples}"
        summary += self.criteria.summary_terms(global_mode)
        for pair in outcome.passing_pairs:
            summary += "," + pair.annotation()
        return summary

    def to_ranked(self, outcome: FilterOutcome, global_mode: GlobalMode, row: str) -> RankedRecord:
        kind = EvidenceKind.CODED if outcome.mode is VariantMode.SV else EvidenceKind.RATIO
        return RankedRecord(
            pass_summary=self.pass_summary(outcome, global_mode),
            kind=kind,
            supports=tuple(outcome.supports),
            hit_samples=tuple(outcome.hits),
            row=row,
        )
