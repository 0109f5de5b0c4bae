"""
vcfrank - VCF Variant Ranking Library

Reusable pieces for ranking VCF records by per-sample variant evidence:
- FORMAT key indexing and evidence extraction (AO, DP, SU, PE, SR)
- Variant mode classification (SNP, SV, BOTH)
- Per-sample filtering and sample group difference rules
- Mode-aware ranking of passing records
"""

from .criteria import FilterCriteria, resolve_criteria

from .errors import (
    VcfRankError,
    ConfigError,
    RecordError,
    ClassificationError,
    MissingKeyError,
    SampleDataError,
)

from .evidence import (
    FormatKeyIndex,
    SampleEvidence,
    extract_evidence,
    read_sample_evidence,
)

from .filters import RecordFilter, FilterOutcome

from .groups import GroupPair, resolve_group_pairs

from .modes import (
    VariantMode,
    GlobalMode,
    classify_record,
    next_global_mode,
)

from .ranking import rank_records, compare_records

from .records import RankedRecord, HitSupport, EvidenceKind

from .vcf_io import VcfRanker, RankResult, write_ranked

__version__ = "1.0.0"

__all__ = [
    # Criteria
    "FilterCriteria",
    "resolve_criteria",
    # Errors
    "VcfRankError",
    "ConfigError",
    "RecordError",
    "ClassificationError",
    "MissingKeyError",
    "SampleDataError",
    # Evidence
    "FormatKeyIndex",
    "SampleEvidence",
    "extract_evidence",
    "read_sample_evidence",
    # Filtering
    "RecordFilter",
    "FilterOutcome",
    "GroupPair",
    "resolve_group_pairs",
    # Modes
    "VariantMode",
    "GlobalMode",
    "classify_record",
    "next_global_mode",
    # Ranking
    "rank_records",
    "compare_records",
    "RankedRecord",
    "HitSupport",
    "EvidenceKind",
    # I/O
    "VcfRanker",
    "RankResult",
    "write_ranked",
]
