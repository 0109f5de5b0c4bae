"""
Ranked output records.

A RankedRecord is built once for every data line that passes filtering and
carries everything the comparator and the writer need. Its evidence kind is
stored explicitly rather than re-read from the support column text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class EvidenceKind(Enum):
    """How a record's per-hit support was expressed."""
    RATIO = "SNP"  # AO/DP per hit (SNP and BOTH records)
    CODED = "SV"  # SU/PE/SR read counts per hit


@dataclass(frozen=True)
class HitSupport:
    """Support values reported for one hit sample.

    SV counts whose threshold is 0 are not reported and stay 0 here.
    """
    ao: int = 0
    dp: int = 0
    su: int = 0
    pe: int = 0
    sr: int = 0
    label: str = ""


@dataclass(frozen=True)
class RankedRecord:
    pass_summary: str
    kind: EvidenceKind
    supports: Tuple[HitSupport, ...]
    hit_samples: Tuple[str, ...]
    row: str

    @property
    def hit_count(self) -> int:
        return len(self.hit_samples)

    @property
    def support_column(self) -> str:
        return ",".join(s.label for s in self.supports)

    @property
    def sample_column(self) -> str:
        return ",".join(self.hit_samples)

    def to_line(self) -> str:
        """Output line: three annotation columns followed by the original row."""
        return "\t".join((self.pass_summary, self.support_column, self.sample_column, self.row))
