"""
FORMAT Key Index and Per-Sample Evidence Extraction

Each VCF data record declares the layout of its sample columns in the FORMAT
field, a colon-delimited list of keys:

    FORMAT      GT:DP:AO:QA
    sample      0/1:12:9,1:340

Only five evidence codes matter for ranking:

    DP  read depth over the variant position     (SNP evidence)
    AO  reads supporting the alternate allele     (SNP evidence)
    SU  total reads supporting a structural variant
    PE  discordant read pairs supporting it
    SR  split reads supporting it

Multi-allelic sites carry comma-delimited sub-values (``9,1`` above). The
largest sub-value is used, since all we need to know is whether anything
marks the sample as carrying the variant.

A sample with no data at all is written as a single ``.`` and is treated as
zero evidence with zero depth.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import SampleDataError

EVIDENCE_KEYS: Tuple[str, ...] = ("DP", "AO", "SU", "PE", "SR")
SNP_KEYS: Tuple[str, ...] = ("DP", "AO")
SV_KEYS: Tuple[str, ...] = ("SU", "PE", "SR")

MISSING_SAMPLE = "."


@dataclass(frozen=True)
class FormatKeyIndex:
    """Positions of the evidence codes within one record's FORMAT field.

    ``slots`` is aligned with EVIDENCE_KEYS; ``None`` marks an absent key.
    """
    slots: Tuple[Optional[int], ...]
    key_count: int

    @classmethod
    def from_format(cls, format_field: str) -> "FormatKeyIndex":
        """
        Build the index from a FORMAT string.

        Duplicate keys keep the position of their last occurrence.

        Examples:
            >>> index = FormatKeyIndex.from_format("GT:DP:AO")
            >>> index.position("AO")
            2
            >>> "SU" in index
            False
        """
        positions = {}
        for i, key in enumerate(format_field.split(":")):
            positions[key] = i
        slots = tuple(positions.get(key) for key in EVIDENCE_KEYS)
        return cls(slots=slots, key_count=len(positions))

    def __contains__(self, key: str) -> bool:
        return self.position(key) is not None

    def position(self, key: str) -> Optional[int]:
        if key not in EVIDENCE_KEYS:
            return None
        return self.slots[EVIDENCE_KEYS.index(key)]

    def present(self, keys: Tuple[str, ...] = EVIDENCE_KEYS) -> Tuple[str, ...]:
        """Subset of ``keys`` present in this index, in the given order."""
        return tuple(key for key in keys if key in self)


@dataclass(frozen=True)
class SampleEvidence:
    """Resolved numeric evidence for one sample in one record."""
    dp: int = 0
    ao: int = 0
    su: int = 0
    pe: int = 0
    sr: int = 0

    @property
    def support_ratio(self) -> float:
        """AO / DP, 0.0 when there is no depth."""
        if self.dp <= 0:
            return 0.0
        return self.ao / self.dp


def expand_missing_sample(sample_field: str, index: FormatKeyIndex) -> str:
    """
    Replace the missing-sample marker with zero-filled values.

    Examples:
        >>> expand_missing_sample(".", FormatKeyIndex.from_format("GT:DP:AO"))
        '0:0:0'
        >>> expand_missing_sample("0/1:10:8", FormatKeyIndex.from_format("GT:DP:AO"))
        '0/1:10:8'
    """
    if sample_field != MISSING_SAMPLE:
        return sample_field
    return ":".join(["0"] * index.key_count)


def max_subvalue(raw: str) -> int:
    """
    Largest integer among comma-delimited sub-values.

    ``.`` and empty sub-values count as 0.

    Raises:
        SampleDataError: If a sub-value is not a finite number
    """
    best = 0
    for i, token in enumerate(raw.split(",")):
        token = token.strip()
        if token in ("", MISSING_SAMPLE):
            value = 0
        else:
            try:
                value = int(token)
            except ValueError:
                try:
                    value = int(float(token))
                except (ValueError, OverflowError):
                    raise SampleDataError(f"Non-numeric evidence value [{raw}]") from None
        if i == 0 or value > best:
            best = value
    return best


def extract_evidence(sample_field: str, index: FormatKeyIndex, key: str) -> int:
    """
    Numeric value of one evidence key for a sample.

    Returns 0 when the key is not in the index or the sample carries fewer
    values than the FORMAT field declares.

    Examples:
        >>> index = FormatKeyIndex.from_format("GT:DP:AO")
        >>> extract_evidence("0/1:20:3,11", index, "AO")
        11
    """
    pos = index.position(key)
    if pos is None:
        return 0
    values = sample_field.split(":")
    if pos >= len(values):
        return 0
    return max_subvalue(values[pos])


def read_sample_evidence(sample_field: str, index: FormatKeyIndex) -> SampleEvidence:
    """Extract every available evidence code for one sample."""
    field = expand_missing_sample(sample_field, index)
    return SampleEvidence(
        dp=extract_evidence(field, index, "DP"),
        ao=extract_evidence(field, index, "AO"),
        su=extract_evidence(field, index, "SU"),
        pe=extract_evidence(field, index, "PE"),
        sr=extract_evidence(field, index, "SR"),
    )
