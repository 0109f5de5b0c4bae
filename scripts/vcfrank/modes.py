"""
Variant Mode Classification

A record's evidence model is read off its FORMAT keys:

    DP/AO only              -> SNP   (e.g. freeBayes, SVTyper)
    DP/AO plus SU/PE/SR     -> BOTH
    SU/PE/SR only           -> SV    (e.g. Lumpy without SVTyper)
    none of the above       -> unclassifiable, record skipped

While a file is read, the modes seen so far are folded into a GlobalMode,
which decides which filter criteria appear in the pass-summary column.
"""

from enum import Enum

from .errors import ClassificationError, MissingKeyError
from .evidence import EVIDENCE_KEYS, SNP_KEYS, SV_KEYS, FormatKeyIndex


class VariantMode(Enum):
    SNP = "SNP"
    SV = "SV"
    BOTH = "BOTH"

    @property
    def uses_snp_evidence(self) -> bool:
        return self in (VariantMode.SNP, VariantMode.BOTH)

    @property
    def uses_sv_evidence(self) -> bool:
        return self in (VariantMode.SV, VariantMode.BOTH)


class GlobalMode(Enum):
    UNSET = ""
    SNP = "SNP"
    SV = "SV"
    BOTH = "BOTH"
    MIXED = "MIXED"


_REQUIRED_KEY_REASONS = {
    "DP": "The read depth per sample is required by -m and -r for filtering and ranking.",
    "AO": "The alternate genotype read support per sample is required by -m for filtering and ranking.",
    "SU": "The supporting evidence per sample is required by -v for filtering and ranking.",
    "PE": "The structural variant read pair support per sample is required by -p for filtering and ranking.",
    "SR": "The structural variant split read support per sample is required by -c for filtering and ranking.",
}


def classify_record(index: FormatKeyIndex) -> VariantMode:
    """
    Decide the variant mode of a record from its FORMAT keys.

    Raises:
        ClassificationError: If none of DP, AO, SU, PE, SR is present

    Examples:
        >>> classify_record(FormatKeyIndex.from_format("GT:DP:AO"))
        <VariantMode.SNP: 'SNP'>
        >>> classify_record(FormatKeyIndex.from_format("GT:SU:PE:SR"))
        <VariantMode.SV: 'SV'>
    """
    has_snp = bool(index.present(SNP_KEYS))
    has_sv = bool(index.present(SV_KEYS))
    if has_snp and has_sv:
        return VariantMode.BOTH
    if has_snp:
        return VariantMode.SNP
    if has_sv:
        return VariantMode.SV
    raise ClassificationError(
        "Unable to determine variant type. The format string must have at least "
        f"one of the following keys: [{','.join(EVIDENCE_KEYS)}]."
    )


def check_required_keys(index: FormatKeyIndex, mode: VariantMode) -> None:
    """
    Make sure every key the mode filters on is present.

    Raises:
        MissingKeyError: Naming the first missing key
    """
    required = ()
    if mode.uses_snp_evidence:
        required += SNP_KEYS
    if mode.uses_sv_evidence:
        required += SV_KEYS
    for key in required:
        if key not in index:
            raise MissingKeyError(key, _REQUIRED_KEY_REASONS[key])


def next_global_mode(current: GlobalMode, observed: VariantMode) -> GlobalMode:
    """
    Fold one record's mode into the file-wide mode.

    The first record sets the mode. BOTH absorbs everything once seen, a
    conflict between SNP and SV becomes MIXED, and MIXED never changes.

    Examples:
        >>> next_global_mode(GlobalMode.UNSET, VariantMode.SV)
        <GlobalMode.SV: 'SV'>
        >>> next_global_mode(GlobalMode.SNP, VariantMode.SV)
        <GlobalMode.MIXED: 'MIXED'>
        >>> next_global_mode(GlobalMode.SNP, VariantMode.BOTH)
        <GlobalMode.BOTH: 'BOTH'>
    """
    if current is GlobalMode.MIXED:
        return current
    if current is GlobalMode.UNSET or observed is VariantMode.BOTH:
        return GlobalMode(observed.value)
    if current is GlobalMode.BOTH or current.value == observed.value:
        return current
    return GlobalMode.MIXED
