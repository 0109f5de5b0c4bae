"""
Filter thresholds.

Defaults follow the original ranking tool: a support ratio of 0.7 and a depth
of 2 for SNP evidence, and no minimum for structural variant evidence. When
discordant and/or split minimums are given without an SV read minimum, the SV
read minimum becomes their sum.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional

from .errors import ConfigError
from .modes import GlobalMode

DEFAULT_MIN_SUPPORT_RATIO = 0.7
DEFAULT_MIN_READ_DEPTH = 2
DEFAULT_MIN_DISCORDANTS = 0
DEFAULT_MIN_SPLITS = 0


@dataclass(frozen=True)
class FilterCriteria:
    """Resolved per-sample thresholds."""
    min_support_ratio: float = DEFAULT_MIN_SUPPORT_RATIO
    min_read_depth: int = DEFAULT_MIN_READ_DEPTH
    min_discordants: int = DEFAULT_MIN_DISCORDANTS
    min_splits: int = DEFAULT_MIN_SPLITS
    min_sv_reads: int = DEFAULT_MIN_DISCORDANTS + DEFAULT_MIN_SPLITS

    def summary_terms(self, global_mode: GlobalMode) -> str:
        """
        Criteria text for the pass-summary column.

        SNP criteria are left out for pure SV files, SV criteria for pure SNP
        files.

        Examples:
            >>> FilterCriteria().summary_terms(GlobalMode.SNP)
            ',SNP/DEP>=0.7,DEP>=2'
        """
        terms = ""
        if global_mode is not GlobalMode.SV:
            terms += f",SNP/DEP>={format_number(self.min_support_ratio)},DEP>={self.min_read_depth}"
        if global_mode is not GlobalMode.SNP:
            terms += f",SE>={self.min_sv_reads},PE>={self.min_discordants},SR>={self.min_splits}"
        return terms


def format_number(value: float) -> str:
    """
    Plain decimal text without exponent or trailing zeros.

    Examples:
        >>> format_number(0.7), format_number(1.0), format_number(0.00001)
        ('0.7', '1', '0.00001')
    """
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _as_number(value: Any, convert: Callable[[Any], Any], option: str, name: str):
    try:
        return convert(value)
    except (TypeError, ValueError, OverflowError):
        raise ConfigError(f"Invalid value for {option} ({name}): [{value}].  Must be a number.") from None


def resolve_criteria(
    min_support_ratio: Optional[float] = None,
    min_read_depth: Optional[int] = None,
    min_discordants: Optional[int] = None,
    min_splits: Optional[int] = None,
    min_sv_reads: Optional[int] = None,
) -> FilterCriteria:
    """
    Apply defaults and validate thresholds.

    Args:
        min_support_ratio: Minimum AO/DP for a SNP hit (default 0.7)
        min_read_depth: Minimum DP for a SNP hit (default 2)
        min_discordants: Minimum PE for an SV hit (default 0)
        min_splits: Minimum SR for an SV hit (default 0)
        min_sv_reads: Minimum SU for an SV hit (default discordants + splits)

    Returns:
        FilterCriteria

    Raises:
        ConfigError: On non-numeric or negative values, or an SV read minimum
            below the sum of the discordant and split minimums

    Examples:
        >>> resolve_criteria(min_discordants=2, min_splits=3).min_sv_reads
        5
    """
    def setting(value, default, convert, option, name):
        if value is None:
            return default
        return _as_number(value, convert, option, name)

    ratio = setting(min_support_ratio, DEFAULT_MIN_SUPPORT_RATIO, float, "-m", "min_support_ratio")
    depth = setting(min_read_depth, DEFAULT_MIN_READ_DEPTH, int, "-r", "min_read_depth")
    discordants = setting(min_discordants, DEFAULT_MIN_DISCORDANTS, int, "-p", "min_discordants")
    splits = setting(min_splits, DEFAULT_MIN_SPLITS, int, "-c", "min_splits")
    sv_reads = setting(min_sv_reads, discordants + splits, int, "-v", "min_sv_reads")

    if not math.isfinite(ratio):
        raise ConfigError(f"Invalid value for -m: [{ratio}].  Must be a finite number.")
    if ratio < 0:
        raise ConfigError(f"Invalid value for -m: [{ratio}].  Cannot be negative.")
    if depth < 0:
        raise ConfigError(f"Invalid value for -r: [{depth}].  Cannot be negative.")
    if discordants < 0:
        raise ConfigError(f"Invalid value for -p: [{discordants}].  Cannot be negative.")
    if splits < 0:
        raise ConfigError(f"Invalid value for -c: [{splits}].  Cannot be negative.")
    if sv_reads < 0:
        raise ConfigError(f"Invalid value for -v: [{sv_reads}].  Cannot be negative.")
    if sv_reads < discordants + splits:
        raise ConfigError(
            f"-v [{sv_reads}] cannot be less than the sum of -p [{discordants}] "
            f"and -c [{splits}]: [{discordants + splits}]."
        )

    return FilterCriteria(
        min_support_ratio=ratio,
        min_read_depth=depth,
        min_discordants=discordants,
        min_splits=splits,
        min_sv_reads=sv_reads,
    )
