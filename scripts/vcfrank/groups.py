"""
Sample Group Difference Rule

Sample groups are declared in pairs, e.g. three wildtype and four mutant
samples:

    -s 's1 s2 s3' -s 's4 s5 s6 s7' -d 3 -d 1

Each group carries a diff-min: how many of its members must differ from the
partner group. A record passes a pair when one side has at least its diff-min
of hits while the other side has fewer than its diff-min of hits among
members with adequate read depth (and enough adequate members to call them
non-variant at all).

One diff-min of every pair must cover a majority of its group, so that one
side acts as an unambiguous reference genotype.
"""

import logging
from dataclasses import dataclass
from typing import Collection, List, Optional, Sequence, Tuple

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupPair:
    """One pair of sample groups with their diff-mins."""
    number: int  # 1-based pair number used in annotations
    group1: Tuple[str, ...]
    min1: int
    group2: Tuple[str, ...]
    min2: int

    @property
    def members(self) -> Tuple[str, ...]:
        return self.group1 + self.group2

    def passes(self, hits: Collection[str], adequate: Collection[str]) -> bool:
        """
        Test the pair against one record.

        Args:
            hits: Names of samples that passed the per-sample filter
            adequate: Names of samples with adequate depth to call a non-hit

        Returns:
            True if either group differs from the other by its diff-min

        Examples:
            >>> pair = GroupPair(1, ("s1", "s2"), 2, ("s3",), 1)
            >>> pair.passes({"s1", "s2"}, {"s1", "s2", "s3"})
            True
        """
        hits1 = sum(1 for s in self.group1 if s in hits)
        hits2 = sum(1 for s in self.group2 if s in hits)
        adequate_hits1 = sum(1 for s in self.group1 if s in hits and s in adequate)
        adequate_hits2 = sum(1 for s in self.group2 if s in hits and s in adequate)
        adequate1 = sum(1 for s in self.group1 if s in adequate)
        adequate2 = sum(1 for s in self.group2 if s in adequate)

        first_differs = (
            hits1 >= self.min1
            and adequate_hits2 < self.min2
            and adequate2 >= self.min2
        )
        second_differs = (
            adequate_hits1 < self.min1
            and adequate1 >= self.min1
            and hits2 >= self.min2
        )
        logger.debug(
            f"Group pair {self.number}: POS1/NEG2 [{hits1}/{adequate_hits2}] "
            f"NEG1/POS2 [{adequate_hits1}/{hits2}]"
        )
        return first_differs or second_differs

    def annotation(self) -> str:
        """
        Pass-summary text for this pair.

        Examples:
            >>> GroupPair(1, ("s1", "s2"), 2, ("s3",), 1).annotation()
            'GROUPRULEPAIR1[SET(s1,s2)>=2 DIFFERS FROM SET(s3)>=1]'
        """
        return (
            f"GROUPRULEPAIR{self.number}[SET({','.join(self.group1)})>={self.min1} "
            f"DIFFERS FROM SET({','.join(self.group2)})>={self.min2}]"
        )


def parse_group_spec(spec: str) -> Tuple[str, ...]:
    """
    Split a group option value into sample names.

    Examples:
        >>> parse_group_spec("s1 s2,s3")
        ('s1', 's2', 's3')
    """
    return tuple(name for name in spec.replace(",", " ").split() if name)


def resolve_diff_mins(
    groups: Sequence[Sequence[str]],
    diff_mins: Optional[Sequence[int]] = None,
) -> List[int]:
    """
    Fill in and validate one diff-min per group.

    With no diff-mins every member of every group must differ. Groups without
    an explicit diff-min take the first one given, capped at the group size.

    Raises:
        ConfigError: On too many diff-mins or a value outside 1..group size
    """
    given = [int(d) for d in (diff_mins or [])]
    sizes = [len(g) for g in groups]

    if len(given) > len(groups):
        raise ConfigError(
            f"[{len(given)}] group diff mins (-d) were supplied for [{len(groups)}] sample groups (-s)."
        )

    resolved = list(given)
    for i in range(len(given), len(groups)):
        if not given or given[0] > sizes[i]:
            resolved.append(sizes[i])
        else:
            resolved.append(given[0])

    if any(d < 1 or d > size for d, size in zip(resolved, sizes)):
        raise ConfigError(
            f"The group diff mins (-d) [{','.join(str(d) for d in resolved)}] must each be a "
            "positive value less than or equal to the number of members in the "
            f"corresponding sample group [{','.join(str(s) for s in sizes)}].  To require "
            "all members of each group be different, do not supply -d."
        )
    return resolved


def resolve_group_pairs(
    groups: Optional[Sequence[Sequence[str]]],
    diff_mins: Optional[Sequence[int]] = None,
) -> List[GroupPair]:
    """
    Build validated group pairs from the configured groups and diff-mins.

    Args:
        groups: Sample name lists, taken pairwise (0,1), (2,3), ...
        diff_mins: Per-group minimum number of differing members

    Returns:
        List of GroupPair, empty when no groups are configured

    Raises:
        ConfigError: On an odd or empty group, bad diff-mins, or a pair
            without a majority-reference group
    """
    groups = [tuple(g) for g in (groups or [])]
    if not groups:
        if diff_mins:
            logger.warning("Group diff mins (-d) were supplied without sample groups (-s) and will be ignored.")
        return []

    if len(groups) % 2:
        raise ConfigError(
            f"There must be 2 (or an even number of) sample groups, but [{len(groups)}] were supplied."
        )
    for i, group in enumerate(groups, 1):
        if not group:
            raise ConfigError(f"Sample group [{i}] has no sample names.")

    mins = resolve_diff_mins(groups, diff_mins)

    pairs = []
    for i in range(0, len(groups), 2):
        pair = GroupPair(
            number=i // 2 + 1,
            group1=groups[i],
            min1=mins[i],
            group2=groups[i + 1],
            min2=mins[i + 1],
        )
        if not (pair.min1 > len(pair.group1) / 2 or pair.min2 > len(pair.group2) / 2):
            raise ConfigError(
                f"One of the group diff mins (-d) in pair [{pair.number}] must represent a "
                "majority of the number of members in its corresponding sample group, so "
                "that one group serves as an unambiguous reference genotype."
            )
        pairs.append(pair)
    return pairs
