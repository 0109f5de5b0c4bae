"""
VCF Ranking Configuration Parser

Loads thresholds, sample groups and input files from a YAML configuration
file. Command line options override any value set here.

Example config:

    input:
      vcf_files: [calls.vcf.gz]
      outfile_suffix: .ranked.vcf
    filters:
      min_support_ratio: 0.7
      min_read_depth: 2
      min_discordants: 0
      min_splits: 0
    groups:
      sample_groups: [[wt1, wt2, wt3], [mut1]]
      group_diff_mins: [3, 1]

Usage:
    from vcfrank.config_parser import load_config, get_nested
    config = load_config("rank.yaml")
    ratio = get_nested(config, "filters.min_support_ratio", 0.7)
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from .criteria import resolve_criteria
from .errors import ConfigError
from .groups import parse_group_spec, resolve_group_pairs

FILTER_KEYS = (
    "min_support_ratio",
    "min_read_depth",
    "min_discordants",
    "min_splits",
    "min_sv_reads",
)


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Read a ranking config. An empty file gives an empty dict.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: On malformed YAML
        ConfigError: If the top level is not a mapping
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path) as fh:
        config = yaml.safe_load(fh)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file [{config_path}] must hold a YAML mapping.")
    return config


def get_nested(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Value at a dotted path such as ``filters.min_read_depth``.

    Examples:
        >>> get_nested({"filters": {"min_read_depth": 5}}, "filters.min_read_depth")
        5
        >>> get_nested({}, "filters.min_splits", 0)
        0
    """
    node: Any = config
    for part in key_path.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def filter_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Threshold values set in the config, keyed by resolve_criteria argument."""
    settings = {}
    for key in FILTER_KEYS:
        value = get_nested(config, f"filters.{key}")
        if value is not None:
            settings[key] = value
    return settings


def sample_groups(config: Dict[str, Any]) -> List[List[str]]:
    """
    Sample groups from the config.

    Each group may be a YAML list or a whitespace/comma separated string.
    """
    groups = get_nested(config, "groups.sample_groups") or []
    if not isinstance(groups, list):
        raise ConfigError("groups.sample_groups must be a list of sample groups")
    parsed = []
    for group in groups:
        if isinstance(group, str):
            parsed.append(list(parse_group_spec(group)))
        elif isinstance(group, list):
            parsed.append([str(name) for name in group])
        else:
            raise ConfigError(f"Invalid sample group in config: {group!r}")
    return parsed


def group_diff_mins(config: Dict[str, Any]) -> List[int]:
    mins = get_nested(config, "groups.group_diff_mins") or []
    if not isinstance(mins, list):
        mins = [mins]
    try:
        return [int(d) for d in mins]
    except (ValueError, TypeError):
        raise ConfigError(f"groups.group_diff_mins must be integers, got {mins}") from None


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate thresholds and sample groups in a configuration.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    try:
        resolve_criteria(**filter_settings(config))
    except ConfigError as e:
        errors.append(f"filters: {e}")

    try:
        resolve_group_pairs(sample_groups(config), group_diff_mins(config))
    except ConfigError as e:
        errors.append(f"groups: {e}")

    vcf_files = get_nested(config, "input.vcf_files", [])
    if isinstance(vcf_files, str):
        vcf_files = [vcf_files]
    for vcf in vcf_files or []:
        if not Path(vcf).exists():
            errors.append(f"VCF file not found: {vcf} (input.vcf_files)")

    return len(errors) == 0, errors
