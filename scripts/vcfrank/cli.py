#!/usr/bin/env python3
"""
VCF Variant Ranking

Sorts the records of VCF files in ranked order of per-sample variant
evidence, with optional filtering by pairs of sample groups that are required
to differ (e.g. wildtype vs. mutant).

Sorting is done by descending number of samples with hits, descending total
support/mapped ratio, descending number of total mapped reads, and ascending
sample name.

Filtering uses the minimum number of mapped reads, the minimum variant
support / total reads ratio, fewer than all samples having the variant, and
optional sample group pairs. Each group comes with a number of its samples
required to differ from the partner group; one group of every pair must be
covered by a majority.

Evidence keys read from the FORMAT column:
    AO, DP       SNP evidence (freeBayes, SVTyper)
    SU, PE, SR   structural variant evidence (Lumpy)

Output: the input lines with three columns prepended to every record
    1. number of hits and the filters that were passed
    2. per-hit support (AO/DP, or SU/PE/SR counts)
    3. hit sample names

Usage:
    # Rank a single file to stdout
    rank-vcf -i calls.vcf

    # 3 wildtype vs 4 mutant samples, at least 1 mutant must differ
    rank-vcf -i calls.vcf -o .ranked.vcf -s 'wt1 wt2 wt3' -s 'm1 m2 m3 m4' -d 3 -d 1

    # Structural variants with split/discordant minimums
    rank-vcf -i lumpy.vcf.gz -o .ranked.vcf -p 2 -c 2

    # Settings from a YAML file, with a per-file summary table
    rank-vcf --config rank.yaml --summary-tsv summary.tsv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml

from . import __version__
from .config_parser import (
    filter_settings,
    get_nested,
    group_diff_mins,
    load_config,
    sample_groups,
    validate_config,
)
from .criteria import resolve_criteria
from .errors import ConfigError
from .filters import RecordFilter
from .groups import parse_group_spec, resolve_group_pairs
from .vcf_io import VcfRanker, write_ranked

logger = logging.getLogger("vcfrank")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rank-vcf",
        description="Rank and filter VCF records by per-sample variant evidence",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-i", "--vcf-file", "--input-file", dest="vcf_files", action="append",
                        metavar="VCF", help="VCF input file (repeatable; .gz supported)")
    parser.add_argument("-o", "--outfile-suffix", "--outfile-extension", dest="outfile_suffix",
                        help="Outfile extension appended to each input file (default: stdout)")
    parser.add_argument("-s", "--sample-group", "--filter-group", dest="sample_groups",
                        action="append", metavar="'S1 S2 ...'",
                        help="Space or comma separated sample names of one group (repeatable, in pairs)")
    parser.add_argument("-d", "--group-diff-min", dest="group_diff_mins", action="append",
                        type=int, metavar="N",
                        help="Number of group samples required to differ (one per -s, in order)")
    parser.add_argument("-m", "--min-support-ratio", type=float,
                        help="Minimum ratio of variant reads (AO) vs total (DP) (default: 0.7)")
    parser.add_argument("-r", "--min-read-depth", type=int,
                        help="Minimum number of reads mapped over a small variant (default: 2)")
    parser.add_argument("-p", "--min-discordants", type=int,
                        help="Min num of discordant read pairs supporting a structural variant (default: 0)")
    parser.add_argument("-c", "--min-splits", type=int,
                        help="Min num of split reads supporting a structural variant (default: 0)")
    parser.add_argument("-v", "--min-sv-reads", type=int,
                        help="Min num of split or discordant reads supporting a structural variant "
                             "(default: sum of -p and -c)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--validate-config", action="store_true",
                        help="Check the --config file and exit without ranking")
    parser.add_argument("--summary-tsv", help="Write a per-file summary table (TSV)")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite existing output files")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def merge_settings(args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
    """Combine config-file values with command line options (which win)."""
    settings = filter_settings(config)
    for key in ("min_support_ratio", "min_read_depth", "min_discordants", "min_splits", "min_sv_reads"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value
    return settings


def resolve_inputs(args: argparse.Namespace, config: Dict[str, Any]) -> List[str]:
    if args.vcf_files:
        return args.vcf_files
    vcf_files = get_nested(config, "input.vcf_files", [])
    if isinstance(vcf_files, str):
        vcf_files = [vcf_files]
    return [str(v) for v in vcf_files or []]


def output_path(vcf_file: str, suffix: Optional[str]) -> Optional[Path]:
    """
    Output file for an input file; None means stdout.

    Examples:
        >>> output_path("calls.vcf", ".ranked.vcf")
        PosixPath('calls.vcf.ranked.vcf')
    """
    if not suffix:
        return None
    return Path(f"{vcf_file}{suffix}")


def build_ranker(args: argparse.Namespace, config: Dict[str, Any]) -> VcfRanker:
    """
    Resolve thresholds and sample groups.

    Raises:
        ConfigError: On invalid thresholds or groups
    """
    criteria = resolve_criteria(**merge_settings(args, config))

    if args.sample_groups:
        groups = [list(parse_group_spec(g)) for g in args.sample_groups]
    else:
        groups = sample_groups(config)
    diff_mins = args.group_diff_mins if args.group_diff_mins else group_diff_mins(config)
    pairs = resolve_group_pairs(groups, diff_mins)

    logger.debug(f"Filter criteria: {criteria}")
    for pair in pairs:
        logger.info(f"Sample group rule: {pair.annotation()}")
    return VcfRanker(RecordFilter(criteria, pairs))


def write_summary(rows: List[Dict[str, Any]], summary_path: str) -> None:
    df = pd.DataFrame(rows, columns=[
        "input_file", "output_file", "data_lines", "skipped", "passed", "global_mode",
    ])
    df.to_csv(summary_path, sep="\t", index=False)
    logger.info(f"Summary written: {summary_path}")


def check_config(config_path: Optional[str], config: Dict[str, Any]) -> int:
    """Report config problems; 0 when the config is usable."""
    if not config_path:
        logger.error("--validate-config needs a --config file")
        return 1
    is_valid, errors = validate_config(config)
    if is_valid:
        logger.info(f"Configuration is valid: {config_path}")
        return 0
    logger.error(f"Configuration errors in {config_path}:")
    for error in errors:
        logger.error(f"  - {error}")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    config: Dict[str, Any] = {}
    if args.config:
        try:
            config = load_config(args.config)
        except FileNotFoundError as e:
            logger.error(str(e))
            return 1
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML: {e}")
            return 1
        except ConfigError as e:
            logger.error(str(e))
            return 1

    if args.validate_config:
        return check_config(args.config, config)

    try:
        ranker = build_ranker(args, config)
    except ConfigError as e:
        logger.error(f"{e} Unable to proceed.")
        return 1

    vcf_files = resolve_inputs(args, config)
    if not vcf_files:
        logger.error("No VCF input files given (-i or input.vcf_files in --config)")
        parser.print_usage(sys.stderr)
        return 1

    suffix = args.outfile_suffix or get_nested(config, "input.outfile_suffix")
    failed = 0
    summary = []

    for vcf_file in vcf_files:
        out_path = output_path(vcf_file, suffix)
        if out_path is not None and out_path.exists() and not args.overwrite:
            logger.error(f"Output file exists: {out_path} (use --overwrite). Skipping [{vcf_file}].")
            failed += 1
            continue

        try:
            result = ranker.rank_file(vcf_file)
        except (FileNotFoundError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Unable to read [{vcf_file}]: {e}")
            failed += 1
            continue

        if out_path is None:
            write_ranked(result, sys.stdout)
        else:
            with open(out_path, "w") as fh:
                write_ranked(result, fh)
            logger.info(f"Ranked output written: {out_path}")

        stats = result.stats
        summary.append({
            "input_file": vcf_file,
            "output_file": str(out_path) if out_path else "-",
            "data_lines": stats.data_lines,
            "skipped": stats.skipped,
            "passed": stats.passed,
            "global_mode": stats.global_mode.value,
        })

    if args.summary_tsv:
        write_summary(summary, args.summary_tsv)

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
