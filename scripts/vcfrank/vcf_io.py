"""
VCF Ranking Orchestration

Reads a VCF file line by line, passes metadata and header lines through,
filters every data record and finally sorts the passing records.

Output layout:
    ##metadata lines                        (unchanged)
    #NUMHITS,SEARCHCRITERIA  SNPREAD/DEPTH  SNPSAMPLES  CHROM ... FORMAT S1 S2
    <summary>  <supports>  <hit samples>  <original row>     (ranked)

Sorting needs the complete set of passing records, so a file is buffered in
memory before anything is written. A malformed record is skipped with an
error message and processing continues.
"""

import gzip
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple, Union

from .errors import RecordError, SampleDataError
from .evidence import FormatKeyIndex
from .filters import RecordFilter
from .modes import GlobalMode, VariantMode, check_required_keys, classify_record, next_global_mode
from .ranking import rank_records
from .records import RankedRecord

logger = logging.getLogger(__name__)

FORMAT_COLUMN = "FORMAT"
DEFAULT_FORMAT_INDEX = 8  # standard VCF: FORMAT is the 9th column
RANKED_HEADER_PREFIX = "#NUMHITS,SEARCHCRITERIA\tSNPREAD/DEPTH\tSNPSAMPLES\t"
PROGRESS_EVERY = 10000


@dataclass
class RankStats:
    """Per-file counters."""
    input_file: str
    data_lines: int = 0
    skipped: int = 0
    passed: int = 0
    global_mode: GlobalMode = GlobalMode.UNSET


@dataclass
class RankResult:
    header_lines: List[str] = field(default_factory=list)
    records: List[RankedRecord] = field(default_factory=list)
    stats: Optional[RankStats] = None


def open_vcf(path: Union[str, Path]) -> TextIO:
    """Open a plain or gzip-compressed VCF for reading text."""
    path = str(path)
    if path.endswith(".gz"):
        return gzip.open(path, "rt")
    return open(path, "r")


def ranked_header(header_line: str) -> str:
    """
    Column header line with the three annotation columns prepended.

    Examples:
        >>> ranked_header("#CHROM\\tPOS")
        '#NUMHITS,SEARCHCRITERIA\\tSNPREAD/DEPTH\\tSNPSAMPLES\\tCHROM\\tPOS'
    """
    return RANKED_HEADER_PREFIX + header_line.replace("#", "", 1)


class VcfRanker:
    """Streams VCF lines through classification, filtering and ranking."""

    def __init__(self, record_filter: RecordFilter):
        self.record_filter = record_filter

    def rank_file(self, path: Union[str, Path]) -> RankResult:
        """
        Filter and rank one VCF file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"VCF file not found: {path}")
        logger.info(f"Ranking VCF file: {path}")
        with open_vcf(path) as fh:
            return self.rank_lines(fh, source=str(path))

    def rank_lines(self, lines: Iterable[str], source: str = "<stream>") -> RankResult:
        """
        Filter and rank VCF text lines.

        Args:
            lines: Lines of one VCF file, with or without line endings
            source: Name used in log messages and stats

        Returns:
            RankResult with pass-through header lines, ranked records and stats
        """
        result = RankResult(stats=RankStats(input_file=source))
        stats = result.stats
        format_index = DEFAULT_FORMAT_INDEX
        samples: Optional[List[str]] = None
        warned_no_header = False
        passed: List[RankedRecord] = []

        for line_num, raw in enumerate(lines, 1):
            if line_num % PROGRESS_EVERY == 0:
                logger.debug(f"[{source}] Reading line: [{line_num}].")

            line = raw.rstrip("\r\n")

            if line.startswith("##") or (samples is not None and line.startswith("#")) or not line.strip():
                result.header_lines.append(line)
                continue

            cols = line.split("\t")

            if line.startswith("#"):
                if "\t" not in line:
                    result.header_lines.append(line)
                    continue
                format_index, samples = self._read_header(cols, source)
                if not samples and self.record_filter.group_pairs:
                    logger.error(
                        f"No columns for sample names were found on the column header line "
                        f"in [{source}]. Sample names are required by the sample groups (-s). "
                        f"Unable to finish processing file [{source}]."
                    )
                    break
                result.header_lines.append(ranked_header(line))
                continue

            if samples is None and not warned_no_header:
                logger.warning(
                    f"Column header line not found before data in [{source}]. Using default "
                    f"expected FORMAT column number [{format_index + 1}] and sample column "
                    f"start number [{format_index + 2}]."
                )
                warned_no_header = True

            stats.data_lines += 1
            try:
                index, mode = self._classify_record(cols, format_index)
                stats.global_mode = next_global_mode(stats.global_mode, mode)
                record = self._rank_record(
                    index, mode, cols, line, format_index, samples, stats.global_mode
                )
            except RecordError as e:
                stats.skipped += 1
                logger.error(f"[{source}] line [{line_num}]: {e} Skipping line.")
                continue

            if record is not None:
                passed.append(record)

        result.records = rank_records(passed)
        stats.passed = len(result.records)
        logger.info(
            f"[{source}] {stats.data_lines} data records, {stats.skipped} skipped, "
            f"{stats.passed} passed (mode: {stats.global_mode.value or 'none'})"
        )
        return result

    def _read_header(self, cols: Sequence[str], source: str) -> Tuple[int, List[str]]:
        if FORMAT_COLUMN in cols:
            format_index = list(cols).index(FORMAT_COLUMN)
        else:
            format_index = DEFAULT_FORMAT_INDEX
            logger.warning(
                f"FORMAT column header not found on column header line in [{source}]. "
                f"Using default expected FORMAT column number [{format_index + 1}] and "
                f"sample column start number [{format_index + 2}]."
            )
        samples = list(cols[format_index + 1:])

        known = set(samples)
        for pair in self.record_filter.group_pairs:
            missing = [s for s in pair.members if s not in known]
            if missing:
                logger.warning(
                    f"Sample group pair [{pair.number}] names samples not found in the "
                    f"column header of [{source}]: [{','.join(missing)}]."
                )
        return format_index, samples

    def _classify_record(self, cols: Sequence[str], format_index: int) -> Tuple[FormatKeyIndex, VariantMode]:
        if len(cols) < format_index + 2:
            raise SampleDataError("Sample data was not found.")
        format_str = cols[format_index]
        logger.debug(f"FORMAT string for data record: [{format_str}].")
        index = FormatKeyIndex.from_format(format_str)
        return index, classify_record(index)

    def _rank_record(
        self,
        index: FormatKeyIndex,
        mode: VariantMode,
        cols: Sequence[str],
        line: str,
        format_index: int,
        samples: Optional[List[str]],
        global_mode: GlobalMode,
    ) -> Optional[RankedRecord]:
        """Filter one classified data record; None when it does not pass."""
        check_required_keys(index, mode)

        data = list(cols[format_index + 1:])
        if samples is None:
            samples = [str(format_index + 2 + i) for i in range(len(data))]

        outcome = self.record_filter.evaluate(index, mode, samples, data)
        if not outcome.passed:
            return None
        return self.record_filter.to_ranked(outcome, global_mode, line)


def write_ranked(result: RankResult, handle: TextIO) -> None:
    """Write pass-through lines followed by ranked records."""
    for line in result.header_lines:
        handle.write(line + "\n")
    for record in result.records:
        handle.write(record.to_line() + "\n")
