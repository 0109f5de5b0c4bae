"""
Pytest configuration and fixtures for vcfrank tests.
"""

import sys
import tempfile
from pathlib import Path

import pytest

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))


# ============================================================================
# Path Fixtures
# ============================================================================

@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# VCF Fixtures
# ============================================================================

@pytest.fixture
def vcf_columns():
    """Fixed VCF columns preceding FORMAT."""
    return ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]


@pytest.fixture
def make_header(vcf_columns):
    """Factory fixture for a column header line with the given samples."""
    def _make_header(*samples):
        return "\t".join(vcf_columns + ["FORMAT"] + list(samples))
    return _make_header


@pytest.fixture
def make_row():
    """Factory fixture for a data row with the given FORMAT and sample fields."""
    def _make_row(format_field, *sample_fields, pos=100, chrom="chr1"):
        fixed = [chrom, str(pos), ".", "A", "T", "50", "PASS", "."]
        return "\t".join(fixed + [format_field] + list(sample_fields))
    return _make_row


@pytest.fixture
def snp_vcf_content(make_header, make_row):
    """Small freeBayes-style VCF with three samples."""
    lines = [
        "##fileformat=VCFv4.2",
        "##source=freeBayes",
        make_header("S1", "S2", "S3"),
        make_row("GT:DP:AO", "0/1:10:8", "0/1:10:1", ".", pos=100),
        make_row("GT:DP:AO", "0/1:10:5", "0/0:10:0", "0/0:10:0", pos=200),
        make_row("GT:DP:AO", "1/1:10:9", "1/1:10:9", "1/1:10:9", pos=300),
        make_row("GT:DP:AO", "0/0:10:0", "0/0:10:0", "0/0:10:0", pos=400),
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def sv_vcf_content(make_header, make_row):
    """Small Lumpy-style VCF with three samples."""
    lines = [
        "##fileformat=VCFv4.2",
        "##source=LUMPY",
        make_header("S1", "S2", "S3"),
        make_row("GT:SU:PE:SR", "./.:6:3:3", "./.:0:0:0", "./.:0:0:0", pos=1000),
        make_row("GT:SU:PE:SR", "./.:9:4:5", "./.:8:4:4", "./.:0:0:0", pos=2000),
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_vcf(temp_dir):
    """Factory fixture to write VCF content to a temporary file."""
    def _write_vcf(content, name="test.vcf"):
        path = temp_dir / name
        path.write_text(content)
        return path
    return _write_vcf


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config():
    """Provide a sample configuration dictionary."""
    return {
        "input": {
            "vcf_files": [],
            "outfile_suffix": ".ranked.vcf",
        },
        "filters": {
            "min_support_ratio": 0.5,
            "min_read_depth": 2,
        },
        "groups": {
            "sample_groups": [["S1", "S2"], ["S3"]],
            "group_diff_mins": [2, 1],
        },
    }
