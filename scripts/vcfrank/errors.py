"""
Exception hierarchy for vcfrank.

ConfigError is fatal and raised before any file is read. RecordError (and its
subclasses) means a single data line is skipped; the orchestrator logs it and
carries on with the next line.
"""


class VcfRankError(Exception):
    """Base class for all vcfrank errors."""


class ConfigError(VcfRankError):
    """Invalid thresholds, sample groups or configuration file."""


class RecordError(VcfRankError):
    """A data record that cannot be filtered and must be skipped."""


class ClassificationError(RecordError):
    """FORMAT field carries none of the known evidence keys."""


class MissingKeyError(RecordError):
    """An evidence key required by the record's variant mode is absent."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(
            f"The evidence key [{key}] could not be found in the FORMAT string. {reason}"
        )


class SampleDataError(RecordError):
    """Sample columns are missing or carry non-numeric evidence."""
