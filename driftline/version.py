"""
driftline version constants.

This module defines the library version and the schema version of the
JSON report emitted by the CLI, so stored reports can be matched to the
code that produced them.
"""

# Library version (matches pyproject.toml)
DRIFTLINE_VERSION = "0.1.0"

# Schema version for CLI JSON reports
# Increment when the report format changes in a breaking way
REPORT_SCHEMA_VERSION = "diff_report_v1"
