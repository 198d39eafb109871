"""Day records, time ranges and analytics for the WorkFlow tracker."""

__version__ = "0.3.0"
