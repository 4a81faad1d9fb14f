"""Daily load profile and CSV exchange."""

from .load_profile import HOURS_PER_DAY, HOURS_PER_YEAR, LoadProfile
from .profile_csv import DEFAULT_LOAD_KW, export_load_csv, parse_load_csv

__all__ = [
    "HOURS_PER_DAY",
    "HOURS_PER_YEAR",
    "LoadProfile",
    "DEFAULT_LOAD_KW",
    "export_load_csv",
    "parse_load_csv",
]
