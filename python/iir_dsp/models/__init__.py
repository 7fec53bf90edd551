# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The pydantic models used to configure filters."""

from .fields import BIQUAD_TYPES
from .filters import FILTER_TYPES, FilterConfig, FilterDesign, make_biquad, make_filter
