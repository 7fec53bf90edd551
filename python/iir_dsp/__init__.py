# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
The IIR filter design Python library.

For designing cascaded biquad IIR filters from analog prototypes or
cookbook formulae, and running them sample by sample on a host PC.
"""

from importlib import metadata as _metadata

__version__ = _metadata.version("iir_dsp")
