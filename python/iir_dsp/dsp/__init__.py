# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""IIR filter design and the DSP blocks that run the designed filters."""
