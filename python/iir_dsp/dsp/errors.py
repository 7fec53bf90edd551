# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Exceptions raised while configuring filters."""


class FilterDesignError(Exception):
    """Base exception for filter design errors."""

    pass


class ConfigurationError(FilterDesignError, ValueError):
    """Raised when a filter is configured with invalid parameters.

    This occurs when:

    - the order is outside ``[1, max_order]``
    - a frequency is not strictly between 0 and fs/2
    - band edges fall outside ``(0, fs/2)``, or the width is not positive
    - a ripple, Q factor or rolloff is outside its valid range
    - the response family or shape is not recognised
    """

    pass


class NumericNonConvergence(FilterDesignError, ArithmeticError):
    """Raised when a bounded iterative solve fails to converge.

    Used by the elliptic function evaluation, which is capped at a fixed
    number of Landen transformations.
    """

    pass


class InstabilityRisk(FilterDesignError, ValueError):
    """Raised when a designed filter has poles on or outside the unit
    circle, or non-finite coefficients.
    """

    pass
