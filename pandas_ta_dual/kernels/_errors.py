# -*- coding: utf-8 -*-
"""pandas-ta dual -- error taxonomy shared by batch and incremental kernels.

Every kernel validates eagerly and raises one of these before touching an
output buffer.  They all derive from ``ValueError`` so callers that only
know the pandas convention still catch them.
"""
from __future__ import annotations


class KernelError(ValueError):
    """Base class for every failure raised by an indicator kernel."""


class InvalidParameter(KernelError):
    """Out-of-domain period, smoothing factor or acceleration bound."""


class LengthMismatch(KernelError):
    """Input and output buffers (or two inputs) disagree in length."""


class InsufficientData(KernelError):
    """Series is not longer than the indicator's lookback."""


class NaNDetected(KernelError):
    """Strict mode found a NaN in an input sample."""


class ConversionError(KernelError):
    """A value could not be represented in the working precision."""


class InvalidData(KernelError):
    """Input series is empty or not a 1-D numeric sequence."""


__all__ = [
    "KernelError",
    "InvalidParameter",
    "LengthMismatch",
    "InsufficientData",
    "NaNDetected",
    "ConversionError",
    "InvalidData",
]
