# -*- coding: utf-8 -*-
import logging
from importlib.metadata import PackageNotFoundError, version as _version

try:
    version = _version("pandas_ta_dual")
except PackageNotFoundError:
    version = "0.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from pandas_ta_dual.maps import Category, Imports
from pandas_ta_dual.kernels import *
from pandas_ta_dual.kernels import __all__ as kernels_all

# Enable "dual" DataFrame Extension
from pandas_ta_dual.core import DualIndicators

__all__ = [
    "Category",
    "Imports",
    "version",
    "DualIndicators",
]

__all__ += kernels_all
