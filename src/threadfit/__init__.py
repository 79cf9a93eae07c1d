"""
threadfit: segmentation and repair of generated text into length-capped units.
"""

__version__ = "0.3.0"

from .segment import optimize  # noqa: E402

__all__ = ["optimize", "__version__"]
