"""
Feline neurological diagnosis expert system.
"""
from felineneuro.config import VERSION as __version__

__all__ = ["__version__"]
