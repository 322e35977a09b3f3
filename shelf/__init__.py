"""shelf - self-extracting shell script builder.

Packages a set of files into a single shell script that unpacks itself into a
temporary directory, runs an install script and cleans up after itself.
"""

__version__ = "0.1.0"
__author__ = "shelf Contributors"

from shelf.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
