"""
gedcom-io: GEDCOM charset detection, structural parsing and faithful re-writing.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
