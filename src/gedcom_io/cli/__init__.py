"""
Command-line interface for gedcom_io (``gedcom-io detect|rewrite|stats``).
"""

from gedcom_io.cli.app import app, main

__all__ = ["app", "main"]
