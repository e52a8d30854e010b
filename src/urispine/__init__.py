"""
uri-spine - URI lookup and creation service for controlled vocabularies.
"""

__version__ = "0.1.0"

from urispine.core import *  # noqa
