"""Utility functions and classes for fluentsql."""

from fluentsql.utils import logging, text

__all__ = ("logging", "text")
