"""Centralized version and author metadata for the project_tracker package."""

__all__ = ["__version__", "__author__", "__license__"]

__version__ = "0.3.0"
__author__ = "Project Tracker Contributors"
__license__ = "MIT"
