# scratch_fetch/__init__.py
"""
scratch-fetch package initializer.
Defines package version. Entry points: scratch_fetch.main:main (the fetch
program) and scratch_fetch.cli:cli (the build tool).
"""
__version__ = "0.1.0"
