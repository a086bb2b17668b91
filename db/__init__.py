"""
__init__.py — Package Initialization File
-----------------------------------------

This file marks the directory as a Python package.

No initialization logic is required at this level.
"""
