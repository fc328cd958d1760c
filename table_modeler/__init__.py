"""
Table Modeler

Describes every column of a platform table (type, constraints, inheritance
origin, reference targets and choice values) using only read access to the
platform's schema metadata.
"""

__version__ = "1.0.0"
__author__ = "Platform Tooling Team"
