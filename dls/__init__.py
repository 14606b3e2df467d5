"""
Digital Logic Sim project analysis.

Reads the projects saved by Digital Logic Sim and works out how many
two-input NAND gates every custom chip expands to.
"""

__version__ = "0.1.0"
