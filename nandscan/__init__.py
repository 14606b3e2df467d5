"""nandscan - count the NAND gates in Digital Logic Sim projects."""

__version__ = "0.1.0"
