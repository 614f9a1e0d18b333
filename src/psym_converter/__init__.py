"""
PSYM Converter Package
"""
__version__ = "0.1.0"
