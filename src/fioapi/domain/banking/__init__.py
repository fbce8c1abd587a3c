"""Banking domain package.

This package contains the typed records produced from the bank's export
API, the report addressing modes and the download marker port.
"""
