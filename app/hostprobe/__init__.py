"""hostprobe - host introspection commands for desktop frontends.

Reports mounted volume capacity, aggregates directory sizes and performs
single-shot TCP request/response exchanges.
"""

__version__ = "0.1.0"
