"""Command-line helpers for New Relic: CLI configuration, agent value obfuscation, NR1 decoding, tag parsing and diagnostics."""

__version__ = "0.1.0"