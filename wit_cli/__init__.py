"""
Wit CLI - Three-layer client for the Wit.ai entities API.

Layers:
- core: Raw types, transport and HTTP client
- sdk: High-level WitClient with nice ergonomics
- cli: Command-line interface
"""

from wit_cli.sdk import WitClient

__version__ = "0.1.0"
__all__ = ["WitClient"]
