"""
Registry extractor.

Features:
- Offline hive parsing with regipy (no Windows required)
- SOFTWARE: product, version, owner, organization, install date
- SYSTEM: computer name and USBSTOR device history
"""

from .extractor import RegistryExtractor

__all__ = ["RegistryExtractor"]
