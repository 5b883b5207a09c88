"""
Utility helpers for osc_sdk_python.

This module provides:
    - config: NetworkConfig, the ports/host/interval settings
"""

from .config import NetworkConfig

__all__ = ["NetworkConfig"]
