# src/env/__init__.py
"""Environment profiles and arena constants loaded from config/*.yaml."""

from .loader import load_environment
from .schema import CtfConstants, EnvProfile

__all__ = ["CtfConstants", "EnvProfile", "load_environment"]
