from __future__ import annotations

from .loader import DEFAULT_CONFIG_NAME, MODES, WHITESPACE_POLICIES, Settings, load_settings

__all__ = ["DEFAULT_CONFIG_NAME", "MODES", "WHITESPACE_POLICIES", "Settings", "load_settings"]
