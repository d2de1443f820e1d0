"""
Lumen Decision Logic

- Auto light policy: ambient intensity to AUTO light decisions
"""

from lumen.logic.auto_light import AutoLightPolicy

__all__ = [
    "AutoLightPolicy",
]
