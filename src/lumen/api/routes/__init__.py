"""
API Routes Package
"""
from lumen.api.routes import features, light, telemetry

__all__ = [
    "features",
    "light",
    "telemetry",
]
