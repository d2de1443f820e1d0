"""
Lumen - Illumination control and telemetry synchronization daemon
"""
__version__ = "0.1.0"
