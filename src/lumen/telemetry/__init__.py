"""
Lumen Telemetry - Snapshot formatting, render sinks and the polling loop
"""
