"""
fx-vol-dashboard
================
Browser dashboard for FX option implied volatility surfaces.

Modules:
    surface          - VolatilitySurface grid model and statistics
    securities       - Bloomberg identifier builder and request batching
    mock_data        - Synthetic surface generator
    gateway          - Gateway client, health check, surface fetcher
    monitor          - Periodic connection monitor
    view_model       - Dashboard state snapshots and change intents
    visualization    - 3D surface / smile charts (plotly + matplotlib)
    dashboard        - Dash application shell
    config           - Global constants and defaults
"""

__version__ = "0.1.0"
