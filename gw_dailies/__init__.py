"""
Guild Wars dailies - wiki scraper and Discord poster.

Architecture:
- core/: Stable foundation (models, schedule keys, HTTP client, normalizers)
- parsers/: Table extraction for the daily and weekly activity pages
- plugins/: Delivery collaborators (Discord)
- config/: YAML-driven settings and credential loading
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
