"""
DCM package
===========

Country Disaster & Carbon Metrics: the aggregation engine behind a climate
dashboard (disaster frequency vs. forest carbon, per country).

- The CLI entry point is in `dcm/cli.py`.
- The core engine (reload, view queries, export) is in `dcm/engine.py`.
- Table loading is in `dcm/loader.py`; grouping/extraction in `dcm/indices.py`.
"""

__version__ = '0.1.0'
