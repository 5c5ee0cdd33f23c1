"""Core (UI-agnostic) marketing breakdown logic.

This package contains:
- dataset loading (JSON -> frozen campaign records)
- filter normalization
- segment aggregation and rate computation
- chart geometry (bubble map, line chart) and Altair bar-chart specs
- page compute functions (JSON-serializable payloads)
"""
