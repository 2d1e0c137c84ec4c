"""
Intelligence Analytics Module

Deterministic analytics over already-fetched financial data:
- Stats primitives, anomaly and temporal pattern detection
- Peer comparison and causal candidate generation
- Confidence scoring and missing-data detection
- Intelligence report assembly
"""

__version__ = "0.1.0"
