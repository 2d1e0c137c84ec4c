"""
Test Suite for the Intelligence Analytics Engine

Includes:
- Unit tests per package (analysis, sentiment, query, entities, reports)
- Shared fixtures for end-to-end report generation
"""
