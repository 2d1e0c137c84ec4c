"""
Query Module

Rule-based handling of the user's question:
- Decomposition of compound questions into sub-queries
- Follow-up question suggestions
"""
