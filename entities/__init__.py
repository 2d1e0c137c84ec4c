"""
Entities Module

Ticker co-mention extraction and relationship graphs across filings.
"""
