"""
Sentiment Module

Lexicon-based sentiment and tone scoring for filings and transcripts,
plus trend comparison across documents.
"""
