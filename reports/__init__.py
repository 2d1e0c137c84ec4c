"""
Reports Module

Text rendering of intelligence reports for the response layer.
"""
