"""
Civic Triage - triage pipeline for citizen-submitted civic reports.
"""

__version__ = "0.1.0"
