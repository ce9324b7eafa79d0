"""
Session lifecycle and audit logging for the outreach campaign dashboard.
"""

__version__ = "0.1.0"
