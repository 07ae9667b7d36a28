"""
Guest Feedback - multi-tenant hotel review collection
"""

__version__ = "1.0.0"
