"""
PrepCoach - Mock Interview Practice Service

Runs mock interview sessions, evaluates text, audio and video answers
with a fallback cascade, and aggregates a performance report.
"""

__version__ = "0.1.0"
__author__ = "PrepCoach Team"
