"""
Prompt templates for the generative model.
"""

from prepcoach.prompts.evaluator import EvaluatorPrompts
from prepcoach.prompts.interviewer import InterviewerPrompts
from prepcoach.prompts.report import ReportPrompts

__all__ = [
    "EvaluatorPrompts",
    "InterviewerPrompts",
    "ReportPrompts",
]
