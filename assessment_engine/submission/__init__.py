"""
Submission Module

One-shot submission of a respondent's answers and assembly of the results view.
"""

from .pipeline import AnswerDisplay, AssessmentResults, build_results, submit_assessment

__all__ = [
    "AnswerDisplay",
    "AssessmentResults",
    "build_results",
    "submit_assessment",
]
