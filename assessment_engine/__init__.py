"""
Assessment Definition & Response Engine

Questionnaires as data: operators define typed fields with validation rules,
respondents submit answers, the engine scores completion and derives insights.
"""

__version__ = "1.0.0"
