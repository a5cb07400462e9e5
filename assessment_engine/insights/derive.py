"""
Insight Generator

Turns a completed response into an ordered list of findings:
1. Completion quality (whenever the response has a score)
2. Every registry rule whose predicate matches, in registration order

Pure function of its inputs. Results are recomputed on every view.

Version: insights_v1
"""

from typing import List, Optional

from assessment_engine.schema.models import AssessmentSchema, Response

from .models import Insight
from .registry import InsightRegistry, default_registry
from .rules import completion_insight

_default: Optional[InsightRegistry] = None


def get_default_registry() -> InsightRegistry:
    """Process-wide registry used when callers do not pass their own."""
    global _default
    if _default is None:
        _default = default_registry()
    return _default


def derive_insights(
    schema: AssessmentSchema,
    response: Response,
    registry: Optional[InsightRegistry] = None,
) -> List[Insight]:
    insights: List[Insight] = []

    completion = completion_insight(response.score)
    if completion is not None:
        insights.append(completion)

    registry = registry if registry is not None else get_default_registry()
    insights.extend(registry.evaluate(schema, response))
    return insights
