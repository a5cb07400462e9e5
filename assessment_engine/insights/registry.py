"""
Insight Rule Registry

Template-specific interpretation is plugged in as (predicate, rule) pairs so
new assessment templates can register their own findings without touching
the generator. The default registry binds BMI to the health & fitness
template and blood pressure to the cardiac template.

Version: insights_v1
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from assessment_engine.schema.models import AssessmentSchema, Response
from assessment_engine.schema.templates import CARDIAC_TEMPLATE_ID, HEALTH_FITNESS_TEMPLATE_ID

from .models import Insight
from .rules import blood_pressure_insight, bmi_insight

logger = logging.getLogger(__name__)

InsightPredicate = Callable[[AssessmentSchema, Response], bool]
InsightRuleFn = Callable[[AssessmentSchema, Response], Optional[Insight]]


@dataclass(frozen=True)
class InsightRule:
    name: str
    predicate: InsightPredicate
    derive: InsightRuleFn


def schema_is(*schema_ids: str) -> InsightPredicate:
    """Predicate matching responses to any of the given schema ids."""
    wanted = frozenset(schema_ids)

    def _matches(schema: AssessmentSchema, response: Response) -> bool:
        return schema.id in wanted

    return _matches


class InsightRegistry:
    """Ordered collection of insight rules. Registration order is output order."""

    def __init__(self):
        self._rules: List[InsightRule] = []

    def register(self, name: str, predicate: InsightPredicate, derive: InsightRuleFn) -> InsightRule:
        if any(r.name == name for r in self._rules):
            raise ValueError(f"Insight rule '{name}' is already registered")
        rule = InsightRule(name=name, predicate=predicate, derive=derive)
        self._rules.append(rule)
        logger.info(f"Registered insight rule '{name}'")
        return rule

    def unregister(self, name: str) -> bool:
        before = len(self._rules)
        self._rules = [r for r in self._rules if r.name != name]
        return len(self._rules) < before

    @property
    def rules(self) -> Tuple[InsightRule, ...]:
        return tuple(self._rules)

    def evaluate(self, schema: AssessmentSchema, response: Response) -> List[Insight]:
        insights = []
        for rule in self._rules:
            if not rule.predicate(schema, response):
                continue
            insight = rule.derive(schema, response)
            if insight is None:
                continue
            if insight.source is None:
                insight = insight.model_copy(update={"source": rule.name})
            insights.append(insight)
        return insights


def default_registry() -> InsightRegistry:
    registry = InsightRegistry()
    registry.register("bmi", schema_is(HEALTH_FITNESS_TEMPLATE_ID), bmi_insight)
    registry.register("blood_pressure", schema_is(CARDIAC_TEMPLATE_ID), blood_pressure_insight)
    return registry
