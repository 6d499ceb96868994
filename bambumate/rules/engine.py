"""Translate detected defects into ranked, clamped parameter recommendations."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from bambumate.materials import MaterialType
from bambumate.models.api import Conflict, DetectedDefect, EvaluationResult, Recommendation

from .clamp import clamp_to_safe_range
from .config import Adjustment, DefectInfo, DefectRule, Operation, RulesConfig

LOGGER = logging.getLogger(__name__)

# Changes smaller than this are treated as "no change" when looking for
# opposing adjustments.
DIRECTION_EPSILON = 0.001


def _direction(recommendation: Recommendation) -> int:
    delta = recommendation.recommended_value - recommendation.current_value
    if delta > DIRECTION_EPSILON:
        return 1
    if delta < -DIRECTION_EPSILON:
        return -1
    return 0


def _raw_delta(adjustment: Adjustment, current: float, severity: float) -> float:
    # Scaling by severity keeps marginal detections from over-correcting.
    if adjustment.operation is Operation.INCREASE:
        return adjustment.amount * severity
    if adjustment.operation is Operation.DECREASE:
        return -adjustment.amount * severity
    return adjustment.amount - current


class RuleEngine:
    """Evaluate defects against a :class:`RulesConfig`.

    The engine keeps no per-call state, so one instance can serve concurrent
    callers.
    """

    def __init__(self, rules: RulesConfig) -> None:
        self._rules = rules

    @property
    def rules(self) -> RulesConfig:
        return self._rules

    # ------------------------------------------------------------------
    def evaluate(
        self,
        defects: Sequence[DetectedDefect],
        current_values: Mapping[str, float],
        material: MaterialType,
    ) -> EvaluationResult:
        """Produce recommendations sorted by priority plus any conflicts between them.

        Parameters missing from ``current_values`` are read as 0.0 and
        reported in a warning log line rather than failing the evaluation.
        """
        recommendations: List[Recommendation] = []
        missing: List[str] = []

        for defect in defects:
            for rule in self._matching_rules(defect):
                for adjustment in rule.adjustments:
                    if adjustment.parameter not in current_values and adjustment.parameter not in missing:
                        missing.append(adjustment.parameter)
                    recommendations.append(self._recommend(defect, adjustment, current_values, material))

        if missing:
            LOGGER.warning(
                "Parameters missing from current values, assuming 0.0: %s",
                ", ".join(missing),
            )

        # list.sort is stable: ties keep defect, rule, adjustment order.
        recommendations.sort(key=lambda rec: rec.priority)
        conflicts = self._detect_conflicts(recommendations)
        LOGGER.debug(
            "Evaluated %d defects into %d recommendations and %d conflicts for %s",
            len(defects),
            len(recommendations),
            len(conflicts),
            material,
        )
        return EvaluationResult(recommendations=recommendations, conflicts=conflicts)

    # ------------------------------------------------------------------
    def _matching_rules(self, defect: DetectedDefect) -> Iterable[DefectRule]:
        for rule in self._rules.rules:
            if rule.defect != defect.defect_type:
                continue
            if rule.severity_min is not None and defect.severity < rule.severity_min:
                continue
            yield rule

    def _recommend(
        self,
        defect: DetectedDefect,
        adjustment: Adjustment,
        current_values: Mapping[str, float],
        material: MaterialType,
    ) -> Recommendation:
        current = float(current_values.get(adjustment.parameter, 0.0))
        target = current + _raw_delta(adjustment, current, defect.severity)
        value, was_clamped = clamp_to_safe_range(adjustment.parameter, target, material)
        return Recommendation(
            defect=defect.defect_type,
            parameter=adjustment.parameter,
            current_value=current,
            recommended_value=value,
            priority=adjustment.priority,
            rationale=adjustment.rationale,
            was_clamped=was_clamped,
        )

    # ------------------------------------------------------------------
    def _detect_conflicts(self, recommendations: Sequence[Recommendation]) -> List[Conflict]:
        implicit = self._opposing_adjustments(recommendations)
        explicit = self._defined_conflicts(recommendations)

        # One conflict per key; a configured definition replaces the generic
        # opposite-direction entry for the same parameter.
        by_key: Dict[str, Conflict] = {conflict.parameter: conflict for conflict in implicit}
        seen_explicit: set[str] = set()
        for conflict in explicit:
            if conflict.parameter in seen_explicit:
                continue
            seen_explicit.add(conflict.parameter)
            by_key[conflict.parameter] = conflict
        return [by_key[key] for key in sorted(by_key)]

    @staticmethod
    def _opposing_adjustments(recommendations: Sequence[Recommendation]) -> List[Conflict]:
        by_param: Dict[str, List[Recommendation]] = {}
        for rec in recommendations:
            by_param.setdefault(rec.parameter, []).append(rec)

        conflicts: List[Conflict] = []
        for param, recs in by_param.items():
            if len(recs) < 2:
                continue
            directions = {_direction(rec) for rec in recs}
            if 1 in directions and -1 in directions:
                conflicts.append(
                    Conflict(
                        parameter=param,
                        conflicting_defects=sorted({rec.defect for rec in recs}),
                        description=f"Multiple defects require opposite adjustments to {param}",
                    )
                )
        return conflicts

    def _defined_conflicts(self, recommendations: Sequence[Recommendation]) -> List[Conflict]:
        conflicts: List[Conflict] = []
        for definition in self._rules.conflicts:
            defects = {rec.defect for rec in recommendations if rec.parameter in definition.parameters}
            if len(defects) > 1:
                conflicts.append(
                    Conflict(
                        parameter=", ".join(definition.parameters),
                        conflicting_defects=sorted(defects),
                        description=definition.description,
                    )
                )
        return conflicts

    # ------------------------------------------------------------------
    def get_defect_info(self, defect_type: str) -> Optional[DefectInfo]:
        return self._rules.defects.get(defect_type)

    def known_defect_types(self) -> List[str]:
        return list(self._rules.defects.keys())


__all__ = ["DIRECTION_EPSILON", "RuleEngine"]
