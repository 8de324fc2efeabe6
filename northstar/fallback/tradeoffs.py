"""
Tradeoff Fallback - deterministic timeline comparison.

Implements the scoring used when no model output is available:
- Weights: goal at rank i (0-indexed) of n ranked goals gets (n - i) / n
- Composite score = sum(axis_value x axis_weight) over weighted axes
- Risk nudge: "high" appetite adds 0.05 x optionality, "low" adds 0.05 x health
- Recommendation = highest adjusted score, first timeline wins ties
- Dominance: axis >= 0.8 is dominant, axis <= 0.6 is weak, per timeline

Dominance is a fixed-threshold label on each timeline on its own, not a
Pareto frontier across candidates.
"""

from typing import Dict, List, Optional, Sequence

from northstar.stages.schemas import (
    ParetoEntry,
    Recommendation,
    ScoreVector,
    Timeline,
    Tradeoffs,
    axis_for_goal,
)


DOMINANT_THRESHOLD = 0.8
WEAK_THRESHOLD = 0.6
RISK_NUDGE = 0.05

DEFAULT_TIMELINE_ID = "t1"

REGRET_NARRATIVE = (
    "Future Me @ 70: Choosing based on present goals to minimize future "
    "regret while keeping options open."
)
RECOMMENDATION_WHY = "Best weighted alignment with goals and risk preference."


def derive_weights(goals_ranked: Sequence[str]) -> Dict[str, float]:
    """
    Turn a ranked goal list into per-axis weights.

    Unknown goal names still count toward n but carry no axis. If a goal
    appears twice the higher-ranked weight is kept.

    Args:
        goals_ranked: Goal names, most important first

    Returns:
        Dict axis -> weight for every ranked known axis
    """
    n = len(goals_ranked)
    weights: Dict[str, float] = {}

    for rank, goal in enumerate(goals_ranked):
        axis = axis_for_goal(goal)
        if axis is None or axis in weights:
            continue
        weights[axis] = (n - rank) / n

    return weights


def composite_score(scores: ScoreVector, weights: Dict[str, float]) -> float:
    """Goal-weighted sum of a timeline's axis values."""
    return sum(getattr(scores, axis) * weight for axis, weight in weights.items())


def risk_adjustment(scores: ScoreVector, risk_appetite: Optional[str]) -> float:
    """Small nudge toward optionality (high risk) or health (low risk)."""
    risk = (risk_appetite or "Balanced").lower()
    adjustment = 0.0

    if "high" in risk:
        adjustment += scores.optionality * RISK_NUDGE
    if "low" in risk:
        adjustment += scores.health * RISK_NUDGE

    return adjustment


def adjusted_score(
    timeline: Timeline,
    weights: Dict[str, float],
    risk_appetite: Optional[str],
) -> float:
    return composite_score(timeline.scores, weights) + risk_adjustment(
        timeline.scores, risk_appetite
    )


def recommend_timeline(
    timelines: Sequence[Timeline],
    weights: Dict[str, float],
    risk_appetite: Optional[str],
) -> Optional[Timeline]:
    """Timeline with the highest adjusted score; earliest wins on a tie."""
    best: Optional[Timeline] = None
    best_score = 0.0

    for timeline in timelines:
        score = adjusted_score(timeline, weights, risk_appetite)
        if best is None or score > best_score:
            best = timeline
            best_score = score

    return best


def classify_dominance(timeline: Timeline) -> ParetoEntry:
    """Label the timeline's strong and weak axes by fixed thresholds."""
    dominant: List[str] = []
    weak: List[str] = []

    for axis, value in timeline.scores.axis_values():
        if value >= DOMINANT_THRESHOLD:
            dominant.append(axis)
        elif value <= WEAK_THRESHOLD:
            weak.append(axis)

    return ParetoEntry(timeline_id=timeline.id, dominant=dominant, weak=weak)


def build_fallback_tradeoffs(
    timelines: Sequence[Timeline],
    goals_ranked: Sequence[str],
    risk_appetite: Optional[str] = None,
) -> Tradeoffs:
    """
    Compare timelines without a model.

    Args:
        timelines: Candidates, in the order they were generated
        goals_ranked: Goal names, most important first
        risk_appetite: "Low", "Balanced", "High" or None

    Returns:
        Tradeoffs with per-timeline dominance and a recommendation
    """
    weights = derive_weights(goals_ranked)
    chosen = recommend_timeline(timelines, weights, risk_appetite)

    return Tradeoffs(
        pareto=[classify_dominance(timeline) for timeline in timelines],
        regret_min=REGRET_NARRATIVE,
        recommendation=Recommendation(
            chosen_timeline_id=chosen.id if chosen else DEFAULT_TIMELINE_ID,
            why=RECOMMENDATION_WHY,
        ),
    )
