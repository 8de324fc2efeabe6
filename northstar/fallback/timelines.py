"""
Timeline Fallback - deterministic candidate timelines.

Every candidate starts from 0.7 on all six axes and adds a fixed bias.
Only the milestone text is personalized (with the user's first domain);
scores depend on the candidate, not on the profile.
"""

from typing import Dict, List

from northstar.stages.schemas import (
    AXES,
    AnalysisMode,
    ProjectInput,
    ScoreVector,
    Timeline,
    TimelineYear,
)


BASE_SCORE = 0.7
SCORE_FLOOR = 0.4
SCORE_CEILING = 0.95

DEFAULT_DOMAIN = "AI/ML"
FALLBACK_SKILLS = ["Leadership", "Execution", "Strategic Thinking"]

# (id, label, rationale, bias)
QUICK_CANDIDATES = [
    (
        "t1",
        "Hybrid Growth Path",
        "Balance stability and growth opportunities while building global network.",
        {"impact": 0.1, "mastery": 0.05, "autonomy": 0.05},
    ),
    (
        "t2",
        "Local Leadership Track",
        "Focus on deep local impact and leadership development.",
        {"money": 0.1, "autonomy": 0.05},
    ),
    (
        "t3",
        "High-Growth Trajectory",
        "Maximize growth potential with calculated risks and global exposure.",
        {"money": 0.15, "optionality": 0.1, "impact": 0.05},
    ),
]

DEEP_CANDIDATES = QUICK_CANDIDATES + [
    (
        "t4",
        "Innovation Pioneer Path",
        "Lead cutting-edge innovation with high risk, high reward opportunities.",
        {"mastery": 0.2, "optionality": 0.15, "impact": 0.1},
    ),
    (
        "t5",
        "Sustainable Excellence Track",
        "Build lasting value with emphasis on health, relationships, and long-term impact.",
        {"health": 0.15, "impact": 0.1, "autonomy": 0.1},
    ),
]


def biased_scores(bias: Dict[str, float]) -> ScoreVector:
    """Base score plus bias per axis, clamped to [0.4, 0.95]."""
    values = {}
    for axis in AXES:
        value = BASE_SCORE + bias.get(axis, 0.0)
        values[axis] = round(max(SCORE_FLOOR, min(SCORE_CEILING, value)), 4)
    return ScoreVector(**values)


def build_years(horizon_years: int, primary_domain: str) -> List[TimelineYear]:
    """Generic per-year milestones for the decision horizon."""
    years = []
    for year in range(1, horizon_years + 1):
        years.append(TimelineYear(
            y=year,
            milestones=[
                f"Year {year}: Ship key project in {primary_domain}",
                f"Year {year}: Expand network and gain visibility",
                f"Year {year}: Build expertise and influence",
            ],
            skills=list(FALLBACK_SKILLS),
        ))
    return years


def build_fallback_timelines(project_input: ProjectInput) -> List[Timeline]:
    """
    Generate candidate timelines without a model.

    Quick mode yields t1-t3, Deep mode adds t4 and t5.
    """
    domains = project_input.profile.domains
    primary_domain = domains[0] if domains else DEFAULT_DOMAIN

    if project_input.ui_prefs.mode == AnalysisMode.DEEP:
        candidates = DEEP_CANDIDATES
    else:
        candidates = QUICK_CANDIDATES

    return [
        Timeline(
            id=timeline_id,
            label=label,
            rationale=rationale,
            scores=biased_scores(bias),
            years=build_years(project_input.horizon_years, primary_domain),
        )
        for timeline_id, label, rationale, bias in candidates
    ]
