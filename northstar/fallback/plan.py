"""Plan Fallback - a fixed 90-day template plan.

Varies only by week number; the chosen timeline and profile are not used.
"""

from northstar.stages.schemas import Objective, Plan, PlanWeek, Resource, TimeBlock


PLAN_WEEKS = 13

FALLBACK_OBJECTIVES = [
    (
        "Build market presence and credibility",
        [
            "Complete 50 customer interviews",
            "Launch MVP with 3 core features",
            "Achieve 20% user retention rate",
            "Build network of 100+ industry contacts",
        ],
    ),
    (
        "Develop core competencies",
        [
            "Master 2 new technical skills",
            "Lead 3 successful project deliveries",
            "Mentor 2 junior team members",
            "Complete advanced certification",
        ],
    ),
]

FALLBACK_HABITS = ["Daily user feedback review", "Evening skill practice session"]

# (title, minutes, days, start)
FALLBACK_BLOCKS = [
    ("Customer Research", 120, ["Mon", "Wed", "Fri"], "09:00"),
    ("Product Development", 180, ["Tue", "Thu"], "10:00"),
    ("Networking & Learning", 90, ["Sat"], "14:00"),
]

FALLBACK_RESOURCES = [
    ("Customer Interview Template", "doc"),
    ("Product Development Framework", "link"),
]


def build_week(week: int) -> PlanWeek:
    return PlanWeek(
        week=week,
        tasks=[
            f"Week {week}: Conduct 4 customer interviews",
            f"Week {week}: Iterate on core features",
            f"Week {week}: Network with industry peers",
        ],
        habits=list(FALLBACK_HABITS),
    )


def build_fallback_plan() -> Plan:
    """Compile the template plan."""
    return Plan(
        okr=[
            Objective(objective=objective, key_results=list(key_results))
            for objective, key_results in FALLBACK_OBJECTIVES
        ],
        weeks=[build_week(week) for week in range(1, PLAN_WEEKS + 1)],
        blocks=[
            TimeBlock(title=title, duration_minutes=minutes, days=list(days), time=start)
            for title, minutes, days, start in FALLBACK_BLOCKS
        ],
        resources=[
            Resource(title=title, type=kind, url="")
            for title, kind in FALLBACK_RESOURCES
        ],
    )
