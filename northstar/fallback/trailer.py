"""Trailer Fallback - five fixed scenes."""

from typing import List

from northstar.stages.schemas import TrailerScene


# (offset seconds, title, subtitle, caption)
FALLBACK_SCENES = [
    (0, "Day 1", "Choose Your NorthStar", "Clarity, courage, first step."),
    (8, "Momentum", "Weeks 1–4", "Habits compound into outcomes."),
    (18, "Breakthrough", "Weeks 5–8", "Lead a visible win with your team."),
    (28, "Impact", "Weeks 9–12", "Ship, learn, and scale what works."),
    (38, "Next Horizon", "Quarter 2", "A clear path with options open."),
]


def build_fallback_trailer() -> List[TrailerScene]:
    return [
        TrailerScene(t=offset, title=title, subtitle=subtitle, caption=caption)
        for offset, title, subtitle, caption in FALLBACK_SCENES
    ]
