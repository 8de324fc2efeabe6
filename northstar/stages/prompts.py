"""Prompt builders for the model-backed stages.

Each builder returns a (system, user) instruction pair. All stages ask for
strict JSON so the response can go straight through the validators.
"""
import json
from typing import Dict, Tuple

from northstar.stages.schemas import (
    AXES,
    AnalysisMode,
    PipelineStage,
    PlanRequest,
    TimelinesRequest,
    TradeoffsRequest,
    TrailerRequest,
)


SCORES_FIELDS = ", ".join(AXES)

# max output tokens and temperature per stage
STAGE_GENERATION = {
    PipelineStage.TIMELINES: {"max_tokens": 1400, "temperature": 0.4},
    PipelineStage.TRADEOFFS: {"max_tokens": 800, "temperature": 0.3},
    PipelineStage.PLAN: {"max_tokens": 1500, "temperature": 0.3},
    PipelineStage.TRAILER: {"max_tokens": 600, "temperature": 0.6},
}

TIMELINE_SCHEMA = """
Return JSON:
{
  "timelines":[
    {
      "id":"string",
      "label":"string",
      "rationale":"string",
      "scores":{ "money":0..1, "mastery":0..1, "health":0..1, "impact":0..1, "autonomy":0..1, "optionality":0..1 },
      "years":[
        {
          "y": number,
          "milestones": [ "string", ... ],
          "incomeL": number?, "saveL": number?, "eqL": number?,
          "skills": [ "string", ... ]?,
          "sleep": 0..1?, "travel": 0..1?, "impactP": number?,
          "flags": [ "string", ... ]?
        }
      ]
    }
  ]
}
"""

TRADEOFFS_SCHEMA = """
Return JSON:
{
  "tradeoffs":{
    "pareto":[{"timeline_id":"...", "dominant":["..."], "weak":["..."]}],
    "regret_min":"string",
    "recommendation":{"chosen_timeline_id":"...", "why":"string"}
  }
}
"""

PLAN_SCHEMA = """{
  "okr": [{"o":"string","kr":["string","string","string"]}],
  "weeks": [{"w":number,"tasks":["string","string","string"],"hab":["string","string"]}],
  "blocks": [{"t":"string","dur":number,"days":["Day","Day"],"time":"HH:MM"}],
  "resources": [{"title":"string","type":"doc","url":""}]
}"""

TRAILER_SCHEMA = """
Return JSON:
{ "trailer":[ { "t":0, "title":"...", "subtitle":"...", "caption":"..." }, ... ] }
"""

SYSTEM_PROMPTS: Dict[PipelineStage, str] = {
    PipelineStage.TIMELINES: """You are NorthStar. You turn decisions into clear multi-year timelines.
Always return VALID JSON only. Do not include markdown fences. Keep outputs concise and realistic.""",

    PipelineStage.TRADEOFFS: """You analyze candidate timelines and compute Pareto fronts and regret narratives.
Return JSON only.""",

    PipelineStage.PLAN: f"""You are NorthStar, an expert career strategist and life planner. You create highly personalized 90-day action plans that transform career aspirations into concrete, achievable steps.

Create a plan that is SPECIFICALLY tailored to this person's profile, goals, and chosen timeline. DO NOT use generic content.

Your plan must be:
- Personalized to their background, goals, and industry
- Aligned with their chosen timeline and milestones
- Practical and immediately actionable

Return ONLY valid JSON that matches this exact schema:
{PLAN_SCHEMA}""",

    PipelineStage.TRAILER: """You are a trailer editor. Create a 30-45s scene list for a text-only cinematic trailer.
Return JSON only.""",
}


def _dumps(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def timelines_prompt(request: TimelinesRequest) -> Tuple[str, str]:
    project_input = request.input
    count = 5 if project_input.ui_prefs.mode == AnalysisMode.DEEP else 3

    user = f"""
ProjectInput:
{_dumps(project_input.to_wire())}

Task:
Generate {count} distinct {project_input.horizon_years}-year timelines for the provided decisions.
Each timeline must reflect trade-offs across {SCORES_FIELDS}. Use the user's goals order as weights.
Avoid prose outside JSON. {TIMELINE_SCHEMA}
"""
    return SYSTEM_PROMPTS[PipelineStage.TIMELINES], user


def tradeoffs_prompt(request: TradeoffsRequest) -> Tuple[str, str]:
    timelines = [timeline.to_wire() for timeline in request.timelines]

    user = f"""
Timelines: {_dumps(timelines)}
Goals order: {_dumps(request.goals_ranked)}
Risk appetite: {request.risk_appetite or "Balanced"}

Task:
1) Compute "pareto": for each strong timeline, list dominant vs weak axes among {SCORES_FIELDS}.
2) Compose "regret_min": a concise 'Future Me @ 70' narrative.
3) Produce "recommendation": chosen_timeline_id + why.
{TRADEOFFS_SCHEMA}"""
    return SYSTEM_PROMPTS[PipelineStage.TRADEOFFS], user


def plan_prompt(request: PlanRequest) -> Tuple[str, str]:
    profile = request.input.profile
    timeline = request.chosen_timeline
    goals = profile.goals_ranked
    domains = ", ".join(profile.domains) or "General"
    milestones = [year.milestones for year in timeline.years]
    detail = "detailed" if request.input.ui_prefs.mode == AnalysisMode.DEEP else "streamlined"

    user = f"""
USER PROFILE:
Name: {profile.name or "Professional"}
Age: {profile.age or "N/A"}
Experience: {profile.experience_years or "N/A"} years
Domains: {domains}
Top Goals (in order of priority): {", ".join(goals) or "Growth"}
Risk Appetite: {profile.risk_appetite or "Balanced"}
Constraints: {", ".join(profile.constraints) or "None specified"}

CHOSEN TIMELINE: "{timeline.label}"
Timeline Rationale: {timeline.rationale or "Focus on balanced growth"}
Key Milestones: {_dumps(milestones)}

PROJECT HORIZON: {request.input.horizon_years} years
ANALYSIS MODE: {request.input.ui_prefs.mode.value} (user wants a {detail} approach)

CREATE A PERSONALIZED 90-DAY ACTION PLAN:

1) OKRs (2-3 Objectives): tailored to their goals ({", ".join(goals[:2]) or "Growth"}) and chosen path "{timeline.label}". Include 3-4 measurable Key Results per objective.

2) Weekly Breakdown (13 weeks): specific, actionable tasks that build toward the OKRs. Reference their domain expertise ({domains}). Include 2-3 daily habits that support their top goals.

3) Time Blocks (4-5 blocks): recurring calendar blocks that match their work style and constraints.

4) Resources (4-6 items): tools, frameworks, or learning materials relevant to their domains and chosen timeline.

Return ONLY the JSON object - no other text."""
    return SYSTEM_PROMPTS[PipelineStage.PLAN], user


def trailer_prompt(request: TrailerRequest) -> Tuple[str, str]:
    okr = [objective.to_wire() for objective in request.plan.okr] if request.plan else []

    user = f"""
Make it inspiring but grounded in the chosen timeline and plan highlights.
{TRAILER_SCHEMA}
Chosen timeline: {_dumps(request.chosen_timeline.to_wire())}
Plan highlights: {_dumps(okr)}
"""
    return SYSTEM_PROMPTS[PipelineStage.TRAILER], user


PROMPT_BUILDERS = {
    PipelineStage.TIMELINES: timelines_prompt,
    PipelineStage.TRADEOFFS: tradeoffs_prompt,
    PipelineStage.PLAN: plan_prompt,
    PipelineStage.TRAILER: trailer_prompt,
}
