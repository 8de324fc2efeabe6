"""NorthStar Pydantic schemas for stage inputs and outputs.

Wire names follow the JSON contract shared with the web client
(``incomeL``, ``okr``, ``hab``, ``dur`` ...). Python attributes are
snake_case; always dump with ``by_alias=True``.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Dict, Optional, Literal, Union
from enum import Enum


class GoalKey(str, Enum):
    """The six goal categories every timeline is scored on."""
    MONEY = "Money"
    MASTERY = "Mastery"
    HEALTH = "Health"
    IMPACT = "Impact"
    AUTONOMY = "Autonomy"
    OPTIONALITY = "Optionality"

    @property
    def axis(self) -> str:
        """Key of this goal inside a score vector."""
        return self.value.lower()


# Fixed axis order, used for every listing of axes
AXES: List[str] = [goal.axis for goal in GoalKey]


def axis_for_goal(name: str) -> Optional[str]:
    """Map a goal name ("Money", "money") to its axis key, or None if unknown."""
    key = (name or "").strip().lower()
    return key if key in AXES else None


class RiskAppetite(str, Enum):
    """Declared risk appetite."""
    LOW = "Low"
    BALANCED = "Balanced"
    HIGH = "High"


class AnalysisMode(str, Enum):
    """Quick runs 3 candidate timelines, Deep runs 5."""
    QUICK = "Quick"
    DEEP = "Deep"


class PipelineStage(str, Enum):
    """Stages in the decision pipeline."""
    TIMELINES = "timelines"
    TRADEOFFS = "tradeoffs"
    PLAN = "plan"
    TRAILER = "trailer"


class StageAction(str, Enum):
    """Action discriminator accepted by the HTTP endpoint."""
    SIMULATE_TIMELINES = "simulateTimelines"
    COMPUTE_TRADEOFFS = "computeTradeoffs"
    COMPILE_PLAN = "compilePlan"
    GENERATE_TRAILER = "generateTrailer"


class WireModel(BaseModel):
    """Base for models exchanged with the client and the model provider."""
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ============================================================================
# PROFILE / INPUT
# ============================================================================

class TravelPrefs(WireModel):
    travel: int = Field(50, ge=0, le=100)
    wfh: int = Field(50, ge=0, le=100)


class Profile(WireModel):
    """Who is deciding and what they care about."""
    name: Optional[str] = None
    age: Optional[int] = None
    city: Optional[str] = None
    experience_years: Optional[int] = None
    domains: List[str] = Field(default_factory=list, description="Free-form domain tags")
    goals_ranked: List[str] = Field(
        default_factory=list,
        description="Goal names, most important first",
    )
    constraints: List[str] = Field(default_factory=list)
    risk_appetite: Optional[str] = Field(None, description="Low, Balanced or High")
    prefs: Optional[TravelPrefs] = None

    @field_validator("goals_ranked")
    @classmethod
    def drop_duplicate_goals(cls, goals: List[str]) -> List[str]:
        seen = set()
        ranked = []
        for goal in goals:
            if goal in seen:
                continue
            seen.add(goal)
            ranked.append(goal)
        return ranked


class Sliders(WireModel):
    """Preference sliders, 0-100."""
    risk: int = Field(50, ge=0, le=100)
    black_swan: int = Field(50, ge=0, le=100, description="Volatility tolerance")
    travel: int = Field(50, ge=0, le=100)
    wfh: int = Field(50, ge=0, le=100, description="Remote-work preference")


class UIPrefs(WireModel):
    num_timelines: Literal[3, 5] = 3
    mode: AnalysisMode = AnalysisMode.QUICK


class ProjectInput(WireModel):
    """Everything the client collected before the first stage runs."""
    id: str = "project"
    profile: Profile
    decisions: List[str] = Field(default_factory=list)
    horizon_years: Literal[3, 5] = 3
    sliders: Sliders = Field(default_factory=Sliders)
    ui_prefs: UIPrefs = Field(default_factory=UIPrefs)


# ============================================================================
# TIMELINES
# ============================================================================

class ScoreVector(WireModel):
    """Normalized score per axis. All six axes are always present."""
    money: float = 0.5
    mastery: float = 0.5
    health: float = 0.5
    impact: float = 0.5
    autonomy: float = 0.5
    optionality: float = 0.5

    @field_validator(*AXES)
    @classmethod
    def clamp_unit(cls, value: float) -> float:
        return max(0.0, min(1.0, value))

    def axis_values(self):
        """(axis, value) pairs in fixed axis order."""
        return [(axis, getattr(self, axis)) for axis in AXES]


class TimelineYear(WireModel):
    y: int
    milestones: List[str] = Field(default_factory=list)
    income_l: Optional[float] = Field(None, alias="incomeL")
    save_l: Optional[float] = Field(None, alias="saveL")
    eq_l: Optional[float] = Field(None, alias="eqL")
    skills: Optional[List[str]] = None
    sleep: Optional[float] = None
    travel: Optional[float] = None
    impact_p: Optional[float] = Field(None, alias="impactP")
    flags: Optional[List[str]] = None


class Timeline(WireModel):
    id: str
    label: str
    rationale: str = ""
    scores: ScoreVector = Field(default_factory=ScoreVector)
    years: List[TimelineYear] = Field(default_factory=list)


class TimelinesResult(WireModel):
    timelines: List[Timeline]


# ============================================================================
# TRADEOFFS
# ============================================================================

class ParetoEntry(WireModel):
    """Fixed-threshold strong/weak axes of one timeline."""
    timeline_id: str
    dominant: List[str] = Field(default_factory=list)
    weak: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_axes(self) -> "ParetoEntry":
        unknown = [axis for axis in self.dominant + self.weak if axis not in AXES]
        if unknown:
            raise ValueError(f"Unknown axes: {unknown}")
        overlap = set(self.dominant) & set(self.weak)
        if overlap:
            raise ValueError(f"Axes both dominant and weak: {sorted(overlap)}")
        return self


class Recommendation(WireModel):
    chosen_timeline_id: str
    why: str = ""


class Tradeoffs(WireModel):
    pareto: List[ParetoEntry] = Field(default_factory=list)
    regret_min: str = ""
    recommendation: Recommendation


class TradeoffsResult(WireModel):
    tradeoffs: Tradeoffs


# ============================================================================
# PLAN
# ============================================================================

class Objective(WireModel):
    objective: str = Field(..., alias="o")
    key_results: List[str] = Field(default_factory=list, alias="kr")


class PlanWeek(WireModel):
    week: int = Field(..., alias="w")
    tasks: List[str] = Field(default_factory=list)
    habits: List[str] = Field(default_factory=list, alias="hab")


class TimeBlock(WireModel):
    title: str = Field(..., alias="t")
    duration_minutes: int = Field(..., alias="dur")
    days: List[str] = Field(default_factory=list)
    time: str = Field(..., description="Start time, HH:MM")


class Resource(WireModel):
    title: str
    type: Literal["doc", "link"] = "doc"
    url: Optional[str] = ""


class Plan(WireModel):
    """A 90-day plan. Returned flat, not wrapped."""
    okr: List[Objective]
    weeks: List[PlanWeek]
    blocks: List[TimeBlock]
    resources: Optional[List[Resource]] = None


# ============================================================================
# TRAILER
# ============================================================================

class TrailerScene(WireModel):
    t: Union[int, float] = Field(..., description="Offset in seconds")
    title: str
    subtitle: Optional[str] = None
    caption: Optional[str] = None


class TrailerResult(WireModel):
    trailer: List[TrailerScene]

    @field_validator("trailer")
    @classmethod
    def order_by_offset(cls, scenes: List[TrailerScene]) -> List[TrailerScene]:
        return sorted(scenes, key=lambda scene: scene.t)


# ============================================================================
# STAGE REQUESTS (action payloads without the discriminator)
# ============================================================================

class TimelinesRequest(WireModel):
    input: ProjectInput


class TradeoffsRequest(WireModel):
    timelines: List[Timeline] = Field(default_factory=list)
    goals_ranked: List[str] = Field(default_factory=list)
    risk_appetite: Optional[str] = None


class PlanRequest(WireModel):
    input: ProjectInput
    chosen_timeline: Timeline = Field(..., alias="chosenTimeline")


class TrailerRequest(WireModel):
    input: ProjectInput
    chosen_timeline: Timeline = Field(..., alias="chosenTimeline")
    plan: Optional[Plan] = None


# ============================================================================
# AGGREGATE RESULT
# ============================================================================

class ProjectResult(WireModel):
    """One full run of all four stages."""
    project_id: str
    timelines: List[Timeline] = Field(default_factory=list)
    tradeoffs: Optional[Tradeoffs] = None
    plan: Optional[Plan] = None
    trailer: List[TrailerScene] = Field(default_factory=list)
    sources: Dict[str, str] = Field(
        default_factory=dict,
        description="Stage name -> 'model' or 'fallback'",
    )
