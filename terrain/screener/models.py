"""Pydantic models for the Opportunity Screener."""

import re
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Phase(str, Enum):
    """Clinical/regulatory development stage, earliest first."""
    PRECLINICAL = "Preclinical"
    PHASE_1 = "Phase 1"
    PHASE_1_2 = "Phase 1/2"
    PHASE_2 = "Phase 2"
    PHASE_2_3 = "Phase 2/3"
    PHASE_3 = "Phase 3"
    APPROVED = "Approved"

    @property
    def rank(self) -> int:
        """Position in the development order (Preclinical = 0)."""
        return PHASE_ORDER.index(self)

    @classmethod
    def parse(cls, value) -> "Phase":
        """
        Parse a phase label leniently.

        Accepts the canonical labels plus case/spacing variants such as
        "phase 3", "PHASE3", "Phase II" or "marketed".

        Raises:
            ValueError: If the label is not a known phase
        """
        if isinstance(value, cls):
            return value
        key = re.sub(r"[\s_]+", "", str(value).strip().lower())
        phase = _PHASE_ALIASES.get(key)
        if phase is None:
            raise ValueError(f"Unknown phase: {value!r}")
        return phase


PHASE_ORDER: List[Phase] = list(Phase)

_PHASE_ALIASES: Dict[str, Phase] = {
    "preclinical": Phase.PRECLINICAL,
    "pre-clinical": Phase.PRECLINICAL,
    "discovery": Phase.PRECLINICAL,
    "phase1": Phase.PHASE_1,
    "phasei": Phase.PHASE_1,
    "phase1/2": Phase.PHASE_1_2,
    "phasei/ii": Phase.PHASE_1_2,
    "phase2": Phase.PHASE_2,
    "phaseii": Phase.PHASE_2,
    "phase2/3": Phase.PHASE_2_3,
    "phaseii/iii": Phase.PHASE_2_3,
    "phase3": Phase.PHASE_3,
    "phaseiii": Phase.PHASE_3,
    "approved": Phase.APPROVED,
    "marketed": Phase.APPROVED,
}


# =============================================================================
# Catalog records (read-only input)
# =============================================================================

class Competitor(BaseModel):
    """A competing asset in an indication."""
    model_config = ConfigDict(frozen=True)

    company: str = Field(..., description="Sponsor company")
    asset_name: str = Field(..., description="Brand name or code of the asset")
    phase: Phase = Field(..., description="Highest phase reached for this indication")
    mechanism: str = Field(default="", description="Mechanism label (free text)")
    differentiation_score: Optional[int] = Field(None, ge=0, le=10)
    evidence_score: Optional[int] = Field(None, ge=0, le=10)
    market_share_pct: Optional[float] = Field(None, ge=0, le=100, description="Estimated market share (%)")

    # Descriptors used for white-space hints
    line_of_therapy: Optional[str] = None  # 1L, 2L, 2L+, maintenance, adjuvant, neoadjuvant
    indication_specifics: str = Field(default="", description="Population or regimen notes, e.g. \"in combination with chemotherapy\"")
    has_biomarker_selection: bool = False
    orphan_drug: bool = False

    @field_validator("phase", mode="before")
    @classmethod
    def _parse_phase(cls, value):
        return Phase.parse(value)


class Indication(BaseModel):
    """An indication with its epidemiology and competitor set."""
    model_config = ConfigDict(frozen=True)

    name: str
    therapy_area: str

    # Epidemiology
    us_prevalence: int = Field(..., ge=0, description="US patients with the condition")
    global_prevalence: Optional[int] = Field(None, ge=0, description="Global patients; extrapolated from US if absent")
    us_incidence: Optional[int] = Field(None, ge=0, description="New US cases per year")
    global_incidence: Optional[int] = Field(None, ge=0)
    diagnosis_rate: float = Field(..., ge=0, le=1, description="Fraction of prevalent patients diagnosed")
    treatment_rate: float = Field(..., ge=0, le=1, description="Fraction of diagnosed patients treated")
    cagr_5yr: float = Field(0.0, ge=-1, description="Five-year market CAGR as a fraction (0.08 = 8%)")

    competitors: List[Competitor] = Field(default_factory=list)


class Partner(BaseModel):
    """A potential BD partner."""
    model_config = ConfigDict(frozen=True)

    company: str
    therapeutic_areas: List[str] = Field(default_factory=list)
    bd_activity: str = "moderate"  # very_active, active, moderate, low

    @property
    def is_active(self) -> bool:
        return self.bd_activity in ("active", "very_active")


class Catalog(BaseModel):
    """Immutable, versioned snapshot of the screener reference data."""
    model_config = ConfigDict(frozen=True)

    version: str = "unversioned"
    indications: List[Indication] = Field(default_factory=list)
    partners: List[Partner] = Field(default_factory=list)


# =============================================================================
# Derived results
# =============================================================================

COMPONENT_MAXIMA: Dict[str, float] = {
    "market_attractiveness": 30.0,
    "competitive_openness": 25.0,
    "unmet_need": 20.0,
    "development_feasibility": 15.0,
    "partner_landscape": 10.0,
}


class ScoreBreakdown(BaseModel):
    """Five opportunity sub-scores; the maxima sum to 100."""
    market_attractiveness: float = Field(..., ge=0, le=30)
    competitive_openness: float = Field(..., ge=0, le=25)
    unmet_need: float = Field(..., ge=0, le=20)
    development_feasibility: float = Field(..., ge=0, le=15)
    partner_landscape: float = Field(..., ge=0, le=10)

    @property
    def total(self) -> float:
        """Sum of the five components."""
        return sum(getattr(self, name) for name in COMPONENT_MAXIMA)


class CrowdingAssessment(BaseModel):
    """Crowding score plus the (optional) HHI concentration index."""
    crowding_score: float = Field(..., ge=0, le=10)
    crowding_label: str
    crowding_color: str = Field(..., description="UI color derived from the crowding band")
    concentration_index: Optional[float] = Field(None, ge=0, description="None when no market shares are available")
    concentration_label: Optional[str] = None
    concentration_computable: bool = False


class ConcentrationResult(BaseModel):
    """Herfindahl-Hirschman concentration for a competitor set."""
    concentration_index: Optional[float] = None
    concentration_label: Optional[str] = None
    computable: bool = False
    estimated: bool = Field(False, description="True when shares were estimated rather than supplied")


class CompanyCount(BaseModel):
    company: str
    count: int
    share_pct: float = Field(..., description="Share of the competitor set (%)")


class MechanismCount(BaseModel):
    mechanism: str
    count: int


class LandscapeStats(BaseModel):
    """Chart-facing aggregation of a competitor list."""
    phase_distribution: Dict[Phase, int]
    company_concentration: List[CompanyCount] = Field(default_factory=list)
    mechanism_distribution: List[MechanismCount] = Field(default_factory=list)
    crowding: Optional[CrowdingAssessment] = None
    concentration: Optional[ConcentrationResult] = None


class TopCompetitor(BaseModel):
    company: str
    asset_name: str
    phase: Phase
    mechanism: str
    differentiation_score: Optional[int] = None


class OpportunityRow(BaseModel):
    """One scored indication as shown in the screener table."""
    # Identity
    indication: str
    therapy_area: str

    # Score
    opportunity_score: float = Field(..., ge=0, le=100)
    score_breakdown: ScoreBreakdown

    # Epidemiology
    global_prevalence: int
    global_incidence: Optional[int] = None
    us_prevalence: int
    us_incidence: Optional[int] = None
    cagr_5yr: float
    diagnosis_rate: float
    treatment_rate: float

    # Crowding
    crowding_score: float
    crowding_label: str
    crowding_color: str
    concentration_index: Optional[float] = None
    concentration_label: Optional[str] = None
    concentration_computable: bool = False

    # Landscape
    competitor_count: int
    phase_distribution: Dict[Phase, int]
    top_competitors: List[TopCompetitor] = Field(default_factory=list)
    top_companies: List[str] = Field(default_factory=list, description="Unique sponsors, most advanced phase first")
    white_space_hints: List[str] = Field(default_factory=list)
    white_space_phases: List[Phase] = Field(default_factory=list)
    white_space_mechanisms: List[str] = Field(default_factory=list)
    active_partner_count: int = 0


# =============================================================================
# Request / response
# =============================================================================

class FilterSpec(BaseModel):
    """Screener filters; an absent (or empty) field means no constraint."""
    model_config = ConfigDict(extra="forbid")

    therapy_areas: Optional[List[str]] = None
    phases: Optional[List[Phase]] = None
    min_prevalence: Optional[float] = Field(None, ge=0)
    max_crowding: Optional[float] = Field(None, ge=0, le=10)
    min_opportunity_score: Optional[float] = Field(None, ge=0, le=100)

    @field_validator("phases", mode="before")
    @classmethod
    def _parse_phases(cls, value):
        if value is None:
            return value
        if isinstance(value, (str, Phase)):
            value = [value]
        elif not isinstance(value, (list, tuple)):
            raise ValueError("phases must be a list of phase labels")
        return [Phase.parse(v) for v in value]

    def is_empty(self) -> bool:
        """True if no field constrains the result."""
        return not any([
            self.therapy_areas,
            self.phases,
            self.min_prevalence is not None,
            self.max_crowding is not None,
            self.min_opportunity_score is not None,
        ])


class SortField(str, Enum):
    OPPORTUNITY_SCORE = "opportunity_score"
    GLOBAL_PREVALENCE = "global_prevalence"
    CROWDING_SCORE = "crowding_score"
    COMPETITOR_COUNT = "competitor_count"
    CAGR_5YR = "cagr_5yr"
    TREATMENT_RATE = "treatment_rate"
    INDICATION = "indication"
    THERAPY_AREA = "therapy_area"
    GLOBAL_INCIDENCE = "global_incidence"
    US_PREVALENCE = "us_prevalence"
    US_INCIDENCE = "us_incidence"
    DIAGNOSIS_RATE = "diagnosis_rate"
    ACTIVE_PARTNER_COUNT = "active_partner_count"
    UNMET_NEED = "unmet_need"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ScreenerRequest(BaseModel):
    """Screener query as received from a client."""
    model_config = ConfigDict(extra="forbid")

    filters: Optional[FilterSpec] = None
    sort_by: SortField = SortField.OPPORTUNITY_SCORE
    sort_order: SortOrder = SortOrder.DESC
    limit: Optional[int] = Field(None, gt=0, description="Page size; defaults to the configured page size")
    offset: int = Field(0, ge=0)


class ScreenerResponse(BaseModel):
    opportunities: List[OpportunityRow] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    filters_applied: FilterSpec = Field(default_factory=FilterSpec)
    generated_at: datetime
    catalog_version: Optional[str] = None


class ScoreBucket(BaseModel):
    bucket: str
    count: int


class ScreenerSummary(BaseModel):
    """Catalog-wide overview for dashboard widgets."""
    total_indications: int
    therapy_area_counts: Dict[str, int] = Field(default_factory=dict)
    avg_opportunity_score: float = 0.0
    score_distribution: List[ScoreBucket] = Field(default_factory=list)


class IndicationDetail(BaseModel):
    row: OpportunityRow
    landscape: LandscapeStats
