"""
Reference tables for the screener.

Static, read-only lookups: likelihood-of-approval by therapy area and
territory populations used for global extrapolation.
"""

from typing import Dict

from .models import Phase

# Probability of eventual approval from each phase, by therapy area.
# Sources: BIO/Informa/QLS Clinical Development Success Rates 2011-2020,
# CDER novel approvals 2021-2025.
LOA_BY_THERAPY_AREA: Dict[str, Dict[str, float]] = {
    "oncology": {"phase1": 0.07, "phase2": 0.15, "phase3": 0.40},
    "immunology": {"phase1": 0.09, "phase2": 0.20, "phase3": 0.54},
    "neurology": {"phase1": 0.06, "phase2": 0.12, "phase3": 0.46},
    "rare_disease": {"phase1": 0.16, "phase2": 0.28, "phase3": 0.66},
    "cardiovascular": {"phase1": 0.07, "phase2": 0.15, "phase3": 0.55},
    "metabolic": {"phase1": 0.11, "phase2": 0.22, "phase3": 0.60},
    "infectious_disease": {"phase1": 0.10, "phase2": 0.21, "phase3": 0.58},
    "hematology": {"phase1": 0.12, "phase2": 0.22, "phase3": 0.52},
    "ophthalmology": {"phase1": 0.10, "phase2": 0.18, "phase3": 0.50},
    "pulmonology": {"phase1": 0.08, "phase2": 0.15, "phase3": 0.48},
    "nephrology": {"phase1": 0.07, "phase2": 0.14, "phase3": 0.45},
    "dermatology": {"phase1": 0.10, "phase2": 0.22, "phase3": 0.55},
    "endocrinology": {"phase1": 0.09, "phase2": 0.20, "phase3": 0.58},
    "gastroenterology": {"phase1": 0.08, "phase2": 0.18, "phase3": 0.52},
    "hepatology": {"phase1": 0.07, "phase2": 0.14, "phase3": 0.45},
    "musculoskeletal": {"phase1": 0.08, "phase2": 0.17, "phase3": 0.50},
    "pain_management": {"phase1": 0.06, "phase2": 0.11, "phase3": 0.40},
    "psychiatry": {"phase1": 0.05, "phase2": 0.08, "phase3": 0.38},
}

DEFAULT_LOA: Dict[str, float] = {"phase1": 0.08, "phase2": 0.15, "phase3": 0.50}

# Populations (millions) of the territories used for global extrapolation
TERRITORY_POPULATION_M: Dict[str, float] = {
    "US": 336,
    "EU5": 330,
    "Japan": 124,
    "China": 1410,
    "RoW": 6000,
}

US_POPULATION_M = TERRITORY_POPULATION_M["US"]
GLOBAL_POPULATION_M = sum(TERRITORY_POPULATION_M.values())

# Relative share weight per phase, used only when estimating market shares
PHASE_SHARE_WEIGHT: Dict[Phase, float] = {
    Phase.APPROVED: 40,
    Phase.PHASE_3: 20,
    Phase.PHASE_2_3: 15,
    Phase.PHASE_2: 5,
    Phase.PHASE_1_2: 2,
    Phase.PHASE_1: 1,
    Phase.PRECLINICAL: 0.5,
}


def normalize_therapy_area(therapy_area: str) -> str:
    """Lower-case, underscore-joined therapy area key ("Rare Disease" -> "rare_disease")."""
    return "_".join(therapy_area.strip().lower().replace("-", " ").split())


def average_loa(therapy_area: str) -> float:
    """Mean Phase 1/2/3 likelihood of approval for a therapy area."""
    loa = LOA_BY_THERAPY_AREA.get(normalize_therapy_area(therapy_area), DEFAULT_LOA)
    return (loa["phase1"] + loa["phase2"] + loa["phase3"]) / 3
