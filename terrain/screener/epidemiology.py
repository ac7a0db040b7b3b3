"""
Global epidemiology.

Indications may carry global prevalence/incidence directly. When they do
not, US figures are extrapolated per capita to the key territories
(US, EU5, Japan, China, RoW).
"""

from typing import NamedTuple, Optional

from .models import Indication
from .reference import GLOBAL_POPULATION_M, US_POPULATION_M


class GlobalEpidemiology(NamedTuple):
    prevalence: int
    incidence: Optional[int]


def extrapolate_from_us(us_count: int) -> int:
    """Scale a US patient count to the global population."""
    return round(us_count / US_POPULATION_M * GLOBAL_POPULATION_M)


def resolve_global_epidemiology(indication: Indication) -> GlobalEpidemiology:
    """Global prevalence and incidence, preferring supplied figures."""
    prevalence = indication.global_prevalence
    if prevalence is None:
        prevalence = extrapolate_from_us(indication.us_prevalence)

    incidence = indication.global_incidence
    if incidence is None and indication.us_incidence is not None:
        incidence = extrapolate_from_us(indication.us_incidence)

    return GlobalEpidemiology(prevalence=prevalence, incidence=incidence)
