"""Shared fixtures for the screener tests."""

import pytest

from terrain.catalog.repository import InMemoryCatalogProvider
from terrain.screener.config import ScreenerConfig
from terrain.screener.models import Catalog, Competitor, Indication, Partner, Phase
from terrain.screener.scoring import OpportunityScorer
from terrain.screener.service import ScreenerService

THERAPY_AREAS = ["Immunology", "Oncology", "Neurology", "Rare Disease", "Cardiovascular", "Dermatology"]
CYCLE_PHASES = [Phase.APPROVED, Phase.PHASE_3, Phase.PHASE_2, Phase.PHASE_1, Phase.PRECLINICAL, Phase.PHASE_2_3]


def make_competitor(phase, company="Acme", asset_name=None, mechanism="Kinase inhibitor", **kwargs) -> Competitor:
    return Competitor(
        company=company,
        asset_name=asset_name or f"{company} asset",
        phase=phase,
        mechanism=mechanism,
        **kwargs,
    )


def make_indication(name, therapy_area="Immunology", competitors=(), **kwargs) -> Indication:
    fields = dict(
        us_prevalence=100_000,
        global_prevalence=1_000_000,
        diagnosis_rate=0.5,
        treatment_rate=0.5,
        cagr_5yr=0.05,
    )
    fields.update(kwargs)
    return Indication(name=name, therapy_area=therapy_area, competitors=list(competitors), **fields)


@pytest.fixture
def worked_example_competitors():
    """Approved + Phase 3 + Phase 2 + Preclinical: crowding 2.1."""
    return [
        make_competitor(Phase.APPROVED, company="Alpha Bio", mechanism="IL-23 inhibitor", differentiation_score=8),
        make_competitor(Phase.PHASE_3, company="Beta Pharma", mechanism="IL-17 inhibitor", differentiation_score=6),
        make_competitor(Phase.PHASE_2, company="Gamma Tx", mechanism="TYK2 inhibitor", differentiation_score=None),
        make_competitor(Phase.PRECLINICAL, company="Delta Labs", mechanism="IL-23 inhibitor", differentiation_score=6),
    ]


@pytest.fixture
def small_catalog(worked_example_competitors):
    """Four indications across three therapy areas plus partners."""
    indications = [
        make_indication(
            "Alpha Syndrome",
            therapy_area="Immunology",
            competitors=worked_example_competitors,
            global_prevalence=1_000_000,
        ),
        make_indication(
            "Beta Disease",
            therapy_area="Immunology",
            competitors=[
                make_competitor(Phase.APPROVED, company=f"Company {i}", mechanism="TNF inhibitor")
                for i in range(10)
            ],
            global_prevalence=5_000_000,
        ),
        make_indication(
            "Gamma Disorder",
            therapy_area="Oncology",
            competitors=[],
            global_prevalence=50_000,
            us_incidence=1_000,
        ),
        make_indication(
            "Delta Condition",
            therapy_area="Neurology",
            competitors=[
                make_competitor(Phase.PHASE_1, company="Early Bio", mechanism="Orexin agonist"),
                make_competitor(Phase.PHASE_1, company="Early Bio", asset_name="EB-2", mechanism="Orexin agonist"),
            ],
            global_prevalence=200_000,
        ),
    ]
    partners = [
        Partner(company="AbbVie", therapeutic_areas=["immunology", "oncology"], bd_activity="very_active"),
        Partner(company="Merck", therapeutic_areas=["oncology"], bd_activity="active"),
        Partner(company="Quiet Co", therapeutic_areas=["neurology"], bd_activity="low"),
    ]
    return Catalog(version="test-1", indications=indications, partners=partners)


@pytest.fixture
def large_catalog():
    """214 generated indications with varied landscapes."""
    indications = []
    for i in range(214):
        n_competitors = i % 7
        competitors = [
            make_competitor(
                CYCLE_PHASES[(i + j) % len(CYCLE_PHASES)],
                company=f"Sponsor {(i + j) % 11}",
                asset_name=f"ASSET-{i}-{j}",
                mechanism=f"Mechanism {(i * j) % 5}",
                differentiation_score=(i + j) % 11,
            )
            for j in range(n_competitors)
        ]
        indications.append(make_indication(
            f"Indication {i:03d}",
            therapy_area=THERAPY_AREAS[i % len(THERAPY_AREAS)],
            competitors=competitors,
            us_prevalence=1_000 * (i + 1),
            global_prevalence=None,
            diagnosis_rate=(i % 10) / 10,
            treatment_rate=((i * 3) % 10) / 10,
            cagr_5yr=((i % 9) - 2) / 100,
        ))
    return Catalog(version="large", indications=indications, partners=[])


@pytest.fixture
def scorer():
    return OpportunityScorer()


@pytest.fixture
def service(small_catalog):
    return ScreenerService(InMemoryCatalogProvider(small_catalog), ScreenerConfig())


@pytest.fixture
def large_service(large_catalog):
    return ScreenerService(InMemoryCatalogProvider(large_catalog), ScreenerConfig())
