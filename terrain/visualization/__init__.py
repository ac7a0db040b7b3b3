"""
Visualization module for the TERRAIN screener.
"""

from terrain.visualization.landscape_charts import (
    build_company_chart,
    build_mechanism_chart,
    build_opportunity_matrix,
    build_phase_chart,
    rows_to_dataframe,
    shorten_indication,
)

__all__ = [
    'build_company_chart',
    'build_mechanism_chart',
    'build_opportunity_matrix',
    'build_phase_chart',
    'rows_to_dataframe',
    'shorten_indication',
]
