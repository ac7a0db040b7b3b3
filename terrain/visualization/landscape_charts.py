"""
Plotly chart builders for the opportunity screener.

Usage:
    from terrain.visualization.landscape_charts import build_phase_chart, build_opportunity_matrix

    stats = service.landscape(indication.competitors)
    fig = build_phase_chart(stats, title="Psoriasis")

    response = service.screen({"limit": 100})
    fig = build_opportunity_matrix(rows_to_dataframe(response.opportunities))

All builders return a ``go.Figure``; rendering is left to the caller.
"""

from typing import Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from terrain.screener.models import LandscapeStats, OpportunityRow, PHASE_ORDER

# Plotly colors for the red / amber / green crowding bands
BAND_COLORS = {
    "green": "#2e7d32",
    "amber": "#f9a825",
    "red": "#c62828",
}

ROW_COLUMNS = [
    "indication",
    "therapy_area",
    "opportunity_score",
    "crowding_score",
    "crowding_label",
    "crowding_color",
    "global_prevalence",
    "competitor_count",
    "cagr_5yr",
]


def shorten_indication(name: str, max_len: int = 30) -> str:
    """Shorten indication names for display."""
    if len(str(name)) <= max_len:
        return str(name)
    return str(name)[:max_len - 3] + '...'


def rows_to_dataframe(rows: Sequence[OpportunityRow]) -> pd.DataFrame:
    """One DataFrame row per screener row, with the columns the charts use."""
    if not rows:
        return pd.DataFrame(columns=ROW_COLUMNS)
    return pd.DataFrame([{col: getattr(row, col) for col in ROW_COLUMNS} for row in rows])


def build_phase_chart(stats: LandscapeStats, title: str = "Pipeline", height: int = 400) -> go.Figure:
    """Bar chart of competitors per phase, in development order."""
    labels = [phase.value for phase in PHASE_ORDER]
    counts = [stats.phase_distribution.get(phase, 0) for phase in PHASE_ORDER]

    fig = go.Figure(go.Bar(
        x=labels,
        y=counts,
        marker=dict(color='#3f51b5'),
        hovertemplate="<b>%{x}</b><br>Assets: %{y}<extra></extra>",
    ))
    fig.update_layout(
        title=dict(text=f'<b>{title}</b><br><sup>Competitors by Phase</sup>', x=0.5),
        xaxis=dict(title='Phase'),
        yaxis=dict(title='Assets', dtick=1, gridcolor='lightgray'),
        plot_bgcolor='white',
        height=height,
    )
    return fig


def build_company_chart(stats: LandscapeStats, title: str = "Pipeline", height: int = 400) -> go.Figure:
    """Horizontal bar chart of assets per company (largest on top)."""
    companies = list(reversed(stats.company_concentration))

    fig = go.Figure(go.Bar(
        x=[c.count for c in companies],
        y=[c.company for c in companies],
        orientation='h',
        marker=dict(color='#00897b'),
        customdata=[c.share_pct for c in companies],
        hovertemplate="<b>%{y}</b><br>Assets: %{x}<br>Share: %{customdata:.1f}%<extra></extra>",
    ))
    fig.update_layout(
        title=dict(text=f'<b>{title}</b><br><sup>Company Concentration</sup>', x=0.5),
        xaxis=dict(title='Assets', dtick=1, gridcolor='lightgray'),
        plot_bgcolor='white',
        height=height,
    )
    return fig


def build_mechanism_chart(stats: LandscapeStats, title: str = "Pipeline", height: int = 450) -> go.Figure:
    """Donut chart of mechanism classes."""
    fig = go.Figure(go.Pie(
        labels=[m.mechanism for m in stats.mechanism_distribution],
        values=[m.count for m in stats.mechanism_distribution],
        hole=0.45,
        sort=False,
        hovertemplate="<b>%{label}</b><br>Assets: %{value}<extra></extra>",
    ))
    fig.update_layout(
        title=dict(text=f'<b>{title}</b><br><sup>Mechanism Distribution</sup>', x=0.5),
        height=height,
    )
    return fig


def build_opportunity_matrix(
    df: pd.DataFrame,
    title: str = "Opportunity Landscape",
    height: int = 600,
    show_sweet_spot: bool = True,
    max_indications: Optional[int] = None,
) -> go.Figure:
    """
    Opportunity score vs crowding bubble chart.

    Parameters:
    -----------
    df : pd.DataFrame
        Output of rows_to_dataframe()
    title : str
        Chart title
    height : int
        Chart height in pixels
    show_sweet_spot : bool
        Whether to highlight the high-score / low-crowding zone
    max_indications : int, optional
        Only plot the top indications by opportunity score
    """
    df_plot = df.copy()
    if max_indications is not None:
        df_plot = df_plot.nlargest(max_indications, 'opportunity_score')

    fig = go.Figure()

    if not df_plot.empty:
        df_plot['indication_short'] = df_plot['indication'].apply(shorten_indication)
        # Bubble size on a log-ish scale of prevalence (min 10, max 60)
        prevalence = df_plot['global_prevalence'].fillna(0).clip(lower=1)
        max_prev = prevalence.max()
        df_plot['bubble_size'] = (prevalence / max_prev).pow(0.35).mul(50).add(10).clip(10, 60)
        df_plot['marker_color'] = df_plot['crowding_color'].map(BAND_COLORS).fillna('gray')

        fig.add_trace(go.Scatter(
            x=df_plot['crowding_score'],
            y=df_plot['opportunity_score'],
            mode='markers+text',
            marker=dict(
                size=df_plot['bubble_size'],
                color=df_plot['marker_color'],
                line=dict(width=2, color='white'),
                opacity=0.8,
            ),
            text=df_plot['indication_short'],
            textposition='top center',
            textfont=dict(size=10, color='#333'),
            customdata=df_plot[['indication', 'therapy_area', 'crowding_label', 'global_prevalence']].values,
            hovertemplate=(
                "<b>%{customdata[0]}</b><br>"
                "Therapy Area: %{customdata[1]}<br>"
                "Opportunity Score: %{y:.1f}<br>"
                "Crowding: %{x:.1f} (%{customdata[2]})<br>"
                "Global Prevalence: %{customdata[3]:,}<br>"
                "<extra></extra>"
            ),
            showlegend=False,
        ))

    layout_args = dict(
        title=dict(
            text=f'<b>{title}</b><br>'
                 f'<sup>Opportunity Score vs Competitive Crowding (Bubble Size = Global Prevalence)</sup>',
            x=0.5,
            font=dict(size=16)
        ),
        xaxis=dict(title='Crowding Score', range=[-0.5, 10.5], dtick=1, gridcolor='lightgray'),
        yaxis=dict(title='Opportunity Score', range=[0, 100], gridcolor='lightgray'),
        plot_bgcolor='white',
        height=height,
    )

    if show_sweet_spot:
        layout_args['annotations'] = [
            dict(
                text="SWEET SPOT:<br>High score,<br>open landscape",
                x=1.5, y=92,
                showarrow=False,
                font=dict(size=10, color='green'),
                align='center'
            )
        ]
        layout_args['shapes'] = [
            dict(
                type='rect',
                x0=-0.3, x1=3, y0=60, y1=100,
                fillcolor='rgba(0,255,0,0.05)',
                line=dict(color='green', width=1, dash='dash')
            )
        ]

    fig.update_layout(**layout_args)
    return fig
