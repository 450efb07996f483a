"""Box-plot report of related vs unrelated distances per model.

Uses Plotly with precomputed quartiles so the boxes show exactly the
nearest-rank statistics the comparison reports, not Plotly's own
interpolated quantiles.
"""

import logging
from pathlib import Path

import plotly.graph_objects as go

from .comparison.models import BoxPlotStats, ModelSummary

logger = logging.getLogger(__name__)

COLORS = {
    "related": "#10b981",  # Emerald
    "unrelated": "#ef4444",  # Red
    "threshold": "#6366f1",  # Indigo
}

PLOT_HEIGHT = 520


def _box_trace(
    summaries: list[ModelSummary], related: bool
) -> go.Box | None:
    name = "related" if related else "unrelated"
    models: list[str] = []
    stats: list[BoxPlotStats] = []
    for summary in summaries:
        box = summary.related if related else summary.unrelated
        if box is not None:
            models.append(summary.model)
            stats.append(box)

    if not stats:
        return None

    return go.Box(
        name=name.capitalize(),
        x=models,
        q1=[box.q1 for box in stats],
        median=[box.median for box in stats],
        q3=[box.q3 for box in stats],
        lowerfence=[box.min for box in stats],
        upperfence=[box.max for box in stats],
        marker_color=COLORS[name],
        hovertext=[f"n={box.count}" for box in stats],
    )


def build_figure(summaries: list[ModelSummary], height: int = PLOT_HEIGHT) -> go.Figure:
    """Build a grouped box plot with one related and one unrelated box per model.

    Each model's threshold is drawn as a horizontal marker over its group.
    """
    figure = go.Figure()
    for related in (True, False):
        trace = _box_trace(summaries, related)
        if trace is not None:
            figure.add_trace(trace)

    thresholds = [s for s in summaries if s.threshold is not None]
    if thresholds:
        figure.add_trace(
            go.Scatter(
                name="Threshold",
                x=[s.model for s in thresholds],
                y=[s.threshold for s in thresholds],
                mode="markers",
                marker=dict(
                    symbol="line-ew-open",
                    size=40,
                    color=COLORS["threshold"],
                    line=dict(width=2, color=COLORS["threshold"]),
                ),
                hovertemplate="%{x}<br>threshold %{y:.4f}<extra></extra>",
            )
        )

    figure.update_layout(
        title="Cosine distance by relatedness",
        yaxis_title="Cosine distance",
        boxmode="group",
        height=height,
    )
    return figure


def write_report(summaries: list[ModelSummary], path: Path | str) -> Path:
    """Write the box-plot figure as a standalone HTML file."""
    path = Path(path)
    build_figure(summaries).write_html(path, include_plotlyjs="cdn")
    logger.debug(f"Wrote box-plot report for {len(summaries)} models to {path}")
    return path
