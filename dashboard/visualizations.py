from __future__ import annotations

import html

import plotly.graph_objects as go

from dashboard.constants import STATUS_COLORS

TEXT_MAIN = "#2E2A3B"
TEXT_SOFT = "#6B6780"
PLOT_GRID = "rgba(120, 110, 150, 0.15)"
BORDER = "rgba(120, 110, 150, 0.35)"
ACCENT = "#6A0DAD"


def apply_common_plot_style(fig, title, show_xgrid=True, show_ygrid=True):
    fig.update_layout(
        title=title,
        title_font=dict(color=TEXT_MAIN, size=16),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=TEXT_MAIN),
        margin=dict(l=40, r=20, t=40, b=30),
        xaxis=dict(
            showgrid=show_xgrid,
            gridcolor=PLOT_GRID,
            tickfont=dict(color=TEXT_SOFT),
            zeroline=False,
            showline=True,
            linecolor=BORDER,
            mirror=True,
        ),
        yaxis=dict(
            showgrid=show_ygrid,
            gridcolor=PLOT_GRID,
            zeroline=False,
            tickfont=dict(color=TEXT_SOFT),
            showline=True,
            linecolor=BORDER,
            mirror=True,
        ),
    )
    return fig


def subject_hours_chart(rows, title="Hours studied by subject", height=300):
    names = [row.get("name") or "Unknown" for row in rows]
    hours = [float(row.get("hours_studied") or 0) for row in rows]
    colors = [row.get("color") or ACCENT for row in rows]
    fig = go.Figure(data=go.Bar(x=names, y=hours, marker=dict(color=colors)))
    apply_common_plot_style(fig, title, show_xgrid=False)
    fig.update_layout(height=height)
    return fig


def weekly_hours_chart(rows, title="Weekly study hours", height=300):
    fig = go.Figure(
        data=go.Scatter(
            x=[row.get("week") for row in rows],
            y=[float(row.get("hours") or 0) for row in rows],
            mode="lines+markers",
            line=dict(color=ACCENT, width=2),
            marker=dict(size=8, color=ACCENT),
        )
    )
    apply_common_plot_style(fig, title)
    fig.update_layout(height=height)
    return fig


def status_pie_chart(rows, title="Task status", height=300):
    visible = [row for row in rows if int(row.get("count") or 0) > 0]
    fig = go.Figure(
        data=go.Pie(
            labels=[row["status"].title() for row in visible],
            values=[int(row["count"]) for row in visible],
            marker=dict(colors=[STATUS_COLORS.get(row["status"], ACCENT) for row in visible]),
            hole=0.45,
        )
    )
    fig.update_layout(
        title=title,
        height=height,
        paper_bgcolor="rgba(0,0,0,0)",
        margin=dict(l=20, r=20, t=40, b=20),
    )
    return fig


def progress_bar_html(percent, color=ACCENT):
    percent = max(0, min(100, int(percent or 0)))
    return (
        "<div class='progress-track'>"
        f"<div class='progress-fill' style='width:{percent}%;background:{html.escape(str(color))};'></div>"
        "</div>"
    )
