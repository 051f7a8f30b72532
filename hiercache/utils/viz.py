import plotly.express as px
import pandas as pd

def export_hit_rate_chart(rows, path: str):
    if not rows:
        with open(path, "w") as f:
            f.write("<h1>Hit Rates</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(rows)
    df['hit_rate'] = pd.to_numeric(df['hit_rate'], errors='coerce')
    df = df.dropna(subset=['hit_rate'])

    fig = px.bar(
        df,
        x="phase",
        y="hit_rate",
        color="level",
        barmode="group",
        hover_data=['phase', 'level', 'hit_rate'],
        title="Cache Hierarchy Hit Rates (cumulative)",
        labels={"phase": "Phase", "hit_rate": "Hit Rate (%)", "level": "Level"}
    )

    fig.update_yaxes(range=[0, 100])
    fig.update_layout(
        height=500,
        font=dict(family="Courier New, monospace", size=12),
        legend_title="Level"
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_hit_rate_ascii(rows, width: int = 50):
    if not rows:
        return "No hit rates to display."

    chart = "Cache Hierarchy Hit Rates (ASCII)\n"
    chart += ("-" * (width + 30)) + "\n"

    current_phase = None
    for row in rows:
        if row['phase'] != current_phase:
            current_phase = row['phase']
            chart += f"{current_phase}\n"
        filled = int(round(row['hit_rate'] / 100.0 * width))
        filled = max(0, min(width, filled))
        chart += f"  {row['level']:>8} |{'#' * filled}{'-' * (width - filled)}| {row['hit_rate']:6.2f}%\n"

    chart += ("-" * (width + 30)) + "\n"
    return chart
