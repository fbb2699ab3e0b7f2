"""Plotting helpers for station traffic summaries."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from stationflow.traffic import TimeBucketIndex


def plot_top_stations(traffic: pd.DataFrame, top_n: int = 15, output_path: Optional[Path] = None) -> plt.Figure:
    """Bar chart of departures and arrivals for the busiest stations."""

    required = {"name", "departures", "arrivals", "total_traffic"}
    missing = required - set(traffic.columns)
    if missing:
        raise KeyError(f"Traffic table missing columns: {missing}")
    busiest = traffic.sort_values("total_traffic", ascending=False).head(top_n)
    tidy = busiest.melt(
        id_vars=["name"],
        value_vars=["departures", "arrivals"],
        var_name="direction",
        value_name="trips",
    )
    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, max(3, 0.35 * len(busiest) + 1)))
    sns.barplot(data=tidy, y="name", x="trips", hue="direction", palette="viridis", ax=ax)
    ax.set_xlabel("Trips")
    ax.set_ylabel("Station")
    ax.set_title(f"Top {len(busiest)} stations by traffic")
    plt.tight_layout()
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
    return fig


def plot_traffic_profile(index: TimeBucketIndex, output_path: Optional[Path] = None) -> plt.Figure:
    """Line chart of departures and arrivals per hour of day."""

    profile = index.hourly_profile().melt(id_vars=["hour"], var_name="direction", value_name="trips")
    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, 4))
    sns.lineplot(data=profile, x="hour", y="trips", hue="direction", marker="o", ax=ax)
    ax.set_xticks(range(0, 24, 2))
    ax.set_xlabel("Hour of day")
    ax.set_ylabel("Trips")
    ax.set_title("Trips by hour of day")
    plt.tight_layout()
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
    return fig
