"""
Lightweight visualization of a generated schedule.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

# Use a non-interactive backend to avoid display issues in headless environments.
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd


def plot_schedule(df: pd.DataFrame, outfile: Optional[Path] = None) -> None:
    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    if df.empty:
        axes[0].set_title("No doses scheduled")
        axes[1].set_axis_off()
    else:
        # Doses per active day, stacked by doctor
        labels = df.groupby("day_number")["weekday"].first()
        per_day = df.pivot_table(
            index="day_number", columns="doctor_name", values="patient_id", aggfunc="count", fill_value=0
        )
        per_day.index = [f"{n} ({labels[n][:3]})" for n in per_day.index]
        per_day.plot(kind="bar", stacked=True, ax=axes[0])
        axes[0].set_title("Doses per active day")
        axes[0].set_ylabel("Patients")

        # Priority of the patients each day receives
        df.groupby("day_number")["priority_score"].mean().plot(ax=axes[1], marker="o", color="tab:red")
        axes[1].set_title("Mean priority score per active day")

    plt.tight_layout()
    if outfile:
        plt.savefig(outfile, dpi=150)
    else:
        plt.show()
    plt.close(fig)
