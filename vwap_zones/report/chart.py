"""Chart output: VWAP line, bands and shaded zones.

Colours follow the dark chart scheme: blue VWAP, green band 1, orange band 2.
"""

from pathlib import Path
from typing import Union

import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


PLOT_STYLES = {
    "vwap": {"title": "VWAP", "color": "#0000FF", "linewidth": 2},
    "ub1": {"title": "Band 1 Upper", "color": "#00FF00", "linewidth": 1},
    "lb1": {"title": "Band 1 Lower", "color": "#00FF00", "linewidth": 1},
    "ub2": {"title": "Band 2 Upper", "color": "#FFA500", "linewidth": 1},
    "lb2": {"title": "Band 2 Lower", "color": "#FFA500", "linewidth": 1},
}

AREA_SPECS = {
    "vwap_zone": {"top": "vwap_top", "bottom": "vwap_bot", "title": "VWAP Zone",
                  "color": (0.0, 0.0, 1.0, 0.2)},
    "band1_zone_upper": {"top": "ub1_top", "bottom": "ub1_bot", "title": "Band 1 Upper Zone",
                         "color": (0.0, 1.0, 0.0, 0.2)},
    "band1_zone_lower": {"top": "lb1_top", "bottom": "lb1_bot", "title": "Band 1 Lower Zone",
                         "color": (0.0, 1.0, 0.0, 0.2)},
    "band2_zone_upper": {"top": "ub2_top", "bottom": "ub2_bot", "title": "Band 2 Upper Zone",
                         "color": (1.0, 165 / 255, 0.0, 0.2)},
    "band2_zone_lower": {"top": "lb2_top", "bottom": "lb2_bot", "title": "Band 2 Lower Zone",
                         "color": (1.0, 165 / 255, 0.0, 0.2)},
}


def plot_vwap_zones(
    df: pd.DataFrame,
    zones: pd.DataFrame,
    path: Union[str, Path],
    title: str = "VWAP Zones",
) -> Path:
    """Save a PNG with close price, the five lines and five zones.

    Args:
        df: Candle DataFrame (time, close)
        zones: Output of compute_vwap_zones, aligned with df
        path: PNG destination
        title: Chart title

    Returns:
        Path of the saved file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if "time" in df.columns:
        times = pd.to_datetime(df["time"])
        if times.dt.tz is not None:
            times = times.dt.tz_convert("UTC").dt.tz_localize(None)
        x = times.to_numpy()
    else:
        x = df.index.to_numpy()

    fig, ax = plt.subplots(figsize=(14, 6))
    ax.plot(x, df["close"].to_numpy(), linewidth=0.5, color="gray", label="Close")

    for spec in AREA_SPECS.values():
        ax.fill_between(
            x, zones[spec["bottom"]].to_numpy(), zones[spec["top"]].to_numpy(),
            color=spec["color"], linewidth=0, label=spec["title"],
        )

    for col, style in PLOT_STYLES.items():
        ax.plot(x, zones[col].to_numpy(), color=style["color"], linewidth=style["linewidth"], label=style["title"])

    ax.set_title(title)
    ax.set_xlabel("Time (UTC)")
    ax.set_ylabel("Price")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper left", fontsize=7, ncol=2)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path
