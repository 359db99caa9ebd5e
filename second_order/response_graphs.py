import os
import re
import tempfile
from typing import Dict, Any, List, Optional

import numpy as np

from second_order.profiles.dynamics_profile import DynamicsProfile

try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
except Exception as exc:  # pragma: no cover - runtime optional
    plt = None
    _MATPLOTLIB_IMPORT_ERROR = exc
else:
    _MATPLOTLIB_IMPORT_ERROR = None


def simulate_step_response(
    profile: DynamicsProfile,
    target: float = 1.0,
    dt: float = 1.0 / 60.0,
    ticks: int = 300,
    start: float = 0.0,
):
    """
    Run a scalar filter from `start` toward a constant `target`.
    Returns (times, outputs) arrays of length ticks + 1, including t=0.
    """
    if dt <= 0:
        raise ValueError(f"dt must be > 0, got {dt}")
    system = profile.build("float")
    system.update_initial_values(start, start, 0.0)

    times = np.arange(ticks + 1, dtype=float) * dt
    outputs = np.empty(ticks + 1, dtype=float)
    outputs[0] = start
    for i in range(1, ticks + 1):
        outputs[i] = system.update(target, dt)
    return times, outputs


def response_summary(times: np.ndarray, outputs: np.ndarray, target: float = 1.0, start: float = 0.0,
                     tolerance: float = 0.02) -> Dict[str, Any]:
    """
    Overshoot (fraction of the step), final value and settling time
    (first time after which the output stays within `tolerance` of the step).
    """
    step = target - start
    if step == 0:
        raise ValueError("target and start must differ")
    normalized = (outputs - start) / step
    overshoot = max(0.0, float(np.max(normalized)) - 1.0)

    outside = np.nonzero(np.abs(normalized - 1.0) > tolerance)[0]
    if outside.size == 0:
        settling_time = float(times[0])
    elif outside[-1] + 1 < len(times):
        settling_time = float(times[outside[-1] + 1])
    else:
        settling_time = None

    return {
        "overshoot": overshoot,
        "settled_value": float(outputs[-1]),
        "settling_time": settling_time,
    }


def _ensure_output_dir(output_dir: Optional[str]) -> str:
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        return output_dir
    return tempfile.mkdtemp(prefix="response_graphs_")


def _safe_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name)


def plot_step_responses(
    profiles: Dict[str, DynamicsProfile],
    output_dir: Optional[str] = None,
    target: float = 1.0,
    dt: float = 1.0 / 60.0,
    ticks: int = 300,
) -> List[str]:
    """
    Plot one step-response PNG per profile plus an overlay of all of them.
    Returns a list of generated file paths.
    """
    if plt is None:
        raise ImportError(f"matplotlib is required for response graphs: {_MATPLOTLIB_IMPORT_ERROR}")

    if not profiles:
        return []

    output_dir = _ensure_output_dir(output_dir)
    generated_files: List[str] = []
    curves = {}

    for name, profile in profiles.items():
        times, outputs = simulate_step_response(profile, target=target, dt=dt, ticks=ticks)
        curves[name] = (times, outputs)
        summary = response_summary(times, outputs, target)

        fig, ax = plt.subplots(figsize=(6.4, 3.6))
        ax.axhline(target, color="gray", linestyle="--", linewidth=0.8)
        ax.plot(times, outputs, linewidth=1.2)
        ax.set_xlabel("time (s)", fontsize=8)
        ax.set_ylabel("output", fontsize=8)
        ax.tick_params(labelsize=7)
        ax.set_title(
            f"{name}: f={profile.period:g} z={profile.damping:g} r={profile.response:g} "
            f"(overshoot {summary['overshoot'] * 100:.1f}%)",
            fontsize=9,
        )
        fig.tight_layout()
        out_path = os.path.join(output_dir, f"step_response_{_safe_name(name)}.png")
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
        generated_files.append(out_path)

    fig, ax = plt.subplots(figsize=(6.4, 3.6))
    ax.axhline(target, color="gray", linestyle="--", linewidth=0.8)
    for name, (times, outputs) in curves.items():
        ax.plot(times, outputs, linewidth=1.0, label=name)
    ax.legend(fontsize=7)
    ax.set_xlabel("time (s)", fontsize=8)
    ax.tick_params(labelsize=7)
    ax.set_title("step responses", fontsize=9)
    fig.tight_layout()
    out_path = os.path.join(output_dir, "step_responses.png")
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
    generated_files.append(out_path)

    return generated_files
