"""Reporting utilities."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Dict, Sequence

import pandas as pd

from ..data.structures import EntropySample
from ..utils.io import ensure_dir, save_json
from .metrics import ConfusionMatrix


def samples_frame(samples: Sequence[EntropySample]) -> pd.DataFrame:
    columns = ["index", "ip_entropy", "size_entropy", "is_attack", "detected_attack"]
    return pd.DataFrame([asdict(sample) for sample in samples], columns=columns)


def write_session_report(
    out_dir: Path,
    matrix: ConfusionMatrix,
    samples: Sequence[EntropySample],
    notes: Dict[str, object] | None = None,
) -> None:
    """Persist per-window samples and summary metrics to CSV, JSON and Markdown."""

    ensure_dir(out_dir)
    samples_frame(samples).to_csv(out_dir / "entropy_samples.csv", index=False)
    pd.DataFrame([matrix.as_dict()]).to_csv(out_dir / "metrics.csv", index=False)
    save_json(out_dir / "metrics.json", matrix.as_dict())
    summary_lines = ["# Detection Summary", "", "## Metrics"]
    for key in ("accuracy", "precision", "recall", "f1"):
        summary_lines.append(f"- **{key}**: {getattr(matrix, key):.4f}")
    summary_lines.append("\n## Confusion matrix")
    summary_lines.append(f"- **true_positive**: {matrix.true_positive}")
    summary_lines.append(f"- **false_positive**: {matrix.false_positive}")
    summary_lines.append(f"- **true_negative**: {matrix.true_negative}")
    summary_lines.append(f"- **false_negative**: {matrix.false_negative}")
    if notes:
        summary_lines.append("\n## Notes")
        for key, value in notes.items():
            summary_lines.append(f"- **{key}**: {value}")
    (out_dir / "summary.md").write_text("\n".join(summary_lines), encoding="utf-8")


__all__ = ["samples_frame", "write_session_report"]
