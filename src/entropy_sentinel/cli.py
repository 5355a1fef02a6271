"""Typer CLI for the entropy-based DDoS detector."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer

from .config import Config, load_config
from .data.generator import generator_from_config, scenario_from_config
from .data.structures import Packet
from .evaluation.reporting import write_session_report
from .session.driver import SessionDriver
from .storage.history import SQLiteHistoryStore
from .utils.io import load_packets, save_packets
from .utils.logging import configure_logging, get_logger, log_config
from .utils.seed import seed_everything

app = typer.Typer(add_completion=False)

DEFAULT_CONFIG = Path("configs/config.yaml")


@app.callback()
def main(log_level: str = typer.Option("INFO", help="Logging level")) -> None:
    """Simulate traffic and detect DDoS attacks from entropy drops."""

    configure_logging(log_level)


def _load(config_path: Path, seed: Optional[int]) -> Config:
    config = load_config(config_path)
    if seed is not None:
        config.seed = seed
    if config.seed is not None:
        seed_everything(config.seed)
    log_config(get_logger("cli"), {"config_path": str(config_path), "seed": config.seed})
    return config


def _run_session(
    config: Config,
    traffic: List[Packet],
    baseline: List[Packet],
    persist: bool,
    paced: bool,
    report_dir: Optional[Path],
    notes: dict,
) -> None:
    store = SQLiteHistoryStore(config.paths.history_db) if persist else None
    driver = SessionDriver(traffic, baseline, config=config, store=store)
    try:
        metrics = driver.run(paced=paced)
    except KeyboardInterrupt:
        driver.stop()
        metrics = driver.counter.matrix()
        typer.echo(f"Interrupted after {driver.progress} packets")
    if report_dir is not None:
        write_session_report(report_dir, metrics, driver.samples, notes=notes)
        typer.echo(f"Wrote session report → {report_dir}")
    typer.echo(json.dumps(metrics.as_dict(), indent=2))


@app.command()
def simulate(
    config_path: Path = typer.Option(DEFAULT_CONFIG, help="Configuration path"),
    seed: Optional[int] = typer.Option(None, help="Override the configured seed"),
    report: bool = typer.Option(True, help="Write CSV/Markdown report to the reports directory"),
    persist: bool = typer.Option(False, help="Append scored samples to the history database"),
    paced: bool = typer.Option(False, help="Sleep between steps according to the playback speed"),
    export: Optional[Path] = typer.Option(None, help="Also export the generated traffic as JSON"),
) -> None:
    """Generate the phased attack scenario and run detection over it."""

    config = _load(config_path, seed)
    scenario = scenario_from_config(config.traffic, config.seed)
    if export is not None:
        save_packets(export, scenario.traffic)
        typer.echo(f"Exported {len(scenario.traffic)} packets → {export}")
    _run_session(
        config,
        scenario.traffic,
        scenario.baseline,
        persist=persist,
        paced=paced,
        report_dir=config.paths.reports_dir if report else None,
        notes={"source": "simulated scenario", "seed": config.seed, "packets": len(scenario.traffic)},
    )


@app.command()
def replay(
    packets_path: Path = typer.Argument(..., help="JSON file of exported packets"),
    baseline_path: Optional[Path] = typer.Option(None, help="JSON file of attack-free baseline packets"),
    config_path: Path = typer.Option(DEFAULT_CONFIG, help="Configuration path"),
    seed: Optional[int] = typer.Option(None, help="Override the configured seed"),
    report: bool = typer.Option(True, help="Write CSV/Markdown report to the reports directory"),
    persist: bool = typer.Option(False, help="Append scored samples to the history database"),
    paced: bool = typer.Option(False, help="Sleep between steps according to the playback speed"),
) -> None:
    """Run detection over previously exported traffic."""

    config = _load(config_path, seed)
    traffic = load_packets(packets_path)
    if not traffic:
        typer.echo(f"No valid packet data found in {packets_path}", err=True)
        raise typer.Exit(code=1)
    if baseline_path is not None:
        baseline = load_packets(baseline_path)
        if not baseline:
            typer.echo(f"No valid baseline data found in {baseline_path}", err=True)
            raise typer.Exit(code=1)
    else:
        generator = generator_from_config(config.traffic, config.seed)
        baseline = generator.generate_baseline(config.traffic.baseline_packets)
    typer.echo(f"Imported {len(traffic)} packets from {packets_path}")
    _run_session(
        config,
        traffic,
        baseline,
        persist=persist,
        paced=paced,
        report_dir=config.paths.reports_dir if report else None,
        notes={"source": str(packets_path), "packets": len(traffic)},
    )


@app.command("export-scenario")
def export_scenario(
    out: Path = typer.Argument(..., help="Output JSON path"),
    config_path: Path = typer.Option(DEFAULT_CONFIG, help="Configuration path"),
    seed: Optional[int] = typer.Option(None, help="Override the configured seed"),
) -> None:
    """Write the simulated traffic to a JSON file for later replay."""

    config = _load(config_path, seed)
    scenario = scenario_from_config(config.traffic, config.seed)
    save_packets(out, scenario.traffic)
    typer.echo(f"Exported {len(scenario.traffic)} packets → {out}")


@app.command()
def history(
    config_path: Path = typer.Option(DEFAULT_CONFIG, help="Configuration path"),
    limit: Optional[int] = typer.Option(None, help="Show at most this many records"),
) -> None:
    """List stored detection results, newest first."""

    config = load_config(config_path)
    records = SQLiteHistoryStore(config.paths.history_db).list_all()
    if limit is not None:
        records = records[:limit]
    if not records:
        typer.echo("No detection history")
        return
    frame = pd.DataFrame([asdict(record) for record in records])
    frame["timestamp"] = [
        datetime.fromtimestamp(ts / 1000.0, tz=timezone.utc).isoformat(timespec="seconds")
        for ts in frame["timestamp"]
    ]
    typer.echo(frame.to_string(index=False))


@app.command("clear-history")
def clear_history(
    config_path: Path = typer.Option(DEFAULT_CONFIG, help="Configuration path"),
) -> None:
    """Delete every stored detection result."""

    config = load_config(config_path)
    SQLiteHistoryStore(config.paths.history_db).clear()
    typer.echo("Detection history cleared")


if __name__ == "__main__":
    app()
