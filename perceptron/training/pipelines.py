"""Pipeline assembly: config -> dataset -> network -> trainer -> artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping

from ..core.network import Network
from ..data import registry
from ..data.training_data import check_compatible
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .config import RunConfig
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {}},
        "model": {"layers": [2, 3, 1], "activation": "sigmoid"},
        "train": {
            "epochs": 2000,
            "learn_rate": 0.5,
            "seed": 0,
            "inputs": [1, 0],
            "log_every": 100,
            "run_dir": "runs/xor",
            "enable_plots": False,
        },
    },
    "and": {
        "data": {"name": "and", "options": {}},
        "model": {"layers": [2, 1], "activation": "sigmoid"},
        "train": {
            "epochs": 500,
            "learn_rate": 0.5,
            "seed": 0,
            "inputs": [1, 1],
            "log_every": 50,
            "run_dir": "runs/and",
            "enable_plots": False,
        },
    },
    "default": {
        "data": {"name": "or", "options": {}},
        "model": {"layers": [2, 1], "activation": "sigmoid"},
        "train": {
            "epochs": 1000,
            "learn_rate": 0.001,
            "seed": 0,
            "inputs": [0, 0],
            "log_every": 100,
            "run_dir": "runs/default",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


@dataclass(frozen=True)
class RunResult:
    """Paths and headline numbers produced by :func:`run_pipeline`."""

    epochs: int
    initial_loss: float
    final_loss: float
    outputs: List[float]
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
    plots: List[str] = field(default_factory=list)


def read_config_file(path: Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config file into a mapping."""

    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load config files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train a network as described by ``config`` and write its artifacts.

    Settings are validated and the dataset is checked against the network
    shape before anything is constructed or trained.
    """

    data_cfg = dict(config.get("data", {}))  # type: ignore[arg-type]
    model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]

    run_config = RunConfig.from_mapping(model_cfg, train_cfg)
    dataset = registry.get_dataset(
        str(data_cfg.get("name", "xor")), **dict(data_cfg.get("options", {}))
    )
    check_compatible(dataset.points, run_config.layer_sizes)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    network = Network(
        run_config.layer_sizes,
        run_config.learn_rate,
        run_config.activation,
        seed=run_config.seed,
    )

    _print_startup_summary(
        dataset_name=dataset.name,
        n_points=len(dataset.points),
        config=run_config,
        param_count=network.parameter_count(),
    )

    jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=run_config.seed)
    csv_sink = CsvSink(run_dir / "metrics.csv")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    trainer = Trainer(network, callbacks=[jsonl, csv_sink, plots])

    metrics_cfg = train_cfg.get("metrics", ())
    if not isinstance(metrics_cfg, str):
        metrics_cfg = [str(item) for item in metrics_cfg]  # type: ignore[union-attr]
    result = trainer.run(
        dataset.points,
        run_config.epochs,
        log_every=run_config.log_every,
        metric_names=metrics_cfg,
        target_loss=run_config.target_loss,
        probe=run_config.inputs,
    )
    plots.close(network)

    resolved = _safe_config(config, run_config)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=resolved,
        dataset_provenance=dataset.provenance,
        network={
            "layer_sizes": network.layer_sizes,
            "activation": network.activation.name,
            "parameters": network.parameter_count(),
            "generation": network.generation,
        },
    )
    summary_path = write_summary(jsonl.path, run_dir / "summary.json")
    (run_dir / "config.json").write_text(json.dumps(resolved, indent=2))

    plot_paths = [str(run_dir / name) for name in ("loss.png", "network.png") if (run_dir / name).exists()]
    return RunResult(
        epochs=result.epochs,
        initial_loss=result.initial_loss,
        final_loss=result.final_loss,
        outputs=network.outputs.tolist(),
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        plots=plot_paths if plots.enable_plots else [],
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _safe_config(config: Mapping[str, object], run_config: RunConfig) -> Mapping[str, object]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("model", {})["layers"] = list(run_config.layer_sizes)
    copied["model"]["activation"] = run_config.activation
    train = copied.setdefault("train", {})
    train["learn_rate"] = run_config.learn_rate
    train["epochs"] = run_config.epochs
    train["inputs"] = list(run_config.inputs or [])
    train["seed"] = run_config.seed
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    n_points: int,
    config: RunConfig,
    param_count: int,
) -> None:
    print("=== Perceptron run ===")
    print(f"Dataset       : {dataset_name} ({n_points} records)")
    print(f"Layers        : {config.layer_sizes}")
    print(f"Activation    : {config.activation}")
    print(f"Learn rate    : {config.learn_rate}")
    print(f"Epochs        : {config.epochs}")
    print(f"Parameters    : {param_count}")
    print("======================")


__all__ = ["RunResult", "load_preset", "presets", "read_config_file", "run_pipeline"]
