"""Command line entry point for training perceptrons."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, List

from perceptron.core.activations import REGISTRY as ACTIVATIONS
from perceptron.core.errors import InvalidConfig, InvalidTrainingData
from perceptron.data import registry as data_registry
from perceptron.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "initial_loss": result.initial_loss,
        "final_loss": result.final_loss,
        "outputs": result.outputs,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
    }
    if result.plots:
        payload["plots"] = result.plots
    return json.dumps(payload, sort_keys=True)


def _int_list(text: str) -> List[int]:
    try:
        return [int(part) for part in text.replace(" ", "").split(",") if part]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {text!r}") from None


def _float_list(text: str) -> List[float]:
    try:
        return [float(part) for part in text.replace(" ", "").split(",") if part]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers, got {text!r}") from None


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument(
        "--data", type=Path, help="Training-data file (JSON/YAML list of records)"
    )
    parser.add_argument(
        "--dataset",
        choices=[name for name in data_registry.available_datasets() if name != "file"],
        help="Built-in dataset to train on",
    )
    parser.add_argument("--layers", type=_int_list, help="Layer sizes, e.g. 2,3,1")
    parser.add_argument("--learn-rate", type=float, help="Learn rate in (0, 1]")
    parser.add_argument("--epochs", type=int, help="Number of calls to learn()")
    parser.add_argument(
        "--inputs", type=_float_list, help="Probe input fed through the trained network"
    )
    parser.add_argument("--activation", choices=sorted(ACTIVATIONS.names()))
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write loss and network plots"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-datasets", action="store_true", help="List built-in datasets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    return dict(pipelines.read_config_file(path))


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_config(args: argparse.Namespace) -> dict:
    """Resolve the preset, config file and flag overrides into one config."""

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = _load_override(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    if args.data:
        config["data"] = {"name": "file", "options": {"path": str(args.data)}}
    elif args.dataset:
        config["data"] = {"name": args.dataset, "options": {}}

    model = config.setdefault("model", {})
    train = config.setdefault("train", {})
    if args.layers is not None:
        model["layers"] = args.layers
        # A preset probe no longer fits a different input layer.
        if args.inputs is None:
            train.pop("inputs", None)
    if args.activation is not None:
        model["activation"] = args.activation
    if args.learn_rate is not None:
        train["learn_rate"] = args.learn_rate
    if args.epochs is not None:
        train["epochs"] = args.epochs
    if args.inputs is not None:
        train["inputs"] = args.inputs
    if args.seed is not None:
        train["seed"] = args.seed
    if args.run_dir is not None:
        train["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_datasets:
        for name in data_registry.available_datasets():
            print(name)
        raise SystemExit(0)

    config = build_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    try:
        result = pipelines.run_pipeline(config)
    except (InvalidConfig, InvalidTrainingData) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    print(_format_result(result))


if __name__ == "__main__":
    main()
