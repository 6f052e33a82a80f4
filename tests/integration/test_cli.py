import json
from pathlib import Path

import pytest

from cli.main import main


def _last_json(out: str) -> dict:
    return json.loads(out.strip().splitlines()[-1])


def test_cli_runs_xor_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor", "--epochs", "50"])
    payload = _last_json(capsys.readouterr().out)
    assert payload["epochs"] == 50
    assert len(payload["outputs"]) == 1
    run_dir = Path("runs/xor")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()


def test_cli_trains_on_data_file(tmp_path, capsys):
    data = tmp_path / "gate.json"
    data.write_text(
        json.dumps(
            [
                {"input": [0, 0], "expectedOutput": [1]},
                {"input": [1, 1], "expectedOutput": [0]},
            ]
        )
    )
    main(
        [
            "--data",
            str(data),
            "--layers",
            "2,2,1",
            "--epochs",
            "20",
            "--run-dir",
            str(tmp_path / "run"),
            "--dump-config",
            str(tmp_path / "resolved.json"),
        ]
    )
    payload = _last_json(capsys.readouterr().out)
    assert payload["epochs"] == 20
    resolved = json.loads((tmp_path / "resolved.json").read_text())
    assert resolved["data"]["name"] == "file"
    assert "inputs" not in resolved["train"]


def test_cli_rejects_bad_learn_rate(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--learn-rate", "2", "--run-dir", str(tmp_path / "run")])
    assert excinfo.value.code == 2
    assert "learn_rate" in capsys.readouterr().err


def test_cli_lists_presets_and_datasets(capsys):
    with pytest.raises(SystemExit):
        main(["--list-presets"])
    presets = capsys.readouterr().out.split()
    assert "xor" in presets
    assert "nand-tanh" in presets

    with pytest.raises(SystemExit):
        main(["--list-datasets"])
    assert "nand" in capsys.readouterr().out.split()


@pytest.mark.parametrize(
    "name, text",
    [
        ("absent.json", None),
        ("broken.yaml", "- input: [0, 0\n  expectedOutput: [0]\n"),
    ],
)
def test_cli_reports_unreadable_data(tmp_path, capsys, name, text):
    data = tmp_path / name
    if text is not None:
        data.write_text(text)
    with pytest.raises(SystemExit) as excinfo:
        main(["--data", str(data), "--run-dir", str(tmp_path / "run")])
    assert excinfo.value.code == 2
    assert capsys.readouterr().err.startswith("error:")
    assert not (tmp_path / "run").exists()


def test_cli_rejects_non_numeric_target_loss(tmp_path, capsys):
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"train": {"target_loss": "low"}}))
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(override), "--run-dir", str(tmp_path / "run")])
    assert excinfo.value.code == 2
    assert "target_loss" in capsys.readouterr().err
