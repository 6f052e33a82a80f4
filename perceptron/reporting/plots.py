"""Headless-safe plotting: loss curves and network topology drawings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

MAX_LINE_WIDTH = 5.0


@dataclass(frozen=True)
class Node:
    layer: int
    index: int  # -1 for the bias node of a layer
    x: float
    y: float


@dataclass(frozen=True)
class Edge:
    source: Node
    target: Node
    value: float

    @property
    def color(self) -> str:
        return "blue" if self.value > 0 else "red"

    @property
    def width(self) -> float:
        return MAX_LINE_WIDTH * min(abs(self.value), 1.0)


def network_layout(
    weights: Sequence[np.ndarray], biases: Sequence[np.ndarray]
) -> Tuple[List[Node], List[Edge]]:
    """Place one node per neuron plus a bias node on every non-output column.

    Columns sit at ``x = 0, 1, ...``; each column is centred on ``y = 0`` with
    the bias node on top. Every weight and every bias becomes one edge.
    """

    sizes = [int(w.shape[0]) for w in weights] + [int(weights[-1].shape[1])]
    columns: List[List[Node]] = []
    for layer, size in enumerate(sizes):
        has_bias = layer < len(sizes) - 1
        count = size + int(has_bias)
        top = (count - 1) / 2.0
        column = []
        for slot in range(count):
            index = slot - 1 if has_bias else slot
            column.append(Node(layer=layer, index=index, x=float(layer), y=top - slot))
        columns.append(column)

    edges: List[Edge] = []
    for layer, (W, b) in enumerate(zip(weights, biases)):
        source_col = columns[layer]
        targets = [node for node in columns[layer + 1] if node.index >= 0]
        bias_node = source_col[0]
        for target in targets:
            edges.append(Edge(bias_node, target, float(b[target.index])))
        for source in source_col[1:]:
            for target in targets:
                edges.append(Edge(source, target, float(W[source.index, target.index])))
    nodes = [node for column in columns for node in column]
    return nodes, edges


def draw_network(network, path: str | Path) -> str:
    """Render ``network``'s parameters and cached input/output to ``path``."""

    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt  # imported lazily for headless safety

    nodes, edges = network_layout(network.weights, network.biases)
    inputs = network.inputs
    outputs = network.outputs
    last_layer = len(network.layer_sizes) - 1

    fig, ax = plt.subplots(figsize=(2.5 * (last_layer + 1), 1.2 * max(network.layer_sizes) + 2))
    for edge in edges:
        ax.plot(
            [edge.source.x, edge.target.x],
            [edge.source.y, edge.target.y],
            color=edge.color,
            linewidth=edge.width,
            zorder=1,
        )
    for node in nodes:
        if node.index < 0:
            ax.scatter(node.x, node.y, s=600, marker="s", c="white", edgecolors="black", zorder=2)
            ax.annotate("bias: 1", (node.x, node.y), ha="center", va="center", fontsize=7, zorder=3)
            continue
        ax.scatter(node.x, node.y, s=600, c="white", edgecolors="black", zorder=2)
        if node.layer == 0:
            label, offset, align = f"x{node.index}: {inputs[node.index]:.2f}", -0.12, "right"
        elif node.layer == last_layer:
            label, offset, align = f"y{node.index}: {outputs[node.index]:.4f}", 0.12, "left"
        else:
            continue
        ax.annotate(label, (node.x + offset, node.y), ha=align, va="center", fontsize=8)
    ax.set_axis_off()
    ax.set_title(f"Network {network.layer_sizes}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)
    return str(path)


class PlotAdapter:
    """Collect per-epoch loss and optionally emit matplotlib figures."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_epoch(self, epoch: int, metrics):
        if not self.enable_plots:
            return
        self._history.append((epoch, float(metrics.get("loss", 0.0))))

    def close(self, network=None) -> None:
        if not self.enable_plots:
            return
        if network is not None:
            draw_network(network, self.run_dir / "network.png")
        if not self._history:
            return
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        epochs, losses = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(epochs, losses)
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Squared error")
        ax.set_title("Training Curve")
        fig.savefig(self.run_dir / "loss.png")
        plt.close(fig)

    __call__ = on_epoch


__all__ = ["Edge", "Node", "PlotAdapter", "draw_network", "network_layout"]
