"""Command line interface for perceptron runs."""
