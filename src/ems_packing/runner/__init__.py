"""Benchmark runner and command-line entry point."""
