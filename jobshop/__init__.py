"""Greedy job-shop scheduling heuristics: instance parsing, sequential,
multi-threaded and experimental schedulers, and schedule output."""

__version__ = "0.1.0"