"""Markov chain models of energy-aware load balancing between two P-state queues."""

__version__ = "0.1.0"