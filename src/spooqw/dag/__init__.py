"""Step dependency graph resolution."""

from spooqw.dag.resolver import CycleError, Edge, StepGraph, StepNode

__all__ = ["CycleError", "Edge", "StepGraph", "StepNode"]
