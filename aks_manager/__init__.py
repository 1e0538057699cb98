"""Inspect and control Azure Kubernetes Service clusters from the command line."""

__version__ = "0.1.0"
