"""Shared utilities for Task Cluster."""
