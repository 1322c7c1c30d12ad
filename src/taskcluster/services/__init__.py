"""Service layer for Task Cluster."""
