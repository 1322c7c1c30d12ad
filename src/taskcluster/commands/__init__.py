"""Command-line commands for Task Cluster."""
