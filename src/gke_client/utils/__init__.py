"""Utility helpers for the GKE cluster tooling."""
