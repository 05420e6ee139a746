"""Simulation settings."""
