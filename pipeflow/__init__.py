"""Pipe flow: friction factors and the energy equation for pipes in series."""
