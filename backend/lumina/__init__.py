"""Lumina campus backend: agent swarm simulation and dashboard API."""
