"""Orchestration services shared by the commands."""
