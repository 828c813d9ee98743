"""Routing data model and simulation collaborators."""
