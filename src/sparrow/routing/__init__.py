"""Routing — per-method route table with ``:name`` parameter matching.

Routes are registered during setup and only read while serving.
"""
