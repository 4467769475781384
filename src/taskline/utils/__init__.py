"""Utility helpers for Taskline."""
