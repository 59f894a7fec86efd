"""Textual dashboard for tootboard."""

from .app import TootboardApp, run_dashboard

__all__ = ["TootboardApp", "run_dashboard"]
