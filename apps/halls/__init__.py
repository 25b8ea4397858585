"""Halls app: bookable venues and their per-date availability."""
