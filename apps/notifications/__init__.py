"""Notifications app package.

Keeps the durable history of messages sent to users and performs
best-effort push delivery to their registered devices.
"""
