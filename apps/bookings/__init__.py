"""Bookings app package.

This app holds the booking lifecycle: the state machine, the conflict
check that keeps one active booking per hall and date, the triggers that
keep hall availability in step with booking status, and the scheduled
expiry and reminder sweeps.
"""
