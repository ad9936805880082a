"""Inequality Parsing & Feasibility Engine.

Turns linear-inequality text into canonical constraints and decides
whether a system of them has a common solution: a cheap pairwise
contradiction check first, then a phase-one simplex.

This module is DETERMINISTIC apart from hue/id allocation, and does no I/O.
"""
