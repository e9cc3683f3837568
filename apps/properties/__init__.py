"""Properties app package.

Holds the property model and keeps its availability flag in line with
the bookings made against it.
"""
