"""Bookings app package.

Owns the occupancy lifecycle: booking requests and their approval,
rejection, cancellation and deletion, plus the leave requests a tenant
raises to end an approved booking early. Every transition runs as a
command handler inside a unit of work and keeps the property's
availability flag reconciled.
"""
