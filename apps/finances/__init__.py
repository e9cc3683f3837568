"""Finances app package.

Holds the monthly rent ledger: one transaction per booking and calendar
month with expected and paid totals. Payments here are status
transitions applied by the tenant; the periodic due-reminder sweep also
lives in this app.
"""
