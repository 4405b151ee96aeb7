"""Attendance Ledger package.

Reconciles attendance records left open past their shift's end: closes them at the
scheduled end, raises a ``late_clockout`` alert and appends an HMAC-signed entry to the
attendance ledger. Organized by feature modules (shifts, timesheets, ledger, alerts,
reconciliation) with repository Protocols and MySQL adapters.
"""
