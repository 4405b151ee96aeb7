"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_MINUTES = 25
DEFAULT_INTERVAL_MINUTES = 5
DEFAULT_PAGE_SIZE = 500
DEFAULT_AUDIT_LIMIT = 500

# Writes the store accepts in one atomic batch.
MAX_BATCH_OPERATIONS = 500
# timesheet update + ledger insert + alert insert
OPERATIONS_PER_CLOSURE = 3

SEVERITY_ESCALATION_FACTOR = 4

LEDGER_SALT_ENV = "LEDGER_HASH_SALT"
RECONCILE_JOB_ID = "auto_clockout_reconciliation"
