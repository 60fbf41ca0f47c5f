"""HTTP API for payroll calculation."""
