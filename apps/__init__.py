"""Domain applications of the tenancy lifecycle service."""
