"""Internal document REST API endpoint modules."""
