"""Infrastructure - configuration, logging setup and the REST transport."""
