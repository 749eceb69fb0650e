"""Domain schemas and rules (entity shapes, report status progression)."""
