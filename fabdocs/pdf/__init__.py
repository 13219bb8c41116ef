"""Layout primitives: page geometry, cursor, chrome and the table engine."""
