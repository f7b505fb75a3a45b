"""Core domain package: findings, locator, session state and schema gate."""
