"""Service layer: domain operations over the repositories."""
