"""Headless search: a client-side state engine and controllers for a remote search backend."""
