"""Command line tool for running a single hub reconcile."""
