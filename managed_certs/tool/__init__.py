"""Command line tool for running and inspecting the managed-certs controller."""
