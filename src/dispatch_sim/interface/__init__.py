"""Command-line interface for Dispatch Simulator."""
