"""Command line interface for presupuestos."""
