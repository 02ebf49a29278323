"""HTTP API for presupuestos."""
