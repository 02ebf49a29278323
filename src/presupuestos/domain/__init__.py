"""Domain layer for presupuestos application.

Services are imported from their modules directly (e.g.
``presupuestos.domain.quote_import``) so that importing entities from the
database layer does not pull in the services.
"""
