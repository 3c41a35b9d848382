"""Dashboard app: read-only KPIs over assets and inventory."""
