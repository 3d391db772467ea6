"""Core de dropi-mcp: configuración, dominio y servicios (sesión, dispatcher)."""
