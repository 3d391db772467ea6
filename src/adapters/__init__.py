"""Adaptadores de I/O: cliente HTTP, API de Dropi y servidor MCP."""
