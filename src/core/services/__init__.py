"""Servicios del Core.

Por qué:
- Orquestan dominio + adaptadores: sesión (login perezoso) y dispatcher.
"""
