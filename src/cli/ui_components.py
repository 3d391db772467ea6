"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.catalog import OperationDescriptor


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - `serve` no lo usa: stdout pertenece al protocolo MCP.
    """

    title = Text("dropi-mcp", style="bold cyan")
    subtitle = Text("Órdenes • Guías • Wallet • Cotizaciones", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_catalog_table(descriptors: Iterable[OperationDescriptor]) -> Table:
    """Tabla con el catálogo de operaciones expuestas."""

    table = Table(title="Operaciones")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Requeridos", style="magenta")
    table.add_column("Descripción", style="white")
    for descriptor in descriptors:
        table.add_row(
            descriptor.name,
            ", ".join(descriptor.required) or "-",
            descriptor.description,
        )
    return table


def build_failure_panel(envelope: dict[str, Any]) -> Panel:
    """Panel rojo para un envelope de error."""

    body = Text(str(envelope.get("message", "")), style="bold")
    debug = envelope.get("debug")
    if isinstance(debug, dict):
        body.append("\n")
        for key, value in debug.items():
            body.append(f"\n{key}: ", style="dim")
            body.append(str(value))
    return Panel(body, title=Text("Error", style="bold red"), border_style="red")
