"""Rich renderables for command output."""

from rich.panel import Panel
from rich.table import Table as RichTable
from rich.text import Text

from aks_manager.models.table import Table


def render_table(table: Table, title: str | None = None) -> RichTable:
    """Render an extracted table; missing cells are left blank."""
    rich_table = RichTable(title=title)
    for index, header in enumerate(table.headers):
        rich_table.add_column(header, style="cyan" if index == 0 else None)

    for row in table.rows:
        rich_table.add_row(*(row.get(header, "") for header in table.headers))

    return rich_table


def render_plain(text: str, title: str | None = None) -> Panel:
    """Render unstructured command output in a panel."""
    return Panel(Text(text.rstrip("\n")), title=title, expand=False)
