"""Unit tests for rich rendering of command output."""

import io

from rich.console import Console

from aks_manager.models.table import Table
from aks_manager.render import render_plain, render_table


def capture(renderable) -> str:
    console = Console(file=io.StringIO(), width=120, record=True)
    console.print(renderable)
    return console.export_text()


def test_render_table_blank_for_absent_cells():
    table = Table(
        headers=["Name", "Status"], rows=[{"Name": "a", "Status": "Running"}, {"Name": "b"}]
    )

    rendered = render_table(table, title="pods")

    assert rendered.row_count == 2
    assert [column.header for column in rendered.columns] == ["Name", "Status"]
    text = capture(rendered)
    assert "Running" in text
    assert "pods" in text


def test_render_plain():
    text = capture(render_plain("NAME     STATUS\nnode-1   Ready\n", title="kubectl get node"))

    assert "node-1   Ready" in text
    assert "kubectl get node" in text
