"""Turn JSON command output into table rows via path queries."""

import json
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from aks_manager.exceptions import ParseError
from aks_manager.jsonpath import PathSyntaxError, compile_path
from aks_manager.logging_config import get_logger
from aks_manager.models.table import ColumnSpec, Table
from aks_manager.result import Result

logger = get_logger(__name__)


def stringify(value: Any) -> str:
    """Render a cell value.

    Strings are used as-is, ``None`` becomes an empty cell, and everything
    else (numbers, booleans, lists, objects) is JSON-encoded.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError("Failed to parse command output as JSON", str(e)) from e


def _evaluate(document: Any, path: str) -> list[Any]:
    try:
        return compile_path(path).find(document)
    except PathSyntaxError as e:
        raise ParseError(f"Invalid path expression {path}", e.format_message()) from e


def extract_column(text: str, path: str) -> Result[list]:
    """
    Parse ``text`` as JSON and return every value matched by ``path``.

    Args:
        text: Raw command output
        path: Path expression such as ``$.items[*].metadata.name``

    Returns:
        Result with the matched values in document order, or ParseError
    """
    try:
        return Result.ok(_evaluate(_parse(text), path))
    except ParseError as e:
        logger.debug(f"Column extraction failed for {path}: {e.message}")
        return Result.fail(e)


def apply_modifier(values: Sequence[Any], modifier: Callable[[Any], str] | None) -> list[str]:
    """Map each value through ``modifier``, or ``stringify`` when there is none."""
    transform = modifier or stringify
    return [transform(value) for value in values]


def build_table(column_specs: Sequence[ColumnSpec], text: str) -> Result[Table]:
    """
    Build a table with one column per spec.

    The number of rows is the number of values in the first column. A later
    column with fewer values leaves its cell out of the trailing rows, and
    values beyond the first column's length are dropped.

    Args:
        column_specs: Columns in display order
        text: Raw JSON command output

    Returns:
        Result with the table, or ParseError
    """
    try:
        document = _parse(text)
        columns = [
            apply_modifier(_evaluate(document, spec.path), spec.modifier)
            for spec in column_specs
        ]
    except ParseError as e:
        return Result.fail(e)

    row_count = len(columns[0]) if columns else 0
    rows = []
    for row in range(row_count):
        cells = {}
        for spec, column in zip(column_specs, columns):
            if row < len(column):
                cells[spec.name] = column[row]
        rows.append(cells)

    headers = [spec.name for spec in column_specs]
    logger.debug(f"Built table with {len(headers)} columns and {len(rows)} rows")
    return Result.ok(Table(headers=headers, rows=rows))


# Modifiers for kubectl pod output. Each receives whatever the column path
# selected for one pod.


def _as_list(value: Any) -> list:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


def ready_count(statuses: Any) -> str:
    """Count ready containers: ``"<ready>/<total>"``."""
    statuses = _as_list(statuses)
    ready = sum(1 for status in statuses if isinstance(status, dict) and status.get("ready"))
    return f"{ready}/{len(statuses)}"


def container_state(statuses: Any) -> str:
    """Report ``"Running"`` unless a non-running container is waiting.

    When several containers are waiting the last reason wins.
    """
    state = "Running"
    for status in _as_list(statuses):
        if not isinstance(status, dict):
            continue
        current = status.get("state") or {}
        if "running" in current:
            continue
        reason = (current.get("waiting") or {}).get("reason")
        if reason:
            state = reason
    return state


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def age(status: Any, now: datetime | None = None) -> str:
    """
    Time since the container started, e.g. ``"2 days"`` or ``"1 hour"``.

    Uses ``state.running.startedAt`` and reports the largest whole unit
    among days, hours and minutes. Returns ``"0d"`` when the timestamp is
    missing or less than a minute has passed.

    Args:
        status: A container status object
        now: Reference time, defaults to the current UTC time. A naive
            value is taken as UTC
    """
    started_at = None
    if isinstance(status, dict):
        running = ((status.get("state") or {}).get("running")) or {}
        started_at = _parse_timestamp(running.get("startedAt"))

    if started_at is None:
        return "0d"

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    elapsed = int((now - started_at).total_seconds())
    if elapsed < 60:
        return "0d"

    days, remainder = divmod(elapsed, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes = remainder // 60

    if days >= 1:
        return _plural(days, "day")
    if hours >= 1:
        return _plural(hours, "hour")
    return _plural(minutes, "minute")


# Pod-level modifiers. The pods table selects whole items so that a pod
# without container statuses (e.g. Pending) still yields a value and the
# columns stay aligned row for row.


def _container_statuses(pod: Any) -> list:
    if not isinstance(pod, dict):
        return []
    return _as_list((pod.get("status") or {}).get("containerStatuses"))


def pod_ready(pod: Any) -> str:
    return ready_count(_container_statuses(pod))


def pod_status(pod: Any) -> str:
    """Container state of a pod, falling back to its phase when nothing has started."""
    statuses = _container_statuses(pod)
    if not statuses and isinstance(pod, dict):
        phase = (pod.get("status") or {}).get("phase")
        if phase:
            return phase
    return container_state(statuses)


def pod_restarts(pod: Any) -> str:
    statuses = _container_statuses(pod)
    if not statuses or not isinstance(statuses[0], dict):
        return "0"
    return stringify(statuses[0].get("restartCount", 0))


def pod_age(pod: Any, now: datetime | None = None) -> str:
    statuses = _container_statuses(pod)
    return age(statuses[0] if statuses else None, now=now)
