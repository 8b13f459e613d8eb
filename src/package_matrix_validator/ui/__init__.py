"""User interface components.

Key modules:
    - reporting: Status lines and final summary rendering
    - task_logs: Per-task log artifact persistence
"""

from package_matrix_validator.ui.reporting import (
    format_status_line,
    print_status_line,
    render_summary,
    render_catalog,
)
from package_matrix_validator.ui.task_logs import (
    clear_task_logs,
    render_task_log,
    task_log_path,
    write_task_log,
)

__all__ = [
    "format_status_line",
    "print_status_line",
    "render_summary",
    "render_catalog",
    "clear_task_logs",
    "render_task_log",
    "task_log_path",
    "write_task_log",
]
