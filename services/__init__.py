# Application services
from .schedule_service import ActionResult, ScheduleService
from .transfer import export_filename, export_json, import_json, read_import, write_export

__all__ = [
    "ActionResult",
    "ScheduleService",
    "export_filename",
    "export_json",
    "import_json",
    "read_import",
    "write_export",
]
