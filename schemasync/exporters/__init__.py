"""Schema exporters.

Pure renderers of a SchemaDescriptor into alternate formats. They run the
same validation gate as the migration engine and perform no I/O.
"""

from schemasync.exporters.rules import export_rules
from schemasync.exporters.sql import export_sql
from schemasync.exporters.text import export_text

EXPORTERS = {
    "sql": export_sql,
    "rules": export_rules,
    "text": export_text,
}

__all__ = ["EXPORTERS", "export_rules", "export_sql", "export_text"]
