"""
Order sheet sync library.

Building blocks for reconciling community order spreadsheets into a store:
- Tokenizing sheet CSV exports and locating the header row
- Static column layouts per sheet schema variant
- Field normalization into a canonical vocabulary
- Natural-key matching and create/update merging
- Orchestrating a sync over a list of configured sources

Public API:
- io.parse_csv, io.parse_csv_numbered, io.find_header_row
- columns.ColumnMap, columns.get_schema_variant
- normalize.clean_value, normalize.parse_number, normalize.normalize_country, ...
- transform.NormalizedOrderRecord, transform.transform_row, transform.transform_rows
- sheets_client.SheetsConfig, sheets_client.fetch_csv
- merge.SyncResult, merge.merge_record, merge.sync_records
- sync.SourceConfig, sync.AggregateSyncResult, sync.run_sync, sync.sources_for_mode
"""

from . import io, columns, normalize, vehicles, transform, sheets_client, merge, sync  # re-export modules

__all__ = [
    "io",
    "columns",
    "normalize",
    "vehicles",
    "transform",
    "sheets_client",
    "merge",
    "sync",
]
