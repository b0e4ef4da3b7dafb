from __future__ import annotations

__all__ = ["IDs", "frame_item_id", "signal_row_id", "pager_id"]


class IDs:
    class Store:
        DATA_SELECTION = "data-selection"
        SELECTION = "selection-state"

    class Control:
        # Location / source switching
        URL = "url"
        URL_REDIRECT = "url-redirect"
        SOURCE_SELECT = "data-source"
        SOURCE_NOTE = "data-source-note"
        DATASET_SOURCE_LABEL = "dataset-source-label"
        DATASET_LIBS_LABEL = "dataset-libs-label"

        # Stats
        STAT_FRAMES = "stat-frames"
        STAT_SIGNALS = "stat-signals"
        STAT_VALUES = "stat-values"
        STAT_VAPI = "stat-vapi"

        # Load state
        LOAD_ERROR = "load-error"
        MAIN_CONTENT = "main-content"

        # Frame filters
        GLOBAL_SEARCH = "global-search"
        BUS_FILTER = "bus-filter"
        MODULE_FILTER = "module-filter"
        SORT_MODE = "sort-mode"
        ENUMERATED_ONLY = "enumerated-only"
        FRAME_RESULTS = "frame-results"
        FRAME_LIST = "frame-list"
        EXPORT_BTN = "export-frames-btn"
        EXPORT_DOWNLOAD = "export-frames-download"

        # Frame detail
        FRAME_TITLE = "frame-title"
        FRAME_SUBTITLE = "frame-subtitle"
        FRAME_META = "frame-meta"
        SIGNAL_SEARCH = "signal-search"
        SIGNAL_PAGE_SIZE = "signal-page-size"
        SIGNAL_PAGINATION = "signal-pagination"
        SIGNAL_TABLE_WRAP = "signal-table-wrap"

    class Pattern:
        # pattern-matching "type" strings
        FRAME_ITEM = "frame-item"
        SIGNAL_ROW = "signal-row"
        PAGER = "signal-pager"


def frame_item_id(frame_token: str, occurrence: int = 0) -> dict:
    # "n" keeps ids unique when several frames share one key
    return {"type": IDs.Pattern.FRAME_ITEM, "index": frame_token, "n": occurrence}


def signal_row_id(signal_key: str, occurrence: int = 0) -> dict:
    return {"type": IDs.Pattern.SIGNAL_ROW, "index": signal_key, "n": occurrence}


def pager_id(action: str) -> dict:
    return {"type": IDs.Pattern.PAGER, "index": action}
