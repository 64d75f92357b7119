"""BulkStatus — Localized Log Messages.

Message keys are shared by every language table. Unknown keys and unknown
languages fall back to the key itself so a log line is never empty.
"""

from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "processing": "Processing",
        "found": "Found resource ID",
        "not_found": "Resource not found",
        "fetch_failed": "Resource lookup failed",
        "status": "Status",
        "resources": "Resources",
        "already_has_status": "Resource already has target status",
        "update_success": "Successfully updated resource",
        "update_failed": "Update failed",
        "retrying": "Retrying in seconds",
        "waiting": "Waiting seconds before continuing",
        "completed": "Processing completed! Success",
        "failed": "Failed",
        "start_message": "Resource status batch update tool",
    },
    "zh_TW": {
        "processing": "開始處理",
        "found": "找到資源ID",
        "not_found": "未找到資源",
        "fetch_failed": "查詢資源失敗",
        "status": "狀態",
        "resources": "資源",
        "already_has_status": "資源已是目標狀態，無需更新",
        "update_success": "成功更新資源",
        "update_failed": "更新失敗",
        "retrying": "將在秒後重試",
        "waiting": "等待秒後繼續",
        "completed": "處理完成! 成功",
        "failed": "失敗",
        "start_message": "資源狀態批量更新工具",
    },
}


def t(key: str, language: str = "en") -> str:
    """Return the localized message for ``key``."""
    return MESSAGES.get(language, {}).get(key, key)
