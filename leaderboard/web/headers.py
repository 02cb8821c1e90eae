from __future__ import annotations

from leaderboard.core.config import settings


def _application_name() -> str:
    return settings.alert_application_name


def create_alert(message: str, param: str | None) -> dict[str, str]:
    app_name = _application_name()
    headers = {f"X-{app_name}-alert": message}
    if param is not None:
        headers[f"X-{app_name}-params"] = param
    return headers


def create_entity_creation_alert(entity_name: str, param: str) -> dict[str, str]:
    return create_alert(f"{_application_name()}.{entity_name}.created", param)


def create_entity_update_alert(entity_name: str, param: str) -> dict[str, str]:
    return create_alert(f"{_application_name()}.{entity_name}.updated", param)


def create_entity_deletion_alert(entity_name: str, param: str) -> dict[str, str]:
    return create_alert(f"{_application_name()}.{entity_name}.deleted", param)


def create_failure_alert(entity_name: str, error_key: str) -> dict[str, str]:
    """Headers for a rejected request; the human readable message stays in the body."""

    app_name = _application_name()
    return {
        f"X-{app_name}-error": f"error.{error_key}",
        f"X-{app_name}-params": entity_name,
    }


__all__ = [
    "create_alert",
    "create_entity_creation_alert",
    "create_entity_update_alert",
    "create_entity_deletion_alert",
    "create_failure_alert",
]
