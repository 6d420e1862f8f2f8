"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from waste_reports.common.errors import ConfigError


def _assert_mapping(obj, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_store_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"firestore", "collections"}
    _assert_required_keys(cfg, top_required, "store config")
    _assert_no_unknown_keys(cfg, top_required, "store config", allow_unknown)

    firestore = cfg["firestore"]
    _assert_required_keys(
        firestore,
        {"project_id", "database", "base_url", "page_size", "timeout_seconds", "retry", "rate_per_sec"},
        "firestore",
    )
    _assert_required_keys(firestore["timeout_seconds"], {"connect", "read"}, "firestore.timeout_seconds")
    _assert_required_keys(firestore["retry"], {"max_attempts", "max_wait"}, "firestore.retry")
    _assert_positive_number(firestore["page_size"], "firestore.page_size")
    _assert_positive_number(firestore["rate_per_sec"], "firestore.rate_per_sec")
    _assert_positive_number(firestore["timeout_seconds"]["connect"], "firestore.timeout_seconds.connect")
    _assert_positive_number(firestore["timeout_seconds"]["read"], "firestore.timeout_seconds.read")
    _assert_positive_number(firestore["retry"]["max_attempts"], "firestore.retry.max_attempts")

    _assert_required_keys(cfg["collections"], {"collections", "schedules", "users"}, "collections")
    return cfg


def validate_access_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    required = {"role_field", "admin_role"}
    _assert_required_keys(cfg, required, "access config")
    _assert_no_unknown_keys(cfg, required, "access config", allow_unknown)
    if not cfg["role_field"] or not cfg["admin_role"]:
        raise ConfigError("access.role_field and access.admin_role must be non-empty")
    return cfg


def validate_export_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    required = {"brand_name", "outbox_dir", "print_dir"}
    _assert_required_keys(cfg, required, "export config")
    _assert_no_unknown_keys(cfg, required, "export config", allow_unknown)
    return cfg
