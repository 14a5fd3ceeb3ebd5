from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from assetledger.app import create_inventory
from assetledger.config import configure_logging, get_inventory_config
from assetledger.domain.model import Device, ResolutionAction
from assetledger.domain.resolution import ResolutionDecision

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from assetledger.domain.identity import DuplicateDetectionResult
    from assetledger.domain.inventory import DeviceInventory

log = logging.getLogger(__name__)

RESOLUTION_CHOICES = {
    "cancel": ResolutionAction.CANCEL,
    "create-new": ResolutionAction.CREATE_NEW,
    "update-existing": ResolutionAction.UPDATE_EXISTING,
    "merge": ResolutionAction.MERGE_DATA,
}


def _add_device_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--hostname", type=str, required=True, help="Device hostname")
    parser.add_argument("--serial-number", type=str, help="Manufacturer serial number")
    parser.add_argument("--asset-tag", type=str, help="Organisation asset tag")
    parser.add_argument("--mac", type=str, help="Primary NIC MAC address")
    parser.add_argument("--ip", type=str, help="Primary NIC IP address")
    parser.add_argument("--manufacturer", type=str, help="Hardware manufacturer")
    parser.add_argument("--model", type=str, help="Hardware model")
    parser.add_argument(
        "--ram-gb",
        type=float,
        default=0.0,
        help="Installed memory in GB (default: %(default)s)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the device inventory")
    parser.add_argument("--actor", type=str, help="Name recorded as performer in the audit log")
    parser.add_argument("--session-id", type=str, help="Audit session id (defaults to this run)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="List stored devices matching a candidate")
    _add_device_arguments(detect)

    add = subparsers.add_parser("add", help="Add a device, checking for duplicates first")
    _add_device_arguments(add)
    add.add_argument(
        "--device-type",
        type=str,
        help="Device type (defaults to ASSETLEDGER_DEFAULT_DEVICE_TYPE)",
    )
    add.add_argument(
        "--resolution",
        choices=sorted(RESOLUTION_CHOICES),
        help="How to resolve detected duplicates",
    )
    add.add_argument(
        "--target-id",
        type=int,
        help="Stored device to update or merge into",
    )
    add.add_argument(
        "--merge-fields",
        type=str,
        default="",
        help="Comma separated field names or categories such as all_network",
    )
    add.add_argument(
        "--preserve-existing",
        action="store_true",
        help="Only fill fields that are empty on the stored device",
    )
    add.add_argument("--token", type=str, help="Detection token the resolution was decided on")
    add.add_argument("--reason", type=str, help="Reason recorded in the audit log")
    add.add_argument(
        "--skip-duplicate-check",
        action="store_true",
        help="Add without looking for duplicates",
    )

    delete = subparsers.add_parser("delete", help="Archive a device")
    delete.add_argument("--device-id", type=int, required=True, help="Device to archive")
    delete.add_argument("--reason", type=str, help="Reason recorded in the audit log")

    restore = subparsers.add_parser("restore", help="Restore an archived device")
    source = restore.add_mutually_exclusive_group(required=True)
    source.add_argument("--archive-id", type=int, help="Archive entry to restore")
    source.add_argument("--device-id", type=int, help="Restore the latest archive of a device")
    restore.add_argument("--reason", type=str, help="Reason recorded in the audit log")

    history = subparsers.add_parser("history", help="Show audit entries")
    scope = history.add_mutually_exclusive_group(required=True)
    scope.add_argument("--device-id", type=int, help="Entries for one device")
    scope.add_argument("--for-session", type=str, help="Entries for one audit session id")

    purge = subparsers.add_parser("purge-audit", help="Delete audit entries past retention")
    purge.add_argument(
        "--retention-days",
        type=int,
        default=None,
        help="Entries older than this many days are purged (defaults to config)",
    )
    purge.add_argument(
        "--apply",
        action="store_true",
        help="Delete the entries instead of only counting them",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _device_from_args(args: argparse.Namespace) -> Device:
    return Device(
        hostname=args.hostname,
        serial_number=args.serial_number,
        asset_tag=args.asset_tag,
        primary_mac=args.mac,
        primary_ip=args.ip,
        manufacturer=args.manufacturer,
        model=args.model,
        total_ram_gb=args.ram_gb,
    )


def _validate(args: argparse.Namespace) -> None:
    if args.session_id:
        _parse_uuid(args.session_id)
    if args.command == "history" and args.for_session:
        _parse_uuid(args.for_session)
    if args.command != "add" or args.resolution is None:
        return
    action = RESOLUTION_CHOICES[args.resolution]
    needs_target = action in {ResolutionAction.UPDATE_EXISTING, ResolutionAction.MERGE_DATA}
    if needs_target and args.target_id is None:
        raise ValueError(f"--resolution {args.resolution} requires --target-id")
    if action is ResolutionAction.MERGE_DATA and not args.merge_fields.strip():
        raise ValueError("--resolution merge requires --merge-fields")


def _resolution(args: argparse.Namespace, inventory: DeviceInventory) -> ResolutionDecision | None:
    if args.resolution is None:
        return None
    target = inventory.get_device(args.target_id) if args.target_id is not None else None
    fields = tuple(token.strip() for token in args.merge_fields.split(",") if token.strip())
    return ResolutionDecision(
        action=RESOLUTION_CHOICES[args.resolution],
        target_device=target,
        fields_to_merge=fields,
        reason=args.reason,
        preserve_existing=args.preserve_existing,
        detection_token=args.token,
    )


def _log_matches(detection: DuplicateDetectionResult) -> None:
    for match in detection.matches:
        existing = match.existing_device
        log.info(
            "  device %s %s [%s confidence] %s",
            existing.id,
            existing.describe(),
            match.confidence.label,
            match.reason,
        )
    log.info("Detection token: %s", detection.token)


def _run_add(args: argparse.Namespace, inventory: DeviceInventory, session_id: UUID | None) -> None:
    device_type = args.device_type or get_inventory_config().default_device_type
    result = inventory.add_with_duplicate_check(
        _device_from_args(args),
        device_type,
        check_duplicates=not args.skip_duplicate_check,
        resolution=_resolution(args, inventory),
        session_id=session_id,
        actor=args.actor,
    )
    if result.awaiting_resolution and result.detection_result is not None:
        log.warning(result.message)
        _log_matches(result.detection_result)
        return
    if not result.success and result.error is not None:
        raise RuntimeError(result.message)
    log.info(result.message)


def _archive_id(args: argparse.Namespace, inventory: DeviceInventory) -> int:
    if args.archive_id is not None:
        return args.archive_id
    archived = inventory.archive_for_device(args.device_id)
    if archived is None or archived.id is None:
        raise RuntimeError(f"No archive found for device {args.device_id}")
    if archived.is_restored:
        raise RuntimeError(
            f"Device {args.device_id} was already restored as device {archived.restored_device_id}"
        )
    return archived.id


def _run_command(args: argparse.Namespace, inventory: DeviceInventory) -> None:  # noqa: C901
    session_id = _parse_uuid(args.session_id) if args.session_id else None

    if args.command == "detect":
        detection = inventory.detect(_device_from_args(args))
        log.info("Found %s potential duplicate(s)", len(detection.matches))
        _log_matches(detection)
    elif args.command == "add":
        _run_add(args, inventory, session_id)
    elif args.command == "delete":
        result = inventory.delete(
            args.device_id, args.reason, session_id=session_id, actor=args.actor
        )
        if not result:
            raise RuntimeError(result.message)
        log.info("%s (archive id %s)", result.message, result.archive_id)
    elif args.command == "restore":
        result = inventory.restore(
            _archive_id(args, inventory), args.reason, session_id=session_id, actor=args.actor
        )
        if not result:
            raise RuntimeError(result.message)
        log.info("%s as device %s", result.message, result.device_id)
    elif args.command == "history":
        entries = (
            inventory.audit_history(args.device_id)
            if args.device_id is not None
            else inventory.session_entries(_parse_uuid(args.for_session))
        )
        for entry in entries:
            log.info(
                "%s %s device=%s by=%s field=%s old=%s new=%s reason=%s",
                entry.performed_at.isoformat(),
                entry.action,
                entry.device_id,
                entry.performed_by,
                entry.field_name,
                entry.old_value,
                entry.new_value,
                entry.reason,
            )
    elif args.command == "purge-audit":
        retention_days = args.retention_days or get_inventory_config().audit_retention_days
        purge = inventory.purge_audit_log(retention_days=retention_days, dry_run=not args.apply)
        log.info(
            "Audit purge (dry_run=%s): cutoff=%s, matched=%s, deleted=%s",
            purge.dry_run,
            purge.cutoff.isoformat(),
            purge.matched,
            purge.deleted,
        )
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run_command(parsed_args, create_inventory())
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()
