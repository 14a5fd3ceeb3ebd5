"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class DeviceType(StrEnum):
    PRINTER = "Printer"
    CAMERA = "Camera"
    PC = "PC"
    SERVER = "Server"
    ROUTER = "Router"
    SWITCH = "Switch"
    OTHER = "Other"


class DeviceStatus(StrEnum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    MAINTENANCE = "Maintenance"
    MISSING = "Missing"
    RETIRED = "Retired"


class ConfidenceTier(IntEnum):
    """Ordinal trust level of a duplicate signal (higher is stronger)."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class MatchRule(StrEnum):
    """Identity signals checked by duplicate detection, in priority order."""

    HOSTNAME = "hostname"
    SERIAL_NUMBER = "serial_number"
    ASSET_TAG = "asset_tag"
    MAC_ADDRESS = "mac_address"
    IP_ADDRESS = "ip_address"


class AuditAction(StrEnum):
    CREATE = "CREATE"
    UPDATE_STARTED = "UPDATE_STARTED"
    UPDATE_COMPLETED = "UPDATE_COMPLETED"
    DELETE = "DELETE"
    MERGE = "MERGE"
    RESTORE = "RESTORE"


class ResolutionAction(StrEnum):
    CANCEL = "cancel"
    CREATE_NEW = "create_new"
    UPDATE_EXISTING = "update_existing"
    MERGE_DATA = "merge_data"


class ActionTaken(StrEnum):
    """Outcome reported by resolution and the add-device entry point."""

    ADDED = "added"
    UPDATED = "updated"
    MERGED = "merged"
    CANCELLED = "cancelled"
    FAILED = "failed"
    AWAITING_RESOLUTION = "awaiting_resolution"


class ErrorCode(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    MISSING_TARGET = "missing_target"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    STALE_DETECTION = "stale_detection"


class MergeCategory(StrEnum):
    """Symbolic selectors that expand to a fixed list of merge fields."""

    ALL_HARDWARE = "all_hardware"
    ALL_NETWORK = "all_network"
    ALL_OS = "all_os"
    ALL_STORAGE = "all_storage"
    ALL_INTERFACES = "all_interfaces"


class MergeField(StrEnum):
    """Device attributes a caller may select for a field-level merge."""

    HOSTNAME = "hostname"
    SERIAL_NUMBER = "serial_number"
    ASSET_TAG = "asset_tag"
    DEVICE_TYPE = "device_type"
    STATUS = "status"
    EQUIPMENT_GROUP = "equipment_group"

    DOMAIN_NAME = "domain_name"
    WORKGROUP = "workgroup"
    IS_DOMAIN_JOINED = "is_domain_joined"

    MANUFACTURER = "manufacturer"
    MODEL = "model"
    CPU_INFO = "cpu_info"
    TOTAL_RAM_GB = "total_ram_gb"
    RAM_TYPE = "ram_type"
    RAM_SPEED = "ram_speed"
    RAM_MANUFACTURER = "ram_manufacturer"
    BIOS_VERSION = "bios_version"
    STORAGE_INFO = "storage_info"

    OS_NAME = "os_name"
    OS_VERSION = "os_version"
    OS_ARCHITECTURE = "os_architecture"
    OS_INSTALL_DATE = "os_install_date"

    DRIVE1_NAME = "drive1_name"
    DRIVE1_CAPACITY = "drive1_capacity"
    DRIVE1_TYPE = "drive1_type"
    DRIVE1_MODEL = "drive1_model"
    DRIVE2_NAME = "drive2_name"
    DRIVE2_CAPACITY = "drive2_capacity"
    DRIVE2_TYPE = "drive2_type"
    DRIVE2_MODEL = "drive2_model"
    DRIVE3_NAME = "drive3_name"
    DRIVE3_CAPACITY = "drive3_capacity"
    DRIVE3_TYPE = "drive3_type"
    DRIVE3_MODEL = "drive3_model"
    DRIVE4_NAME = "drive4_name"
    DRIVE4_CAPACITY = "drive4_capacity"
    DRIVE4_TYPE = "drive4_type"
    DRIVE4_MODEL = "drive4_model"

    PRIMARY_NIC_NAME = "primary_nic_name"
    PRIMARY_IP = "primary_ip"
    PRIMARY_MAC = "primary_mac"
    PRIMARY_SUBNET = "primary_subnet"
    PRIMARY_DNS = "primary_dns"
    SECONDARY_DNS = "secondary_dns"
    NIC2_NAME = "nic2_name"
    NIC2_IP = "nic2_ip"
    NIC2_MAC = "nic2_mac"
    NIC2_SUBNET = "nic2_subnet"
    NIC3_NAME = "nic3_name"
    NIC3_IP = "nic3_ip"
    NIC3_MAC = "nic3_mac"
    NIC3_SUBNET = "nic3_subnet"
    NIC4_NAME = "nic4_name"
    NIC4_IP = "nic4_ip"
    NIC4_MAC = "nic4_mac"
    NIC4_SUBNET = "nic4_subnet"

    WEB_INTERFACE_URL = "web_interface_url"

    AREA = "area"
    ZONE = "zone"
    LINE = "line"
    PITCH = "pitch"
    FLOOR = "floor"
    PILLAR = "pillar"

    ADDITIONAL_NOTES = "additional_notes"
