"""Sanitizer backed by the ``DeviceInput`` schema."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from assetledger.domain.errors import ValidationError
from assetledger.domain.model import DeviceType, copy_device

from .schema import DeviceInput, DeviceTypeChoice

if TYPE_CHECKING:
    from assetledger.domain.model import Device

_DEVICE_TYPE: Final[TypeAdapter[DeviceType]] = TypeAdapter(DeviceTypeChoice)


def translate_validation_error(
    exc: PydanticValidationError, *, field: str | None = None
) -> ValidationError:
    """Turn the first pydantic error into the inventory's ``ValidationError``."""

    error = exc.errors()[0]
    location = error["loc"]
    field_name = str(location[0]) if location else field
    cause = (error.get("ctx") or {}).get("error")
    if cause is not None:
        message = str(cause)
    else:
        message = f"Invalid {field_name or 'value'}: {error['msg']}"
    return ValidationError(message, field=field_name)


class DefaultSanitizer:
    """Whitelist sanitizer for device records.

    Returns a sanitized copy and leaves the caller's device untouched.
    """

    def sanitize(self, device: Device) -> Device:
        try:
            validated = DeviceInput.model_validate(device)
        except PydanticValidationError as exc:
            raise translate_validation_error(exc) from exc

        sanitized = copy_device(device)
        for name, value in validated.model_dump().items():
            setattr(sanitized, name, value)
        sanitized.hostname = sanitized.hostname or ""
        return sanitized

    def sanitize_device_type(self, value: str | DeviceType | None) -> DeviceType:
        try:
            return _DEVICE_TYPE.validate_python(value)
        except PydanticValidationError as exc:
            raise translate_validation_error(exc, field="device_type") from exc
