"""Parsing of ``go list -json`` package description records."""

from typing import Any

from testrunner.core.errors import PackageDescriptionError
from testrunner.core.models import ModuleDescriptor, PackageMetadata


def _string(payload: dict[str, Any], key: str, required: bool = False) -> str:
    value = payload.get(key)
    if value is None:
        if required:
            raise PackageDescriptionError(f"missing required field {key!r}")
        return ""
    if not isinstance(value, str):
        raise PackageDescriptionError(
            f"field {key!r} must be a string, got {type(value).__name__}"
        )
    if required and not value:
        raise PackageDescriptionError(f"field {key!r} must not be empty")
    return value


def _string_list(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PackageDescriptionError(f"field {key!r} must be a list of strings")
    return tuple(value)


def parse_module(payload: Any) -> ModuleDescriptor | None:
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise PackageDescriptionError(
            f"field 'Module' must be an object, got {type(payload).__name__}"
        )
    main = payload.get("Main", False)
    if not isinstance(main, bool):
        raise PackageDescriptionError("field 'Module.Main' must be a boolean")
    return ModuleDescriptor(
        path=_string(payload, "Path"),
        directory=_string(payload, "Dir"),
        main=main,
    )


def parse_package_description(payload: Any) -> PackageMetadata:
    """Build PackageMetadata from one decoded ``go list -json`` object.

    Raises:
        PackageDescriptionError: If the record is not an object, lacks an
            import path or directory, or has fields of the wrong type.
    """
    if not isinstance(payload, dict):
        raise PackageDescriptionError(
            f"package description must be a JSON object, got {type(payload).__name__}"
        )
    return PackageMetadata(
        directory=_string(payload, "Dir", required=True),
        import_path=_string(payload, "ImportPath", required=True),
        name=_string(payload, "Name"),
        source_files=_string_list(payload, "GoFiles"),
        test_files=_string_list(payload, "TestGoFiles"),
        external_test_files=_string_list(payload, "XTestGoFiles"),
        module=parse_module(payload.get("Module")),
    )
