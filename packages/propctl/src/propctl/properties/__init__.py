from __future__ import annotations

from .changes import PROPERTIES_SUFFIX, NoPropertiesFileChanged, detect_changed_files
from .fields import FieldSpec, fields_for_mode
from .record import MissingRequiredField, PropertiesFileNotFound, PropertyRecord, extract_record, validate_record

__all__ = [
    "PROPERTIES_SUFFIX",
    "FieldSpec",
    "MissingRequiredField",
    "NoPropertiesFileChanged",
    "PropertiesFileNotFound",
    "PropertyRecord",
    "detect_changed_files",
    "extract_record",
    "fields_for_mode",
    "validate_record",
]
