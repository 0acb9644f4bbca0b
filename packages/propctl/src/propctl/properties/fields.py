from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldSpec:
    key: str
    export_name: str
    required: bool = True


ARTIFACT_ID = FieldSpec("artifactID", "ARTIFACT_ID")
VERSION = FieldSpec("version", "VERSION")
GROUP_ID = FieldSpec("groupID", "GROUP_ID")
TEST_ID = FieldSpec("testID", "TEST_ID", required=False)

MULTI_FIELDS: tuple[FieldSpec, ...] = (ARTIFACT_ID, VERSION, GROUP_ID)
SINGLE_FIELDS: tuple[FieldSpec, ...] = (ARTIFACT_ID, VERSION, GROUP_ID, TEST_ID)


def fields_for_mode(mode: str) -> tuple[FieldSpec, ...]:
    if mode == "single":
        return SINGLE_FIELDS
    if mode == "multi":
        return MULTI_FIELDS
    raise ValueError(f"unknown mode: {mode}")
