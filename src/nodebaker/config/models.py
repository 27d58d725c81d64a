# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/nodebaker/config/models.py

from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, model_validator


class BakerSettings(BaseModel):
    """Where the baker reads its catalogs, overrides and VHD inventories from."""

    # packaged catalogs are used when unset
    legacy_catalog_file: Optional[Path] = None
    sig_catalog_file: Optional[Path] = None

    # no version overrides when unset
    toggles_file: Optional[Path] = None

    # VHD build outputs; both or neither
    vhd_manifest_file: Optional[Path] = None
    vhd_components_file: Optional[Path] = None

    templates_dir: Optional[Path] = None

    # handlers on the "nodebaker" logger; the host's logging is left alone when unset
    log_dir: Optional[Path] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None
    # mirror resolution events into the log
    log_events: bool = False

    @model_validator(mode="after")
    def _vhd_files_come_in_pairs(self) -> "BakerSettings":
        if (self.vhd_manifest_file is None) != (self.vhd_components_file is None):
            raise ValueError("vhd_manifest_file and vhd_components_file must be set together")
        return self
