from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from repositorium.application.services.bundle_service import BundleService
from repositorium.application.services.directory_service import DirectoryLoader
from repositorium.core.config import AppConfig
from repositorium.domain.models.catalog import Catalog


@dataclass(slots=True)
class CLIContext:
    config: AppConfig
    console: Console
    bundle: Path | None = None

    def open_catalog(self) -> Catalog:
        catalog = Catalog()
        if self.bundle is not None:
            BundleService(catalog).load_bundle(self.bundle)
            return catalog
        if not DirectoryLoader.from_config(catalog, self.config).load_directory(self.config.resources_dir):
            self.console.print(f"[yellow]No resource directory at[/yellow] {self.config.resources_dir}")
        return catalog
