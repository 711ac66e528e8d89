from __future__ import annotations

from pathlib import Path

import pytest

from remote_inventory.core.config import InventoryConfig
from remote_inventory.core.logger import InventoryLogger


@pytest.fixture(scope="session")
def log_file(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("logs") / "inventory.log"


@pytest.fixture()
def config(tmp_path: Path, log_file: Path) -> InventoryConfig:
    cfg = InventoryConfig(str(tmp_path / "config.ini"))
    cfg.set("logging", "log_file", str(log_file))
    cfg.set("report", "output_dir", str(tmp_path / "reports"))
    return cfg


@pytest.fixture()
def logger(config: InventoryConfig) -> InventoryLogger:
    return InventoryLogger(config)


@pytest.fixture()
def write_config(tmp_path: Path, log_file: Path):
    def _write(extra: str = "") -> Path:
        path = tmp_path / "config.ini"
        path.write_text(
            "[logging]\n"
            f"log_file = {log_file}\n"
            "[report]\n"
            f"output_dir = {tmp_path / 'reports'}\n"
            + extra,
            encoding="utf-8",
        )
        return path

    return _write
