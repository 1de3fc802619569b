# Overview: Service-layer operations for drivers.

from __future__ import annotations

from ..extensions import db
from ..models import Driver
from .repository import drivers_repo


def list_drivers() -> list[Driver]:
    return drivers_repo().list()


def get_driver(driver_id: str) -> Driver:
    return drivers_repo().require(driver_id)


def create_driver(*, patch: dict) -> Driver:
    driver = drivers_repo().create(patch)
    db.session.commit()
    return driver


def update_driver(*, driver_id: str, patch: dict) -> Driver:
    driver = drivers_repo().update(driver_id, patch)
    db.session.commit()
    return driver


def delete_driver(*, driver_id: str) -> None:
    # Transactions keep the driver_id; history shows the driver as missing.
    drivers_repo().delete(driver_id)
    db.session.commit()
