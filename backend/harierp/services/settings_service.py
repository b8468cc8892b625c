# Overview: Application settings (module visibility).

from __future__ import annotations

import logging

from ..extensions import db
from ..models import Setting
from ..permissions import MODULES
from ..validation import ValidationError

logger = logging.getLogger(__name__)

MODULE_VISIBILITY_KEY = "modules.enabled"


def get_module_settings() -> dict[str, bool]:
    """Every known module with its enabled flag; modules default to enabled."""
    row = db.session.query(Setting).filter_by(key=MODULE_VISIBILITY_KEY).first()
    stored = row.value if row is not None and isinstance(row.value, dict) else {}
    return {module: bool(stored.get(module, True)) for module in MODULES}


def update_module_settings(patch, *, actor=None) -> dict[str, bool]:
    """
    Merge {module: bool} into the stored map.

    The Admin module cannot be disabled; that would lock administrators out.
    """
    if not isinstance(patch, dict) or not patch:
        raise ValidationError("modules must be a non-empty object")
    for module, enabled in patch.items():
        if module not in MODULES:
            raise ValidationError(f"Unknown module: {module}")
        if not isinstance(enabled, bool):
            raise ValidationError(f"{module} must be true or false")
    if patch.get("Admin") is False:
        raise ValidationError("The Admin module cannot be disabled")

    current = get_module_settings()
    current.update(patch)

    row = db.session.query(Setting).filter_by(key=MODULE_VISIBILITY_KEY).first()
    if row is None:
        row = Setting(key=MODULE_VISIBILITY_KEY)
        db.session.add(row)
    row.value = current
    row.updated_by_user_id = actor.id if actor is not None else None
    db.session.commit()

    logger.info("Module visibility updated: %s", patch)
    return current
