"""Alert lifecycle and fan-out.

    new ──► acknowledged ──► resolved | dismissed
     └──────────────────────► resolved | dismissed

resolved and dismissed are terminal.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.models import Alert
from smarthomecloud.schemas import AlertRead, WSMessage
from smarthomecloud.services.ws_manager import ws_manager

logger = logging.getLogger(__name__)

OPEN_STATUSES = ("new", "acknowledged")
TERMINAL_STATUSES = ("resolved", "dismissed")

# action -> (allowed source statuses, target status)
TRANSITIONS: dict[str, tuple[tuple[str, ...], str]] = {
    "acknowledge": (("new",), "acknowledged"),
    "resolve": (OPEN_STATUSES, "resolved"),
    "dismiss": (OPEN_STATUSES, "dismissed"),
}


class AlertTransitionError(Exception):
    def __init__(self, current: str, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} an alert that is {current}")


def next_status(current: str, action: str) -> str:
    """Target status for ``action`` or raise AlertTransitionError."""
    if action not in TRANSITIONS:
        raise ValueError(f"Unknown alert action: {action}")
    sources, target = TRANSITIONS[action]
    if current in TERMINAL_STATUSES or current not in sources:
        raise AlertTransitionError(current, action)
    return target


def alert_event(event: str, alert: Alert) -> dict:
    data = AlertRead.model_validate(alert).model_dump(mode="json")
    return WSMessage(event=event, house_id=alert.house_id, data=data).model_dump()


async def publish(event: str, alert: Alert) -> None:
    await ws_manager.broadcast(alert.house_id, alert_event(event, alert))


async def raise_alert(db: AsyncSession, **fields) -> Alert:
    """Persist a new alert and push it to websocket subscribers."""
    alert = await crud.create_alert(db, **fields)
    logger.info(
        "Alert %s raised: %s/%s for house %s",
        alert.id, alert.type, alert.severity, alert.house_id,
    )
    await publish("alert_created", alert)
    return alert


async def transition_alert(db: AsyncSession, alert: Alert, action: str, user_id: str) -> Alert:
    target = next_status(alert.status, action)
    now = datetime.now(timezone.utc)
    changes: dict = {"status": target}
    if target == "acknowledged":
        changes.update(acknowledged_by=user_id, acknowledged_at=now)
    elif target == "resolved":
        changes.update(resolved_by=user_id, resolved_at=now)

    alert = await crud.update_alert(db, alert, **changes)
    logger.info("Alert %s -> %s by %s", alert.id, target, user_id)
    await publish("alert_updated", alert)
    return alert
