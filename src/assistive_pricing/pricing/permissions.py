"""Who may change pricing-relevant labels."""

from __future__ import annotations

import logging
from collections.abc import Callable

import requests
from github import GithubException

from assistive_pricing.pricing.models import BOT_ACTOR_TYPE
from assistive_pricing.pricing.payload import Sender
from assistive_pricing.pricing.plugin_config import PricingConfig

logger = logging.getLogger(__name__)

WRITE_PERMISSIONS: frozenset[str] = frozenset({"admin", "maintain", "write"})

PermissionLookup = Callable[[str], str]


def has_label_access(
    sender: Sender, config: PricingConfig, permission_lookup: PermissionLookup
) -> bool:
    if config.public_access_control.set_label:
        return True

    if sender.type == BOT_ACTOR_TYPE:
        return True

    if not sender.login:
        logger.warning("Label change without a sender; denying")
        return False

    try:
        permission = permission_lookup(sender.login)
    except (requests.RequestException, GithubException):
        logger.exception(
            "Failed to look up collaborator permission", extra={"sender": sender.login}
        )
        return False

    allowed = permission.lower() in WRITE_PERMISSIONS
    if not allowed:
        logger.info(
            "Sender lacks permission to change labels",
            extra={"sender": sender.login, "permission": permission},
        )
    return allowed
