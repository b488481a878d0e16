"""CLI entrypoint for operator-driven pricing runs.

Webhook-driven pricing lives in :mod:`assistive_pricing.server`; this CLI
covers re-pricing a single issue and bootstrapping the label set of a repo.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from assistive_pricing import __version__
from assistive_pricing.github_labels import LabelCategory, label_spec_for, price_label_name
from assistive_pricing.pricing.calculator import compute_price
from assistive_pricing.pricing.config import PricingSettings
from assistive_pricing.pricing.context import PricingContext
from assistive_pricing.pricing.errors import PluginConfigError, PreconditionError
from assistive_pricing.pricing.github.client import GitHubClient
from assistive_pricing.pricing.handler import reprice_issue
from assistive_pricing.pricing.logging import configure_logging, log_fields
from assistive_pricing.pricing.models import Label
from assistive_pricing.pricing.payload import (
    IssueLabelEvent,
    IssuePayload,
    PayloadLabel,
    RepositoryOwner,
    RepositoryPayload,
    Sender,
)
from assistive_pricing.pricing.plugin_config import PricingConfig, load_plugin_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pricing",
        description="Derive GitHub issue price labels from time and priority labels",
    )
    parser.add_argument("--version", action="version", version=f"assistive-pricing {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    reprice = subparsers.add_parser(
        "reprice",
        help="Recompute and reconcile the price label of one issue",
    )
    reprice.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Target repository in the form 'owner/repo'",
    )
    reprice.add_argument(
        "--issue-number",
        type=int,
        required=True,
        help="Issue number to re-price",
    )

    sync_labels = subparsers.add_parser(
        "sync-labels",
        help="Create every configured time, priority and price label missing from the repository",
    )
    sync_labels.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Target repository in the form 'owner/repo'",
    )

    return parser


def expected_labels(config: PricingConfig) -> list[tuple[str, LabelCategory]]:
    """Every label the configuration can produce, time and priority first."""

    wanted: list[tuple[str, LabelCategory]] = []
    wanted.extend((entry.name, "time") for entry in config.labels.time)
    wanted.extend((entry.name, "priority") for entry in config.labels.priority)

    prices: list[str] = []
    for time_entry in config.labels.time:
        for priority_entry in config.labels.priority:
            price = compute_price(Label(time_entry.name), Label(priority_entry.name), config)
            if price is None:
                continue
            name = price_label_name(price, config.currency)
            if name not in prices:
                prices.append(name)
    wanted.extend((name, "price") for name in prices)
    return wanted


def sync_repository_labels(github: GitHubClient, config: PricingConfig) -> list[str]:
    """Create missing labels. Returns the names that were created."""

    existing = {label.name for label in github.list_repository_labels()}
    created: list[str] = []
    for name, category in expected_labels(config):
        if name in existing:
            continue
        github.create_label(label_spec_for(name, category))
        created.append(name)
    return created


def _event_for_issue(github: GitHubClient, issue_number: int) -> IssueLabelEvent:
    snapshot = github.get_issue(issue_number=issue_number)
    owner, _, name = github.repository.partition("/")
    return IssueLabelEvent(
        action="labeled",
        issue=IssuePayload(
            number=snapshot.number,
            body=snapshot.body,
            state=snapshot.state,
            labels=[PayloadLabel(name=label.name) for label in snapshot.labels],
        ),
        repository=RepositoryPayload(name=name, owner=RepositoryOwner(login=owner)),
        sender=Sender(login="", type="Bot"),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = PricingSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        config = load_plugin_config(settings.config_path)
    except PluginConfigError as e:
        logger.error(str(e), extra={"path": str(settings.config_path)})
        print(str(e), file=sys.stderr)
        return 2

    try:
        github = GitHubClient(
            token=settings.github_token,
            repository=args.repository,
            base_url=settings.github_base_url,
        )
        try:
            if args.command == "reprice":
                context = PricingContext.create(
                    event=_event_for_issue(github, args.issue_number),
                    config=config,
                    github=github,
                    check_permissions=False,
                )
                result = reprice_issue(context)
                outcome = result.outcome
                if outcome is None:
                    print(f"Issue #{result.issue_number}: ignored ({result.ignored})")
                    return 0
                print(
                    f"Issue #{result.issue_number}: {outcome.plan.action.value} "
                    f"({outcome.plan.reason}) -> {outcome.plan.target or 'no price'}"
                )
                for parent_number, parent_outcome in result.parents.items():
                    print(
                        f"Parent #{parent_number}: {parent_outcome.plan.action.value} "
                        f"-> {parent_outcome.plan.target or 'no price'}"
                    )
                return 1 if outcome.errors else 0

            if args.command == "sync-labels":
                created = sync_repository_labels(github, config)
                logger.info(
                    "Repository labels synchronized",
                    extra=log_fields(repo=github.repository, created_labels=created),
                )
                print(f"Created {len(created)} label(s) in {github.repository}")
                for name in created:
                    print(f"  {name}")
                return 0

            logger.error("Unknown command", extra={"command": args.command})
            return 2
        finally:
            github.close()

    except PreconditionError as e:
        logger.warning(str(e), extra={"command": args.command})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
