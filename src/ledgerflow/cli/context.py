"""Lazy construction of services for commands that need the full stack."""

import click

from ledgerflow.services import Services, build_services


def get_services(ctx: click.Context) -> Services:
    """Build services once per invocation, sharing the group's database."""
    obj = ctx.find_root().obj
    if "services" not in obj:
        services = build_services(obj["settings"], db=obj["db"])
        obj["services"] = services
        # Database is disconnected by the group itself
        ctx.find_root().call_on_close(services.suggestion_client.close)
        ctx.find_root().call_on_close(services.account_catalog.close)
    return obj["services"]
