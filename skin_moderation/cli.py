"""Command-line interface for skin moderation operators."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer
from typing_extensions import Annotated

from skin_moderation.config.settings import settings
from skin_moderation.core.errors import SkinModerationError
from skin_moderation.core.moderation import TransitionResult
from skin_moderation.core.service import SkinModerationService
from skin_moderation.storage.s3_mirror import S3MirrorError
from skin_moderation.utils.logging_utils import setup_logging

app = typer.Typer(help="Skin moderation - review state, announcements and mirror reconciliation")

logger = logging.getLogger(__name__)


def build_service() -> SkinModerationService:
    return SkinModerationService.from_settings(settings)


async def _with_service(action: Callable[[SkinModerationService], Awaitable[Any]]) -> Any:
    async with build_service() as service:
        return await action(service)


def _run(action: Callable[[SkinModerationService], Awaitable[Any]]) -> Any:
    try:
        return asyncio.run(_with_service(action))
    except (SkinModerationError, S3MirrorError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def _echo_transition(result: TransitionResult) -> None:
    _echo_json({
        "md5": result.record.md5,
        "action": result.action,
        "outcome": result.outcome.value,
        "status": result.record.status.value,
        "mirror_error": str(result.mirror_error) if result.mirror_error else None,
    })


@app.callback()
def main(
    logging_config: Annotated[
        Optional[Path], typer.Option("--logging-config", help="Path to a logging YAML file")
    ] = None,
) -> None:
    if logging_config is not None:
        setup_logging(logging_config)
    else:
        setup_logging()


@app.command()
def reconcile(
    report_path: Annotated[
        Optional[Path], typer.Option("--report", help="Write the JSON report to this file")
    ] = None,
) -> None:
    """Copy moderation markers from the mirror bucket into the database."""
    report = _run(lambda service: service.reconciler.reconcile())
    payload = report.as_dict()
    if report_path is not None:
        report_path.write_text(json.dumps(payload, indent=2))
        logger.info(f"Reconciliation report saved to: {report_path}")
    _echo_json(payload["statistics"])
    if not report.ok:
        typer.echo(f"{len(report.failures)} update(s) failed", err=True)
        raise typer.Exit(code=1)


@app.command()
def stats() -> None:
    """Show moderation counters."""
    result = _run(lambda service: service.queries.counts())
    _echo_json(result.model_dump())


async def _status(service: SkinModerationService, anything: str):
    md5 = await service.resolve_existing(anything)
    return md5, await service.state_machine.get_status(md5)


@app.command()
def status(anything: Annotated[str, typer.Argument(help="md5, archive.org URL or item name")]) -> None:
    """Show the moderation status of a skin."""
    md5, skin_status = _run(lambda service: _status(service, anything))
    typer.echo(f"{md5} {skin_status.value}")


async def _detail(service: SkinModerationService, anything: str):
    return await service.queries.detail(await service.resolve_existing(anything))


@app.command()
def show(anything: Annotated[str, typer.Argument(help="md5, archive.org URL or item name")]) -> None:
    """Show everything known about a skin."""
    detail = _run(lambda service: _detail(service, anything))
    _echo_json(detail.model_dump(mode="json"))


def _transition(anything: str, action: str) -> None:
    async def go(service: SkinModerationService) -> TransitionResult:
        md5 = await service.resolve_existing(anything)
        return await getattr(service.state_machine, action)(md5)

    _echo_transition(_run(go))


@app.command()
def approve(anything: Annotated[str, typer.Argument(help="md5, archive.org URL or item name")]) -> None:
    """Approve a skin."""
    _transition(anything, "approve")


@app.command()
def reject(anything: Annotated[str, typer.Argument(help="md5, archive.org URL or item name")]) -> None:
    """Reject a skin."""
    _transition(anything, "reject")


@app.command("mark-tweeted")
def mark_tweeted(anything: Annotated[str, typer.Argument(help="md5, archive.org URL or item name")]) -> None:
    """Record that a skin has been announced."""
    _transition(anything, "mark_tweeted")


@app.command("next-review")
def next_review() -> None:
    """Show the next skin waiting for review."""
    candidate = _run(lambda service: service.queries.skin_to_review())
    if candidate is None:
        typer.echo("No skins to review")
        return
    _echo_json(candidate.model_dump())


@app.command("next-tweet")
def next_tweet() -> None:
    """Show the next approved skin waiting to be announced."""
    candidate = _run(lambda service: service.queries.skin_to_tweet())
    if candidate is None:
        typer.echo("No skins to tweet")
        return
    _echo_json(candidate.model_dump())


if __name__ == "__main__":
    app()
