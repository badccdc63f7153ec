"""ApplyTrack CLI - Job Application Tracker."""

import json
import logging
import sys
import time

import click

from .adapters.polling_feed import PollingChangeFeed
from .adapters.supabase_api import AuthenticationError, SupabaseStore, authenticate
from .config import load_config
from .core.analytics import compute_stats
from .core.applications import ApplicationRecord, Status, ValidationError, append_note, dated_note
from .core.export import DateRange, ExportError, ExportFormat, build_export
from .core.listing import ALL_STATUSES, SortKey, filter_and_sort
from .core.reminders import ReminderType
from .ports.application_store import StoreError
from .workflows import (
    add_application,
    complete_reminder,
    current_reminders,
    delete_application,
    export_applications,
    find_reminder,
    get_completions,
    get_export_sink,
    get_notifications,
    get_store,
    status_choices,
    update_application,
)

CLI_ERRORS = (AuthenticationError, StoreError, ValidationError, ExportError)


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _fetch(store: SupabaseStore) -> list[ApplicationRecord]:
    try:
        return store.list(store.scope)
    except CLI_ERRORS as e:
        _fail(e)


def _record_line(record: ApplicationRecord) -> str:
    follow_up = f", follow up {record.follow_up_date}" if record.follow_up_date else ""
    return (
        f"{record.id[:8]}  {record.applied_date}  [{record.status.value:9}] "
        f"{record.company} - {record.role}{follow_up}"
    )


def _optional_fields(**options) -> dict:
    """Map CLI options onto store columns, dropping unset ones."""
    columns = {
        "applied": "applied_date",
        "job_type": "type",
        "contact": "contact_person",
        "follow_up": "follow_up_date",
        "url": "job_url",
    }
    return {columns.get(k, k): v for k, v in options.items() if v is not None}


@click.group()
@click.version_option(package_name="applytrack")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """ApplyTrack - Job Application Tracker CLI."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--email", prompt=True, help="Account email")
@click.password_option("--password", confirmation_prompt=False, help="Account password")
def auth(email: str, password: str):
    """Sign in to the Supabase project."""
    try:
        session = authenticate(email, password)
    except AuthenticationError as e:
        _fail(e)
    role = " (admin: all applications visible)" if session.is_admin else ""
    click.echo(f"Signed in as {session.email}{role}")


@main.command("list")
@click.option("--search", "-q", default="", help="Match company or role")
@click.option(
    "--status",
    type=click.Choice([ALL_STATUSES, *status_choices()], case_sensitive=False),
    default=ALL_STATUSES,
)
@click.option(
    "--sort",
    type=click.Choice([k.value for k in SortKey]),
    default=SortKey.DATE_DESC.value,
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(search: str, status: str, sort: str, as_json: bool):
    """List applications."""
    store = get_store(load_config())
    records = filter_and_sort(_fetch(store), search, status, sort)

    if as_json:
        click.echo(json.dumps([r.to_api() for r in records], indent=2))
        return

    if not records:
        click.echo("No applications found.")
        return

    for record in records:
        click.echo(_record_line(record))


@main.command()
@click.option("--company", prompt=True)
@click.option("--role", prompt=True)
@click.option("--status", type=click.Choice(status_choices()), default=Status.APPLIED.value)
@click.option("--applied", default=None, help="Applied date (YYYY-MM-DD), defaults to today")
@click.option("--location", default=None)
@click.option("--salary", default=None)
@click.option("--type", "job_type", default="Full-time", show_default=True)
@click.option("--contact", default=None, help="Contact person")
@click.option("--follow-up", default=None, help="Follow-up date (YYYY-MM-DD)")
@click.option("--url", default=None, help="Job posting URL")
@click.option("--notes", default="")
def add(company, role, status, notes, **options):
    """Add an application."""
    config = load_config()
    store = get_store(config)
    fields = {"company": company, "role": role, "status": status, "notes": notes}
    fields.update(_optional_fields(**options))

    try:
        record = add_application(store, fields, get_notifications(config, store))
    except CLI_ERRORS as e:
        _fail(e)
    click.echo(f"✓ Added {record.company} - {record.role} ({record.id})")


@main.command()
@click.argument("record_id")
@click.option("--company", default=None)
@click.option("--role", default=None)
@click.option("--status", type=click.Choice(status_choices()), default=None)
@click.option("--applied", default=None, help="Applied date (YYYY-MM-DD)")
@click.option("--location", default=None)
@click.option("--salary", default=None)
@click.option("--type", "job_type", default=None)
@click.option("--contact", default=None, help="Contact person")
@click.option("--follow-up", default=None, help="Follow-up date (YYYY-MM-DD)")
@click.option("--url", default=None, help="Job posting URL")
@click.option("--note", default=None, help="Append a dated note")
def update(record_id: str, note: str | None, **options):
    """Update an application."""
    config = load_config()
    store = get_store(config)
    fields = _optional_fields(**options)

    try:
        if note:
            current = next((r for r in store.list(store.scope) if r.id == record_id), None)
            if current is None:
                raise StoreError(f"Application {record_id} not found")
            fields["notes"] = append_note(current.notes, dated_note(note))

        if not fields:
            click.echo("Nothing to update.")
            return

        record = update_application(store, record_id, fields, get_notifications(config, store))
    except CLI_ERRORS as e:
        _fail(e)
    click.echo(f"✓ Updated {record.company} - {record.role}")


@main.command()
@click.argument("record_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
def delete(record_id: str, yes: bool):
    """Delete an application."""
    if not yes and not click.confirm(f"Delete application {record_id}?"):
        return
    store = get_store(load_config())
    try:
        delete_application(store, record_id)
    except CLI_ERRORS as e:
        _fail(e)
    click.echo("✓ Deleted")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show application statistics."""
    store = get_store(load_config())
    result = compute_stats(_fetch(store))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"Total applications: {result.total}")
    for status in Status:
        click.echo(f"  {status.value:10} {result.count(status)}")
    click.echo(f"Interview rate: {result.conversion_rate:.1f}%")
    click.echo(f"Success rate:   {result.success_rate:.1f}%")
    click.echo(f"Rejection rate: {result.rejection_rate:.1f}%")
    click.echo(f"Last 30 days:   {result.recent_count} ({result.avg_per_week:.1f}/week)")

    if result.top_companies:
        click.echo("Top companies:")
        for company, count in result.top_companies:
            click.echo(f"  {count:3}  {company}")


def _show_reminders(reminders: list, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([r.to_dict() for r in reminders], indent=2))
        return

    if not reminders:
        click.echo("All caught up! No pending action items.")
        return

    for reminder in reminders:
        click.echo(f"[{reminder.priority.value:6}] {reminder.message}")
        click.echo(f"         {reminder.type.value}, due {reminder.due_date}  (id: {reminder.id})")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def reminders(as_json: bool):
    """Show reminders and action items."""
    config = load_config()
    store = get_store(config)
    _show_reminders(current_reminders(_fetch(store), get_completions(config)), as_json)


@main.command()
@click.argument("reminder_id")
def done(reminder_id: str):
    """Mark a reminder as done."""
    config = load_config()
    store = get_store(config)
    completions = get_completions(config)
    records = _fetch(store)

    reminder = find_reminder(reminder_id, records, completions)
    if reminder is None:
        click.echo(f"No pending reminder '{reminder_id}'.", err=True)
        sys.exit(1)

    try:
        record = complete_reminder(reminder, records, store, completions)
    except CLI_ERRORS as e:
        _fail(e)

    if reminder.type == ReminderType.FOLLOW_UP:
        click.echo(f"✓ Follow-up completed. Next follow-up on {record.follow_up_date}.")
    else:
        click.echo("✓ Reminder addressed.")


@main.command()
@click.option(
    "--format", "fmt",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.CSV.value,
)
@click.option(
    "--range", "date_range",
    type=click.Choice([r.value for r in DateRange]),
    default=DateRange.ALL.value,
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Write to standard output")
def export(fmt: str, date_range: str, to_stdout: bool):
    """Export applications as CSV, JSON or a text report."""
    config = load_config()
    records = _fetch(get_store(config))

    try:
        if to_stdout:
            click.echo(build_export(records, fmt, date_range).content)
            return
        payload, location = export_applications(
            records, fmt, date_range, get_export_sink(config)
        )
    except ExportError as e:
        _fail(e)
    click.echo(f"✓ Exported {payload.count} applications to {location}")


@main.command()
def watch():
    """Watch for changes and show reminders when they happen."""
    config = load_config()
    store = get_store(config)
    completions = get_completions(config)
    feed = PollingChangeFeed(store, store.scope)

    try:
        feed.poll()
        _show_reminders(current_reminders(feed.records, completions), False)
        while True:
            time.sleep(config.poll_interval)
            events = feed.poll()
            if not events:
                continue
            for event in events:
                click.echo(f"\n* {event.kind}: {event.record.company} - {event.record.role}")
            _show_reminders(current_reminders(feed.records, completions), False)
    except CLI_ERRORS as e:
        _fail(e)
    except KeyboardInterrupt:
        click.echo("\nStopped.")


@main.command()
def daemon():
    """Run the daily reminder digest scheduler."""
    from .scheduler import run_daemon

    click.echo("Starting ApplyTrack scheduler...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_daemon()
    except KeyboardInterrupt:
        click.echo("\nScheduler stopped.")


if __name__ == "__main__":
    main()
