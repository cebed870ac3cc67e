"""
Command line entry point
"""

import asyncio
import logging

import click

from lms.api import endpoints
from lms.api.client import close_client
from lms.config import config
from lms.errors import LmsError
from lms.services.gradebook import SubmissionCollection
from lms.workflows.certificates import CertificateRequestCollection, CertificateWorkflow
from lms.workflows.grading import SubmissionWorkflow


# Logging setup
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
)
logger = logging.getLogger(__name__)


def run(coro):
    """Run one command on a fresh event loop and close the HTTP client afterwards"""
    async def runner():
        try:
            return await coro
        finally:
            await close_client()

    try:
        return asyncio.run(runner())
    except LmsError as e:
        logger.error(f"{type(e).__name__}: {e}")
        raise click.ClickException(str(e)) from e


@click.group()
def cli():
    """Tutor tools: certificate approvals and gradebook export"""
    errors = config.validate()
    if errors:
        raise click.ClickException("; ".join(errors))


@cli.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email, password):
    """Log in and print the bearer token"""
    result = run(endpoints.login(email, password))
    if not result["success"]:
        raise click.ClickException(result["error"])
    click.echo(result["token"])


@cli.command()
@click.option("--status", type=click.Choice(["pending", "approved", "rejected"]), default=None)
def certificates(status):
    """List certificate requests"""
    workflow = CertificateWorkflow(CertificateRequestCollection(), token=config.API_TOKEN)
    rows = run(workflow.refresh())

    for request in rows:
        if status and request.status.value != status:
            continue
        click.echo(f"{request.id}\t{request.status.value}\t{request.student.full_name}\t{request.course_title}")
    click.echo(f"{workflow.requests.pending_count()} pending")


async def _certificate_action(request_id: str, approve: bool):
    workflow = CertificateWorkflow(CertificateRequestCollection(), token=config.API_TOKEN)
    await workflow.refresh()
    if approve:
        return await workflow.approve(request_id)
    return await workflow.reject(request_id)


@cli.command()
@click.argument("request_id")
def approve(request_id):
    """Approve a certificate request"""
    run(_certificate_action(request_id, approve=True))
    click.echo("Certificate approved successfully!")


@cli.command()
@click.argument("request_id")
def reject(request_id):
    """Reject a certificate request"""
    run(_certificate_action(request_id, approve=False))
    click.echo("Certificate request rejected.")


@cli.command()
@click.argument("assignment_id")
@click.option("--output-dir", type=click.Path(file_okay=False), default=".", show_default=True)
@click.option("--status", type=click.Choice(["submitted", "graded", "returned"]), default=None)
@click.option("--course", default=None, help="Substring of the course name (case-sensitive)")
@click.option("--assignment", default=None, help="Substring of the assignment title (case-sensitive)")
@click.option("--search", default=None, help="Student first/last name or assignment title")
@click.option("--quote/--no-quote", default=None, help="Quote fields holding commas (default: CSV_QUOTE_FIELDS)")
def export(assignment_id, output_dir, status, course, assignment, search, quote):
    """Write gradebook.csv for an assignment's submissions"""
    gradebook = SubmissionCollection()
    workflow = SubmissionWorkflow(gradebook, token=config.API_TOKEN)
    run(workflow.load_assignment_submissions(assignment_id))

    rows = gradebook.filter(status=status, course=course, assignment=assignment, search=search)
    path = gradebook.export_csv(output_dir, rows, quote_fields=quote)

    summary = gradebook.summary()
    click.echo(f"{path}: {len(rows)} of {summary['total']} submissions")
    click.echo(
        f"pending {summary['pending']}, graded {summary['graded']}, "
        f"returned {summary['returned']}, late {summary['late']}"
    )


def main():
    cli()


if __name__ == "__main__":
    main()
