"""
Command Line Interface for snowdrop.
"""
import functools
import logging

import click
from dotenv import find_dotenv, load_dotenv

from ..MANAGERS.setup_orchestrator import SetupOrchestrator
from ..errors import SnowdropError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def fail_fast(command):
    """
    Turns snowdrop errors into a click error, which exits with status 1.
    """
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except SnowdropError as e:
            logging.getLogger(__name__).debug("Error:", exc_info=True)
            raise click.ClickException(str(e)) from e
    return wrapper


@click.group(epilog="""\b
Example:
  # Creating and deploying a Spring Boot application
  git clone github.com/snowdrop/spring-boot-cloud-devex && cd spring-boot-cloud-devex/spring-boot
  sd init -n namespace
  sd pod""")
@click.option('--kubeconfig', '-k', envvar='SD_KUBECONFIG', default=None,
              help='Path to a kubeconfig ($HOME/.kube/config). Only required if out-of-cluster.')
@click.option('--masterurl', envvar='SD_MASTER_URL', default=None,
              help='The address of the Kubernetes API server. Overrides any value in kubeconfig.')
@click.option('--namespace', '-n', envvar='SD_NAMESPACE', default=None,
              help='Namespace/project (defaults to current project)')
@click.option('--application', '-a', envvar='SD_APPLICATION', default=None,
              help='Application name (defaults to current directory name)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, kubeconfig, masterurl, namespace, application, verbose):
    """
    snowdrop's client tool to scaffold a Spring Boot application on Kubernetes/OpenShift.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    ctx.ensure_object(dict)
    ctx.obj['orchestrator'] = SetupOrchestrator(
        kubeconfig=kubeconfig,
        master_url=masterurl,
        namespace=namespace,
        app_name=application,
    )


@cli.command()
@click.pass_context
@fail_fast
def init(ctx):
    """Set up the development environment of the application."""
    tool = ctx.obj['orchestrator'].setup()
    app = tool.application
    click.echo(f"Application '{app.name}' is ready in namespace '{app.namespace}'.")


@cli.command()
@click.pass_context
@fail_fast
def pod(ctx):
    """Set up, then wait for the development pod and print its name."""
    _, dev_pod = ctx.obj['orchestrator'].setup_and_wait_for_pod()
    click.echo(dev_pod.metadata.name)


@cli.command()
@click.pass_context
@fail_fast
def clean(ctx):
    """Delete the resources of the development environment."""
    tool, deleted = ctx.obj['orchestrator'].clean()
    if not deleted:
        click.echo(f"Nothing to delete for '{tool.application.name}'.")
    for item in deleted:
        click.echo(f"Deleted {item}")


def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv(find_dotenv(usecwd=True))
    cli(obj={})


if __name__ == '__main__':
    main()
