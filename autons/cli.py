import typer
import logging
from typing import List, Optional, Sequence, Tuple

from autons.config import Config
from autons.errors import AutonsError, UsageError, USAGE
from autons.modules.dispatch import dispatch
from autons.modules.namespace import resolve_namespace
from autons.modules.schema import discover
from autons.modules.target import resolve_target
from autons.utils.kube import ClusterClient, load_api_client

app = typer.Typer(add_completion=False)

logger = logging.getLogger("autons")

# Configure logging
def setup_logging(debug_mode: bool = False):
    """Configure logging based on debug mode."""
    log_level = logging.DEBUG if debug_mode else Config.LOG_LEVEL
    logging.basicConfig(
        level=log_level,
        format=Config.LOG_FORMAT,
        handlers=[
            logging.StreamHandler()
        ],
        force=True,
    )
    # Disable debug logging for noisy libraries
    if not debug_mode:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('kubernetes').setLevel(logging.WARNING)


def cluster_flags(args: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    """Pick ``--kubeconfig`` and ``--context`` out of the passthrough arguments."""
    found = {"--kubeconfig": None, "--context": None}
    args = list(args)
    for i, arg in enumerate(args):
        if arg == "--":
            break
        for flag in found:
            if arg == flag and i + 1 < len(args):
                found[flag] = args[i + 1]
            elif arg.startswith(flag + "="):
                found[flag] = arg[len(flag) + 1:]
    return found["--kubeconfig"], found["--context"]


def run(args: List[str]) -> int:
    """Resolve the namespace for ``args`` if needed and run kubectl.

    Returns kubectl's exit status; raises AutonsError on any resolution failure.
    """
    if len(args) < 2:
        raise UsageError(f"insufficient command, {USAGE}")
    try:
        Config.validate()
    except ValueError as e:
        raise UsageError(str(e)) from e

    verb, rest = args[0], args[1:]

    def resolve() -> str:
        kubeconfig, context = cluster_flags(rest)
        with load_api_client(kubeconfig, context) as api_client:
            cluster = ClusterClient(api_client)
            catalog = discover(cluster)
            target = resolve_target(verb, rest, catalog)
            return resolve_namespace(cluster, target, max_workers=Config.MAX_WORKERS)

    return dispatch(args, resolve, kubectl=Config.KUBECTL)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": ["-h", "--help"],
    },
)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """autons - run kubectl without naming the namespace.

    Usage: kubectl autons <command> [<resource-type> <resource>|<resource-type>/<resource>].
    Everything from the command onward is passed to kubectl.
    """
    setup_logging(debug)
    if debug:
        logger.debug("Debug mode enabled")

    try:
        exit_code = run(list(ctx.args))
    except AutonsError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=e.exit_code)
    except Exception as e:
        if debug:
            logger.exception(f"Unhandled exception: {e}")
        else:
            logger.error(f"Error: {e}")
        raise typer.Exit(code=1)

    raise typer.Exit(code=exit_code)


if __name__ == "__main__":
    app()
