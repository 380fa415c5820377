"""Delegate the final command to kubectl."""
import logging
import signal
import subprocess
from typing import Callable, List, Sequence

from ..errors import CommandNotFoundError

logger = logging.getLogger(__name__)

NAMESPACE_FLAGS = ("-n", "--namespace")

def has_namespace_flag(args: Sequence[str]) -> bool:
    """Check whether the arguments already select a namespace.

    Recognises ``-n ns``, ``--namespace ns``, ``--namespace=ns``, ``-n=ns``
    and ``-nns``. Arguments after ``--`` belong to the remote command and
    are ignored.
    """
    for arg in args:
        if arg == "--":
            return False
        if arg in NAMESPACE_FLAGS or arg.startswith("--namespace="):
            return True
        if arg.startswith("-n") and not arg.startswith("--"):
            return True
    return False


def with_namespace(args: Sequence[str], namespace: str) -> List[str]:
    """Return a copy of ``args`` with ``--namespace <namespace>`` appended.

    The flag is placed before any ``--`` separator so kubectl still reads it.
    """
    args = list(args)
    flag = ["--namespace", namespace]
    if "--" in args:
        index = args.index("--")
        return args[:index] + flag + args[index:]
    return args + flag


def run_kubectl(args: Sequence[str], kubectl: str = "kubectl") -> int:
    """
    Run kubectl with inherited stdin, stdout and stderr.

    Args:
        args: Arguments passed to kubectl verbatim
        kubectl: Executable to run

    Returns:
        kubectl's exit status, unchanged

    Raises:
        CommandNotFoundError: If the executable is not installed
    """
    command = [kubectl, *args]
    logger.debug(f"Running: {' '.join(command)}")
    try:
        # No capture: the child shares this process's stdio
        process = subprocess.Popen(command)
    except FileNotFoundError:
        raise CommandNotFoundError(kubectl) from None

    # Ctrl-C hits the whole process group; kubectl decides how to exit on it.
    # Ignored only after spawning so the child keeps the default handler.
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        return process.wait()
    finally:
        signal.signal(signal.SIGINT, previous)


def dispatch(args: Sequence[str], resolve: Callable[[], str], kubectl: str = "kubectl") -> int:
    """
    Run kubectl with the namespace ``resolve`` finds, unless one is already given.

    Args:
        args: The original arguments, verb first
        resolve: Called only when a namespace is needed; returns it
        kubectl: Executable to run

    Returns:
        kubectl's exit status
    """
    if has_namespace_flag(args):
        logger.debug("Namespace given explicitly, skipping resolution")
        return run_kubectl(args, kubectl)

    return run_kubectl(with_namespace(args, resolve()), kubectl)
