import logging
import subprocess

logger = logging.getLogger("miniwm.launcher")
logger.addHandler(logging.NullHandler())


def spawn(command: str):
    """
    Run a shell command in its own session and return immediately.
    The manager never waits on the child; failures are only logged.
    """
    if not command:
        return
    try:
        subprocess.Popen(
            command,
            shell=True,
            start_new_session=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        logger.info("spawn: %s", command)
    except OSError:
        logger.exception("spawn failed: %s", command)
