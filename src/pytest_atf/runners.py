"""Process runner for executable actions.

A process runner is a callable receiving a command path and a list of
arguments and returning the combined standard output and standard error
text together with a success flag. The engine only relies on that
contract; `ScriptRunner` is the default implementation.

`ScriptRunner` selects an interpreter from the file extension of the
command: native executables are started directly, scripts are handed to
their interpreter, and Java archives are run with `java -jar`.
Interpreters must be available in `PATH` unless configured otherwise.
"""

import logging
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import PurePath

logger = logging.getLogger(__name__)

#: Runner receives a command path and its arguments and returns
#: the combined output text and a success flag. Launch failures and
#: non-zero exit codes are reported as failures, never raised.
type ProcessRunner = Callable[[str, Sequence[str]], tuple[str, bool]]

#: Extensions of files started without an interpreter.
NATIVE_EXTENSIONS = frozenset(('', '.exe', '.com', '.bat'))

#: Default interpreter command prefixes per script extension.
DEFAULT_INTERPRETERS: dict[str, tuple[str, ...]] = {
    '.py': (sys.executable or 'python',),
    '.pl': ('perl',),
    '.tcl': ('tclsh',),
    '.exp': ('tclsh',) if sys.platform == 'win32' else ('expect',),
    '.rb': ('ruby',),
    '.groovy': ('groovy',),
    '.jar': ('java', '-jar'),
    '.sh': ('sh',),
}


class ScriptRunner:
    """Run native programs and interpreted scripts as child processes.

    The runner blocks until the child process exits. No timeout is
    applied: a hung command hangs the caller.
    """

    def __init__(self, interpreters: Mapping[str, Sequence[str]] | None = None, *,
                 cwd: str | None = None,
                 env: Mapping[str, str] | None = None) -> None:
        """Initialize the runner.

        Args:
            interpreters: Extension to command prefix overrides, merged
                over the defaults (for example `{'.py': ['python3']}`).
            cwd: Working directory for child processes.
            env: Environment for child processes. Inherited if omitted.
        """
        self.interpreters = {
            **DEFAULT_INTERPRETERS,
            **{
                extension.lower(): tuple(command)
                for extension, command in (interpreters or {}).items()
            },
        }
        self.cwd = cwd
        self.env = dict(env) if env is not None else None

    def resolve(self, script: str, args: Sequence[str]) -> list[str] | None:
        """Build the full command line for a script.

        Args:
            script: Path or name of the program or script.
            args: Additional arguments.

        Returns:
            The command line, or `None` when the script type is unknown.
        """
        extension = PurePath(script).suffix.lower()

        if extension in NATIVE_EXTENSIONS:
            return [script, *args]

        if interpreter := self.interpreters.get(extension):
            return [*interpreter, script, *args]

        return None

    def __call__(self, script: str, args: Sequence[str]) -> tuple[str, bool]:
        """Execute a script and collect its output.

        Args:
            script: Path or name of the program or script.
            args: Additional arguments.

        Returns:
            A tuple of the combined stdout/stderr text and a flag set
            when the process exited with status zero.
        """
        if not script:
            return 'Invalid value: empty command', False

        command = self.resolve(script, args)
        if command is None:
            logger.warning('Unsupported script type: %s', script)
            return f'Unsupported script type: {script!r}', False

        logger.debug('Running %s', command)

        try:
            completed = subprocess.run(  # noqa: S603
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors='replace',
                cwd=self.cwd,
                env=self.env,
                check=False,
            )
        except OSError as error:
            logger.debug('Failed to start %s: %s', command, error)
            return f'{error}', False

        logger.debug('%s exited with status %d', command, completed.returncode)

        output = completed.stdout or ''
        if completed.returncode != 0:
            if output and not output.endswith('\n'):
                output += '\n'
            return f'{output}exit status {completed.returncode}\n', False

        return output, True
