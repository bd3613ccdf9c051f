# Design (and some implementation) of this owes heavily to Click's
# CliRunner.

"""Tools for testing command trees end to end, the way a user would
run them: arguments in, exit code and captured output out.

    >>> client = TestClient(root_cmd)
    >>> res = client.invoke('deploy --env staging')
    >>> res.exit_code
    0

:meth:`TestClient.invoke` goes through :meth:`Command.execute`, so
parse errors are printed to the captured stderr and surface as a
non-zero exit code, exactly as they would for a user at a shell. From
async tests, where an event loop is already running, use
:meth:`TestClient.ainvoke`, which awaits
:func:`~flagtree.parser.parse_command` with the same error handling.
"""

import io
import os
import sys
import shlex
import contextlib

from flagtree.errors import ParseCommandError, CommandLineError
from flagtree.parser import parse_command


class Result(object):
    """The captured outcome of one :meth:`TestClient.invoke` call.

    *exit_code* is 0 when parsing and execution both succeeded, and
    nonzero otherwise. *value* is the
    :class:`~flagtree.parser.ParseResult`, or None if the parse
    didn't complete.
    """
    def __init__(self, client, exit_code, stdout_bytes, stderr_bytes,
                 exc_info=None, value=None):
        self.client = client
        self.exit_code = exit_code
        self.stdout_bytes = stdout_bytes
        self.stderr_bytes = stderr_bytes
        self.exc_info = exc_info
        self.value = value

    @property
    def exception(self):
        return self.exc_info[1] if self.exc_info else None

    @property
    def help(self):
        "True if the help flag short-circuited the parse."
        return bool(self.value is not None and self.value.help)

    @property
    def values(self):
        "The return values of the executables that ran, if any did."
        return self.value.values if self.value is not None else None

    def _decode(self, raw):
        return raw.decode(self.client.encoding, 'replace').replace('\r\n', '\n')

    @property
    def stdout(self):
        return self._decode(self.stdout_bytes)

    @property
    def stderr(self):
        if self.stderr_bytes is None:
            raise ValueError("stderr not separately captured")
        return self._decode(self.stderr_bytes)

    def __repr__(self):
        if self.exception is not None:
            return '<%s %r>' % (self.__class__.__name__, self.exception)
        return '<%s exit_code=%s>' % (self.__class__.__name__, self.exit_code)


class _Capture(object):
    # holds the byte buffers behind the swapped std streams
    def __init__(self, mix_stderr):
        self.stdout = io.BytesIO()
        self.stderr = None if mix_stderr else io.BytesIO()

    def getvalues(self):
        sys.stdout.flush()
        sys.stderr.flush()
        stderr_bytes = self.stderr.getvalue() if self.stderr is not None else None
        return self.stdout.getvalue(), stderr_bytes


class TestClient(object):
    """Invokes a Command with isolated stdin, stdout, stderr, and
    environment.

    Args:
       cmd (Command): The root command to invoke.
       env (dict): Environment variables set for every invocation. A
          value of None unsets the variable.
       mix_stderr (bool): Pass True to capture stderr into stdout.
       reraise (bool): Whether exceptions raised by executables
          propagate out of invoke(). Defaults to True. Parse errors
          never propagate, they become exit code 1.
       parser_kwargs (dict): Keyword arguments for the
          :class:`~flagtree.parser.Parser`, e.g., ``{'mode': 'all'}``.
    """
    __test__ = False  # keep pytest from collecting this

    def __init__(self, cmd, env=None, mix_stderr=False, reraise=True,
                 parser_kwargs=None):
        self.cmd = cmd
        self.base_env = dict(env or {})
        self.mix_stderr = mix_stderr
        self.reraise = reraise
        self.parser_kwargs = dict(parser_kwargs or {})
        self.encoding = 'utf8'

    @contextlib.contextmanager
    def isolate(self, input=None, env=None, chdir=None):
        """Swap out the std streams, environment, and working directory
        for the duration of the block, yielding the capture buffers.
        """
        if input is None:
            input = b''
        elif isinstance(input, str):
            input = input.encode(self.encoding)
        elif not isinstance(input, bytes):
            raise TypeError('expected bytes, text, or None, not: %r' % (input,))

        capture = _Capture(self.mix_stderr)
        new_env = dict(self.base_env, **(env or {}))
        saved_streams = (sys.stdin, sys.stdout, sys.stderr)
        saved_cwd = os.getcwd()
        saved_env = _sync_env(os.environ, new_env, {})

        sys.stdin = io.TextIOWrapper(io.BytesIO(input), encoding=self.encoding)
        sys.stdout = io.TextIOWrapper(capture.stdout, encoding=self.encoding)
        if capture.stderr is None:
            sys.stderr = sys.stdout
        else:
            sys.stderr = io.TextIOWrapper(capture.stderr, encoding=self.encoding)
        try:
            if chdir:
                os.chdir(str(chdir))
            yield capture
        finally:
            sys.stdout.flush()
            sys.stderr.flush()
            sys.stdin, sys.stdout, sys.stderr = saved_streams
            os.chdir(saved_cwd)
            _sync_env(os.environ, saved_env)

    def _get_argv(self, args):
        if isinstance(args, str):
            return shlex.split(args)
        return list(args or ())

    def invoke(self, args, input=None, env=None, chdir=None):
        """Run the command tree with *args*, a list of strings or a single
        string to be split shell-style. Returns a :class:`Result`.
        """
        argv = self._get_argv(args)
        value, exit_code, exc_info = None, 0, None
        with self.isolate(input=input, env=env, chdir=chdir) as capture:
            try:
                value = self.cmd.execute(argv, **self.parser_kwargs)
            except SystemExit as se:
                exc_info = sys.exc_info()
                exit_code = _get_exit_code(se)
            except Exception:
                if self.reraise:
                    raise
                exc_info = sys.exc_info()
                exit_code = 1
            finally:
                stdout_bytes, stderr_bytes = capture.getvalues()

        return Result(self, exit_code, stdout_bytes, stderr_bytes,
                      exc_info=exc_info, value=value)

    async def ainvoke(self, args, input=None, env=None, chdir=None):
        """The async counterpart of :meth:`invoke`, for use inside a
        running event loop. Parse errors are printed to the captured
        stderr and reported as a :class:`CommandLineError` with exit
        code 1, the same as :meth:`Command.execute` does.
        """
        argv = self._get_argv(args)
        value, exit_code, exc_info = None, 0, None
        with self.isolate(input=input, env=env, chdir=chdir) as capture:
            try:
                try:
                    value = await parse_command(argv, self.cmd, **self.parser_kwargs)
                except ParseCommandError as pce:
                    sys.stderr.write(str(pce) + '\n')
                    raise CommandLineError(pce.message)
            except SystemExit as se:
                exc_info = sys.exc_info()
                exit_code = _get_exit_code(se)
            except Exception:
                if self.reraise:
                    raise
                exc_info = sys.exc_info()
                exit_code = 1
            finally:
                stdout_bytes, stderr_bytes = capture.getvalues()

        return Result(self, exit_code, stdout_bytes, stderr_bytes,
                      exc_info=exc_info, value=value)


def _get_exit_code(system_exit):
    code = system_exit.code
    if code is None:
        return 0
    if not isinstance(code, int):
        # sys.exit('message') prints the message and exits 1
        sys.stdout.write('%s\n' % code)
        return 1
    return code


def _sync_env(env, new, backup=None):
    for key, value in new.items():
        if backup is not None:
            backup[key] = env.get(key)
        if value is not None:
            env[key] = value
        else:
            env.pop(key, None)
    return backup
