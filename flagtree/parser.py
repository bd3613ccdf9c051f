import logging

from flagtree.errors import (UnknownFlag,
                             UnknownCommand,
                             InvalidFlagArgument,
                             MissingFlagArgument)
from flagtree.flag import BoolFlag
from flagtree.utils import maybe_await, format_nonexp_repr


logger = logging.getLogger('flagtree')


class RunMode(object):
    """Which executables run once a command path has been matched.

    * ``ALL`` runs every command on the path, root to leaf, in order.
    * ``LAST`` runs only the innermost matched command. The default.
    * ``RUNNER`` runs nothing, and returns the Runners instead.
    """
    ALL = 'all'
    LAST = 'last'
    RUNNER = 'runner'

    MODES = (ALL, LAST, RUNNER)


class Runner(object):
    """The execution context for one matched command: the Command, the
    positional arguments collected for it, and, once invoked, the
    value its executable returned.

    In ``runner`` mode, a list of these is returned instead of
    executing, so the caller can invoke them in whatever order, or
    concurrency, suits.
    """
    def __init__(self, cmd, args=None):
        self.cmd = cmd
        self.args = args if args is not None else []
        self.result = None

    async def invoke(self, userdata=None):
        """Call the command's executable, if it has one, with this
        Runner's arguments, and store and return its result.
        """
        run = self.cmd.run
        if run is None:
            return None
        logger.debug('running %r with args %r', self.cmd.use(), self.args)
        self.result = await maybe_await(run(self.args, userdata, self.cmd))
        return self.result

    def __repr__(self):
        return format_nonexp_repr(self, ['cmd', 'args'], ['result'])


class ParseResult(object):
    """The result of :meth:`Parser.parse`. Exactly one of the following
    describes the outcome:

    * *help* is True: the help flag was passed, help was printed, and
      nothing was executed.
    * *values* is a list: executables ran, and these are their return
      values, one per executed command.
    * *runners* is a list: ``runner`` mode, one Runner per matched
      command, root to leaf, none executed.
    """
    def __init__(self, help=False, values=None, runners=None):
        self.help = help
        self.values = values
        self.runners = runners

    def __repr__(self):
        return format_nonexp_repr(self, [], ['help', 'values', 'runners'],
                                  opt_key=lambda v: not v and v != [])


def _split_long_flag(text):
    name, sep, value = text.partition('=')
    return name, (value if sep else None)


class Parser(object):
    """The Parser walks a list of argument strings against a tree of
    Commands, setting flags and descending into subcommands as it
    goes, then dispatches to the matched command(s).

    Args:
       mode (str): One of the :class:`RunMode` values, ``'all'``,
          ``'last'``, or ``'runner'``. Defaults to ``'last'``.
       allow_unknown_flag (bool): Pass True to treat unrecognized
          flags as positional arguments rather than errors.
       allow_unknown_command (bool): Pass True to treat unrecognized
          subcommand names as positional arguments rather than
          errors.
       userdata: Any object, passed through as-is to every executable.
       max_distance (int): How many edits away a misspelled flag or
          subcommand may be to still get a "did you mean"
          suggestion. Zero or less disables suggestions. Defaults to
          2.
       print_help (callable): Called with the help text when a help
          flag is passed. Defaults to printing to stdout.

    A single Parser may be used for any number of sequential
    parses. Parsing mutates the Flags on the command tree, so
    concurrent parses must not share a tree.
    """
    def __init__(self, **kwargs):
        mode = kwargs.pop('mode', RunMode.LAST)
        if mode is None:
            mode = RunMode.LAST
        if mode not in RunMode.MODES:
            raise ValueError('mode expected one of %r, not: %r' % (RunMode.MODES, mode))
        self.mode = mode
        self.allow_unknown_flag = bool(kwargs.pop('allow_unknown_flag', False))
        self.allow_unknown_command = bool(kwargs.pop('allow_unknown_command', False))
        self.userdata = kwargs.pop('userdata', None)
        self.max_distance = kwargs.pop('max_distance', None)

        print_help = kwargs.pop('print_help', None)
        if print_help is None:
            print_help = print
        elif not callable(print_help):
            raise TypeError('expected callable for print_help, not %r' % print_help)
        self.print_help = print_help

        if kwargs:
            raise TypeError('unexpected keyword arguments: %r' % sorted(kwargs.keys()))
        return

    def _show_help(self, cmd):
        logger.debug('help requested for %r', cmd.use())
        self.print_help(cmd.get_help_text())
        return ParseResult(help=True)

    async def _parse_flag(self, cmd, flag, flag_label, arg, value):
        # conversion and verify hook failures alike become
        # InvalidFlagArgument, with the original as the cause
        try:
            await flag.parse(value)
        except Exception as exc:
            suggestion = None
            if flag.values and flag.kind.startswith('string'):
                guess = flag.guess(value, self.max_distance)
                if guess is not None:
                    suggestion = '--%s=%s' % (flag.name, guess)
            raise InvalidFlagArgument.from_exc(cmd, flag_label, arg, value, exc,
                                               suggestion=suggestion) from exc

    async def parse(self, argv, cmd):
        """This method takes a list of argument strings, without the
        program name, and a root Command, and parses and dispatches
        them according to the parser's *mode*. Returns a
        :class:`ParseResult`.

        May raise a ParseCommandError subtype if the arguments fail to
        parse. Errors raised by executables pass through unwrapped.
        """
        argv = list(argv)
        mode = self.mode
        logger.debug('parsing %r against %r (mode: %s)', argv, cmd.use(), mode)

        cmd.flags.reset()
        args = []
        runner = Runner(cmd, args)
        runners = [runner] if mode in (RunMode.ALL, RunMode.RUNNER) else None

        help_flag = BoolFlag('help', short='h')
        flag, flag_label = None, ''

        for arg in argv:
            if help_flag.value:
                return self._show_help(cmd)

            if flag is not None:
                await self._parse_flag(cmd, flag, flag_label, arg, arg)
                flag = None
                continue

            if arg == '-':
                # conventionally stdin, never a flag
                args.append(arg)
                continue

            if arg.startswith('--'):
                name, value = _split_long_flag(arg[2:])
                flag_label = '"--%s"' % name
                flag = cmd.flags.find(name)
                if flag is None and name == 'help':
                    flag = help_flag
                if flag is not None:
                    if value is not None:
                        await self._parse_flag(cmd, flag, flag_label, arg, value)
                        flag = None
                    elif flag.is_bool():
                        await self._parse_flag(cmd, flag, flag_label, arg, '1')
                        flag = None
                    continue
                if not self.allow_unknown_flag:
                    guess = cmd.flags.guess(name, self.max_distance)
                    raise UnknownFlag.from_long(cmd, name, arg,
                                                guess.name if guess else None)
                args.append(arg)
                continue

            if arg.startswith('-'):
                flag = self._find_short(cmd, arg[1], help_flag)
                if flag is None:
                    if not self.allow_unknown_flag:
                        raise UnknownFlag.from_short(cmd, arg[1], arg)
                    args.append(arg)
                    continue
                flag, flag_label = await self._parse_shorthand(cmd, arg, flag, help_flag)
                continue

            if not args and cmd.has_children():
                found = cmd.child(arg)
                if found is not None:
                    logger.debug('matched subcommand %r', found.use())
                    found.flags.reset()
                    args = []
                    runner = Runner(found, args)
                    if runners is not None:
                        runners.append(runner)
                    cmd = found
                    continue
                if not self.allow_unknown_command:
                    guess = cmd.guess(arg, self.max_distance)
                    raise UnknownCommand.from_parse(cmd, arg, guess.name if guess else None)
            args.append(arg)

        if help_flag.value:
            return self._show_help(cmd)
        if flag is not None:
            raise MissingFlagArgument.from_last(cmd, flag_label, argv[-1])

        if mode == RunMode.RUNNER:
            return ParseResult(runners=runners)
        if mode == RunMode.ALL:
            for cur_runner in runners:
                await cur_runner.invoke(self.userdata)
            return ParseResult(values=[r.result for r in runners])
        await runner.invoke(self.userdata)
        return ParseResult(values=[runner.result])

    def _find_short(self, cmd, char, help_flag):
        flag = cmd.flags.find(char, short=True)
        if flag is None and char == 'h':
            flag = help_flag
        return flag

    async def _parse_shorthand(self, cmd, arg, flag, help_flag):
        """Work through a shorthand token like ``-abcVALUE``, one
        character at a time. Returns the flag still waiting on the
        next argument for its value (or None), and its label.
        """
        flag_label = '"-%s"' % arg[1]
        rest = arg[2:]
        while True:
            if not rest:
                if not flag.is_bool():
                    return flag, flag_label
                await self._parse_flag(cmd, flag, flag_label, arg, '1')
                return None, flag_label
            if rest.startswith('='):
                await self._parse_flag(cmd, flag, flag_label, arg, rest[1:])
                return None, flag_label
            if not flag.is_bool():
                # the rest of the token is the value, as in -p8080
                await self._parse_flag(cmd, flag, flag_label, arg, rest)
                return None, flag_label

            await self._parse_flag(cmd, flag, flag_label, arg, '1')
            if flag is help_flag:
                return None, flag_label

            char, rest = rest[0], rest[1:]
            flag_label = '"-%s"' % char
            flag = self._find_short(cmd, char, help_flag)
            if flag is None:
                raise UnknownFlag.from_short(cmd, char, arg)


async def parse_command(argv, cmd, **kwargs):
    """Parse *argv* against the command tree rooted at *cmd*, and
    dispatch. Keyword arguments are the same as for :class:`Parser`.

    Returns a :class:`ParseResult`.
    """
    return await Parser(**kwargs).parse(argv, cmd)
