import sys
import asyncio
import weakref

from flagtree.errors import CommandError, CommandLineError, ParseCommandError
from flagtree.flags import Flags
from flagtree.helpers import DEFAULT_HELP_FORMATTER, HelpFormatter
from flagtree.parser import parse_command
from flagtree.utils import (format_usage,
                            guess_closest,
                            get_default_name,
                            docstring_to_usage,
                            format_nonexp_repr)


def process_command_name(name):
    """Validate a Command's name, generally on construction. Any
    non-empty string is accepted, as long as it can't be mistaken for
    a flag, i.e., it doesn't begin with a dash.
    """
    if not name or not isinstance(name, str):
        raise CommandError('expected non-zero length string for command name, not: %r' % (name,))
    if name.startswith('-'):
        raise CommandError("command name cannot begin with '-': %r" % name)
    return name


def default_print_error(msg):
    return sys.stderr.write(msg + '\n')


class Command(object):
    def __init__(self, run=None, name=None, usage=None, **kwargs):
        """One node in a tree of commands. Instantiate a Command, declare
        its flags, add subcommands to it, and then hand the root
        command to :func:`~flagtree.parser.parse_command`, or call
        :meth:`Command.execute` to parse ``sys.argv``.

        Note that only the first three constructor arguments are
        positional, the rest are keyword-only.

        A subcommand only weakly references its parent. Holding on to
        a subcommand alone does not keep the root alive, and once the
        root is freed, the subcommand's :meth:`use` path is just its
        own name.

        Args:
           run (callable): The executable called when this command is
              matched, as ``run(args, userdata, cmd)``, where *args*
              is the list of positional arguments collected for this
              command. May be a coroutine function.
           name (str): The name of this command, used to select it as
              a subcommand. Must not begin with a dash. Defaults to
              the name of the *run* (or *prepare*) function.
           usage (str): A one-line summary, shown in subcommand listings
              and help output. Defaults to the first paragraph of the
              *run* function's docstring.
           usage_long (str): A detailed description shown at the top
              of this command's own help. Defaults to *usage*.
           prepare (callable): Called once, during construction, as
              ``prepare(flags, cmd)`` with this command's
              :class:`~flagtree.flags.Flags`. Use it to declare flags,
              and return the executable, which takes the place of
              *run*. If it returns None, *run* is kept.
           help_formatter (HelpFormatter): Controls how help for this
              command is rendered.

        """
        usage_long = kwargs.pop('usage_long', None)
        prepare = kwargs.pop('prepare', None)
        help_formatter = kwargs.pop('help_formatter', None)
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r' % sorted(kwargs.keys()))

        if run is not None and not callable(run):
            raise CommandError('expected callable or None for run, not: %r' % (run,))
        if prepare is not None and not callable(prepare):
            raise CommandError('expected callable or None for prepare, not: %r' % (prepare,))

        if name is None:
            source = run if run is not None else prepare
            if source is None:
                raise CommandError('expected a command name, or a run or'
                                   ' prepare function to take the name from')
            name = get_default_name(source)
        self.name = process_command_name(name)

        if usage is not None and not isinstance(usage, str):
            raise CommandError('command usage must be a string or None, not: %r' % (usage,))
        if usage_long is not None and not isinstance(usage_long, str):
            raise CommandError('command usage_long must be a string or None, not: %r'
                               % (usage_long,))

        if help_formatter is None:
            help_formatter = DEFAULT_HELP_FORMATTER
        elif not isinstance(help_formatter, HelpFormatter):
            raise CommandError('expected HelpFormatter instance, not: %r' % (help_formatter,))
        self.help_formatter = help_formatter

        self._parent_ref = None
        self.children = {}
        self.flags = Flags(self)
        self.usage = format_usage(usage or '')
        self.usage_long = usage_long or self.usage
        self.run = run

        if prepare is not None:
            prepared = prepare(self.flags, self)
            if prepared is not None:
                if not callable(prepared):
                    raise CommandError('expected prepare to return a callable or'
                                       ' None, not: %r' % (prepared,))
                self.run = prepared

        if usage is None and self.run is not None:
            self.usage = format_usage(docstring_to_usage(self.run))
            self.usage_long = usage_long or self.usage
        return

    @property
    def parent(self):
        return self._parent_ref() if self._parent_ref is not None else None

    def add(self, *cmds, **kw):
        """Add one or more subcommands to this Command, and return this
        Command, for chaining.

        Arguments can be Command instances, or dicts of Command
        constructor arguments. If the first argument is a function,
        this method constructs a single Command from the arguments,
        the same as the Command constructor. Keyword arguments alone
        also construct a single Command::

            root.add(name='deploy', prepare=prepare_deploy)

        A CommandError is raised if a subcommand already belongs to a
        parent, or if this command already has a subcommand by the
        same name.
        """
        if cmds and callable(cmds[0]) and not isinstance(cmds[0], Command):
            cmds = [Command(*cmds, **kw)]
        elif kw:
            cmds = list(cmds) + [Command(**kw)]

        for subcmd in cmds:
            if isinstance(subcmd, dict):
                subcmd = Command(**subcmd)
            if not isinstance(subcmd, Command):
                raise CommandError('expected Command instance or dict of Command'
                                   ' arguments, not: %r' % (subcmd,))
            parent = subcmd.parent
            if parent is not None:
                raise CommandError('command "%s" already added to "%s"'
                                   % (subcmd.name, parent.use()))
            ancestor = self
            while ancestor is not None:
                if ancestor is subcmd:
                    raise CommandError('command "%s" cannot be added to its own'
                                       ' subcommand "%s"' % (subcmd.name, self.use()))
                ancestor = ancestor.parent
            if subcmd.name in self.children:
                raise CommandError('command "%s" already has command %s'
                                   % (self.use(), subcmd.name))
            subcmd._parent_ref = weakref.ref(self)
            self.children[subcmd.name] = subcmd
        return self

    def child(self, name):
        return self.children.get(name)

    def has_children(self):
        return bool(self.children)

    def guess(self, name, max_distance=None):
        """Returns the immediate subcommand whose name is closest to
        *name*, within *max_distance* edits, or None.
        """
        return guess_closest(name, self.children.values(), max_distance,
                             key=lambda cmd: cmd.name)

    def use(self):
        "The full command path from the root, e.g., ``'cloud deploy'``."
        names = [self.name]
        parent = self.parent
        while parent is not None:
            names.append(parent.name)
            parent = parent.parent
        return ' '.join(reversed(names))

    def get_help_text(self, err=False):
        return self.help_formatter.get_help_text(self, err=err)

    def print_help(self):
        print(self.get_help_text())

    def __str__(self):
        return self.get_help_text()

    def __iter__(self):
        return iter(self.children.values())

    def __repr__(self):
        return format_nonexp_repr(self, ['name'], ['usage'], opt_key=lambda v: not v)

    def execute(self, argv=None, **kwargs):
        """Parses arguments and dispatches to the matched command's
        executable, blocking until it completes. If there is a parse
        error due to invalid user input, the error is printed and a
        CommandLineError is raised. If not caught, a CommandLineError
        will exit the process with status code 1.

        Defaults to handling the arguments on the command line
        (``sys.argv[1:]``), but can also be explicitly passed
        arguments via the *argv* parameter. All other keyword
        arguments are passed on to :class:`~flagtree.parser.Parser`,
        except *print_error*, the function that prints error messages
        before exit.

        Returns the :class:`~flagtree.parser.ParseResult`.

        .. note:: This starts its own event loop. From async code,
                  await :func:`~flagtree.parser.parse_command` instead.
        """
        print_error = kwargs.pop('print_error', None)
        if print_error is None or print_error is True:
            print_error = default_print_error
        elif print_error and not callable(print_error):
            raise TypeError('expected callable for print_error, not %r'
                            % print_error)

        if argv is None:
            argv = sys.argv[1:]

        try:
            return asyncio.run(parse_command(list(argv), self, **kwargs))
        except ParseCommandError as pce:
            if print_error:
                print_error(str(pce))
            raise CommandLineError(pce.message)
