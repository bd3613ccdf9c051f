class HelpFormatter(object):
    """Renders the help text for a Command: the long usage, a
    ``Usage:`` block, a table of subcommands, and a table of flags
    (including the built-in ``-h, --help``).

    Every label and spacing setting in *default_context* can be
    overridden by passing it as a keyword argument::

        HelpFormatter(flags_section_heading='Options:')

    Pass an instance to the Command constructor as *help_formatter*.
    """
    default_context = {
        'usage_label': 'Usage:',
        'subcmd_section_heading': 'Available Commands:',
        'flags_section_heading': 'Flags:',
        'section_break': '',
        'section_indent': '  ',
        'doc_separator': '   ',
        'min_pad': 8,
        'subcmd_pad': 3,
        'min_flag_width': 13,  # len('help bool') plus a little room
        'help_flag_usage': 'help for {name}',
        'more_info': 'Use "{use} [command] --help" for more information about a command.',
    }

    def __init__(self, **kwargs):
        ctx = {}
        for key, val in self.default_context.items():
            ctx[key] = kwargs.pop(key, val)
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r' % list(kwargs.keys()))
        self.ctx = ctx

    def get_help_text(self, cmd, err=False):
        """Render help for *cmd*. With *err* set, the long usage preamble
        is left off, for embedding in error messages.
        """
        ctx = self.ctx
        ret = []
        append = ret.append

        if not err and cmd.usage_long:
            append(cmd.usage_long)
            append(ctx['section_break'])

        ret.extend(self.get_usage_lines(cmd))

        if cmd.has_children():
            append(ctx['section_break'])
            ret.extend(self.get_subcmd_lines(cmd))

        append(ctx['section_break'])
        ret.extend(self.get_flag_lines(cmd))

        if cmd.has_children():
            append(ctx['section_break'])
            append(ctx['more_info'].format(use=cmd.use(), name=cmd.name))

        return '\n'.join(ret)

    def get_usage_lines(self, cmd):
        ctx = self.ctx
        use = cmd.use()
        ret = [ctx['usage_label'], ctx['section_indent'] + use + ' [flags]']
        if cmd.has_children():
            ret.append(ctx['section_indent'] + use + ' [command]')
        return ret

    def get_subcmd_lines(self, cmd):
        ctx = self.ctx
        children = sorted(cmd.children.values(), key=lambda c: c.name)
        pad = max([len(c.name) for c in children]) + ctx['subcmd_pad']
        pad = max(pad, ctx['min_pad'])

        ret = [ctx['subcmd_section_heading']]
        for child in children:
            line = ctx['section_indent'] + child.name.ljust(pad) + child.usage
            ret.append(line.rstrip())
        return ret

    def get_flag_lines(self, cmd):
        ctx = self.ctx
        flags = cmd.flags.get_flags()

        short_width = max([1] + [len(f.short) for f in flags])
        label_width = max([ctx['min_flag_width'], ctx['min_pad']]
                          + [len(f.name) + len(f.kind) + 1 for f in flags])

        ret = [ctx['flags_section_heading']]
        help_usage = ctx['help_flag_usage'].format(name=cmd.name)
        ret.append(self._format_flag_line('h', 'help bool', help_usage,
                                          short_width, label_width))
        for flag in flags:
            doc = ' '.join([s for s in (flag.usage,
                                        flag.default_string(),
                                        flag.values_string()) if s])
            ret.append(self._format_flag_line(flag.short, flag.name + ' ' + flag.kind,
                                              doc, short_width, label_width))
        return ret

    def _format_flag_line(self, short, label, doc, short_width, label_width):
        ctx = self.ctx
        indent = ctx['section_indent']
        if short:
            lhs = indent + '-' + short.ljust(short_width) + ', '
        else:
            lhs = indent + ' ' + ''.ljust(short_width) + '  '
        line = lhs + '--' + label.ljust(label_width) + ctx['doc_separator'] + doc
        return line.rstrip()


DEFAULT_HELP_FORMATTER = HelpFormatter()
