import gc

import pytest

from flagtree import Command, HelpFormatter


def get_cloud_cmd():
    def prepare_root(flags, cmd):
        flags.string('token', short='t', usage='API token')
        flags.uint('port', short='p', default=8080, usage='port to listen on')
        flags.bool('verbose')

    def prepare_deploy(flags, cmd):
        flags.string('env', default='prod')
        flags.bool('local', short='l')

    root = Command(name='cloud', usage='cloud tools',
                   usage_long='Cloud tools.\n\nManage deployments.',
                   prepare=prepare_root)
    root.add(Command(name='deploy', usage='deploy the app', prepare=prepare_deploy))
    root.add(Command(name='destroy', usage='tear it down'))
    root.add(Command(name='ls'))
    return root


def test_root_help():
    cmd = get_cloud_cmd()
    expected = '\n'.join([
        'Cloud tools.\n\nManage deployments.',
        '',
        'Usage:',
        '  cloud [flags]',
        '  cloud [command]',
        '',
        'Available Commands:',
        '  deploy    deploy the app',
        '  destroy   tear it down',
        '  ls',
        '',
        'Flags:',
        '  -h, --help bool       help for cloud',
        '  -p, --port uint       port to listen on (default 8080)',
        '  -t, --token string    API token',
        '      --verbose bool',
        '',
        'Use "cloud [command] --help" for more information about a command.'])
    assert cmd.get_help_text() == expected
    assert str(cmd) == expected


def test_subcommand_help():
    root = get_cloud_cmd()
    deploy = root.child('deploy')
    expected = ['deploy the app',
                '',
                'Usage:',
                '  cloud deploy [flags]',
                '',
                'Flags:',
                '  -h, --help bool       help for deploy',
                '      --env string      (default "prod")',
                '  -l, --local bool']
    assert deploy.get_help_text().splitlines() == expected

    # the error variant leaves off the preamble
    assert deploy.get_help_text(err=True).splitlines() == expected[2:]


def test_bare_help():
    cmd = Command(name='bare')
    assert cmd.get_help_text().splitlines() == ['Usage:',
                                                '  bare [flags]',
                                                '',
                                                'Flags:',
                                                '  -h, --help bool       help for bare']


def test_help_alignment():
    def prepare(flags, cmd):
        flags.strings('really-long-flag-name', usage='wide doc')
        flags.string('mode', short='m', values=['a', 'b'])

    cmd = Command(name='wide', prepare=prepare)
    flag_lines = cmd.get_help_text().split('Flags:\n')[1].splitlines()
    assert flag_lines[1] == '  -m, --mode string                      (values ["a", "b"])'

    docs = ('help for wide', '(values', 'wide doc')
    cols = [line.index(doc) for line, doc in zip(flag_lines, docs)]
    assert len(set(cols)) == 1


def test_help_formatter_overrides():
    fmtr = HelpFormatter(usage_label='USAGE',
                         flags_section_heading='Options:',
                         help_flag_usage='show help',
                         more_info='See "{use} help".')
    root = Command(name='tool', help_formatter=fmtr)
    root.add(Command(name='sub'))

    lines = root.get_help_text().splitlines()
    assert lines[0] == 'USAGE'
    assert 'Options:' in lines
    assert '  -h, --help bool       show help' in lines
    assert lines[-1] == 'See "tool help".'

    # subcommands don't inherit formatters
    assert root.child('sub').get_help_text().splitlines()[0] == 'Usage:'

    with pytest.raises(TypeError, match='unexpected keyword arguments'):
        HelpFormatter(usage_heading='USAGE')


def test_print_help(capsys):
    cmd = get_cloud_cmd()
    cmd.print_help()
    assert capsys.readouterr().out == cmd.get_help_text() + '\n'


def test_detached_subcommand_help():
    deploy = get_cloud_cmd().child('deploy')
    gc.collect()
    # nothing holds the root, so the path is just the subcommand's name
    assert deploy.parent is None
    assert deploy.get_help_text(err=True).splitlines()[:2] == ['Usage:', '  deploy [flags]']
