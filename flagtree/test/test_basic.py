import gc

import pytest

from flagtree import Command, CommandError, Flags, StringFlag, IntFlag, UintFlag


def test_cmd_name():

    def handler(args, userdata, cmd):
        return 0

    Command(handler, name='ok_cmd')

    name_err_map = {'': 'non-zero length string',
                    5: 'non-zero length string',
                    '-name': "cannot begin with '-'",
                    '--name': "cannot begin with '-'"}

    for name, err in name_err_map.items():
        with pytest.raises(CommandError, match=err):
            Command(handler, name=name)

    with pytest.raises(CommandError, match='expected a command name'):
        Command()

    return


def test_cmd_default_name_and_usage():

    def deploy_app(args, userdata, cmd):
        """Deploy the app to an
        environment.

        Longer description.
        """

    cmd = Command(deploy_app)
    assert cmd.name == 'deploy-app'
    assert cmd.usage == 'Deploy the app to an environment.'
    assert cmd.usage_long == cmd.usage

    cmd = Command(deploy_app, 'deploy', 'ship it', usage_long='Ship it.\n\nReally.')
    assert cmd.usage == 'ship it'
    assert cmd.usage_long == 'Ship it.\n\nReally.'

    class StatusReport(object):
        def __call__(self, args, userdata, cmd):
            return 'ok'

    assert Command(StatusReport()).name == 'status-report'

    with pytest.raises(TypeError, match='unexpected keyword arguments'):
        Command(deploy_app, flags=[])


def test_cmd_usage_normalized():
    cmd = Command(name='app', usage='an   app\n that does things')
    assert cmd.usage == 'an app that does things'


def test_cmd_prepare():
    seen = {}

    def run(args, userdata, cmd):
        return 'run'

    def prepared_run(args, userdata, cmd):
        return 'prepared'

    def prepare(flags, cmd):
        seen['flags'] = flags
        seen['cmd'] = cmd
        flags.uint('port', short='p')
        return prepared_run

    cmd = Command(run, name='app', prepare=prepare)
    assert cmd.run is prepared_run
    assert seen['flags'] is cmd.flags
    assert seen['cmd'] is cmd
    assert cmd.flags.find('port').kind == 'uint'

    def declare_only(flags, cmd):
        flags.bool('verbose')

    cmd = Command(run, name='app', prepare=declare_only)
    assert cmd.run is run
    assert 'verbose' in cmd.flags

    # name can come from prepare, too
    assert Command(prepare=declare_only).name == 'declare-only'

    with pytest.raises(CommandError, match='expected prepare to return a callable'):
        Command(name='app', prepare=lambda flags, cmd: 'nope')
    with pytest.raises(CommandError):
        Command('not callable', name='app')


def test_cmd_add():
    root = Command(name='cloud')
    deploy = Command(name='deploy', usage='deploy things')

    assert not root.has_children()
    assert root.add(deploy) is root
    assert root.has_children()
    assert root.child('deploy') is deploy
    assert root.child('nope') is None
    assert deploy.parent is root
    assert root.parent is None
    assert list(root) == [deploy]

    # dicts of arguments, functions, and keyword arguments all make subcommands
    def logs(args, userdata, cmd):
        "show logs"

    root.add({'name': 'status', 'usage': 'show status'},
             {'name': 'scale'})
    root.add(logs)
    root.add(name='login', usage='log in')
    assert sorted(root.children) == ['deploy', 'login', 'logs', 'scale', 'status']
    assert root.child('logs').usage == 'show logs'
    assert root.child('status').parent is root

    with pytest.raises(CommandError, match='already has command deploy'):
        root.add(Command(name='deploy'))

    other = Command(name='other')
    with pytest.raises(CommandError, match='already added to "cloud"'):
        other.add(deploy)

    with pytest.raises(CommandError, match='cannot be added to its own subcommand'):
        deploy.add(root)
    with pytest.raises(CommandError, match='cannot be added to its own subcommand'):
        root.add(root)

    with pytest.raises(CommandError, match='expected Command instance'):
        root.add('not a command')


def test_cmd_use_and_guess():
    root = Command(name='cloud')
    deploy = Command(name='deploy')
    staging = Command(name='staging')
    root.add(deploy, Command(name='destroy'))
    deploy.add(staging)

    assert root.use() == 'cloud'
    assert deploy.use() == 'cloud deploy'
    assert staging.use() == 'cloud deploy staging'

    assert root.guess('deplyo').name == 'deploy'
    assert root.guess('destory').name == 'destroy'
    assert root.guess('xxxxxxxx') is None
    assert root.guess('deplyo', max_distance=0) is None
    # only immediate children are guessed
    assert root.guess('staging') is None


def test_cmd_parent_is_weak():
    child = Command(name='child')
    Command(name='root').add(child)
    gc.collect()
    assert child.parent is None
    assert child.use() == 'child'


def test_flags_registry():
    cmd = Command(name='app')
    flags = cmd.flags
    assert isinstance(flags, Flags)
    assert flags.cmd is cmd
    assert len(flags) == 0
    assert list(flags) == []

    port = flags.uint('port', short='p', default=8080)
    verbose = flags.bool('verbose', short='v')
    config = flags.string('config')
    assert len(flags) == 3

    assert flags.find('port') is port
    assert flags.find('p', short=True) is port
    assert flags.find('p') is None
    assert flags.find('config') is config
    assert flags.find('c', short=True) is None

    # sorted by long name, recomputed when flags are added
    assert [f.name for f in flags] == ['config', 'port', 'verbose']
    flags.add(IntFlag('another'))
    assert [f.name for f in flags] == ['another', 'config', 'port', 'verbose']

    assert flags.guess('prot') is port
    assert flags.guess('verbos') is verbose
    assert flags.guess('zzzzzzzz') is None
    assert flags.guess('prot', max_distance=0) is None


def test_flags_registry_errors():
    root = Command(name='cloud')
    cmd = Command(name='deploy')
    root.add(cmd)
    flags = cmd.flags
    flags.string('env', short='e')

    with pytest.raises(CommandError, match='cloud deploy flag redefined: env'):
        flags.uint('env')
    with pytest.raises(CommandError, match='it\'s already used for "env" flag'):
        flags.bool('edit', short='e')
    with pytest.raises(CommandError, match='expected Flag instance'):
        flags.add('env')
    with pytest.raises(CommandError, match='unknown flag kind'):
        flags.define('complex', 'ratio')

    # the same names are fine on another command
    root.flags.string('env', short='e')


def test_flags_registry_factories():
    flags = Flags()
    kinds = {'string': flags.string, 'string[]': flags.strings,
             'number': flags.number, 'number[]': flags.numbers,
             'int': flags.int, 'int[]': flags.ints,
             'uint': flags.uint, 'uint[]': flags.uints,
             'bigint': flags.bigint, 'bigint[]': flags.bigints,
             'bool': flags.bool, 'bool[]': flags.bools}
    for i, (kind, factory) in enumerate(sorted(kinds.items())):
        flag = factory('flag%s' % i)
        assert flag.kind == kind
        assert flags.find(flag.name) is flag
    assert len(flags) == len(kinds)


@pytest.mark.asyncio
async def test_flags_reset():
    flags = Flags()
    port = UintFlag('port', default=80)
    name = StringFlag('name')
    flags.add(port, name)

    await port.parse('8080')
    await name.parse('svc')
    flags.reset()
    assert port.value == 80
    assert name.value is None
