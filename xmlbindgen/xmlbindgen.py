"""

Command line utility to generate Java bindings from XML Schema.

"""

import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional, Set

from xmlbindgen import _version
from xmlbindgen.emission import ArtifactKind

ARG_TYPES = {'str': str, 'int': int}

# switches that omit artifact kinds
ARTIFACT_SWITCHES = {
    'no_model': [ArtifactKind.MODEL],
    'no_factory': [ArtifactKind.FACTORY, ArtifactKind.FACTORY_IMPL],
    'no_jsonschema': [ArtifactKind.JSON_SCHEMA],
    'no_xml': [ArtifactKind.XML_CODEC],
    'no_json': [ArtifactKind.JSON_CODEC],
}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            kwargs = {
                'help': arg['help'],
            }
            if 'nargs' in arg:
                kwargs['nargs'] = arg['nargs']
            if 'choices' in arg:
                kwargs['choices'] = arg['choices']
            if 'default' in arg:
                kwargs['default'] = arg['default']
            if 'action' in arg:
                kwargs['action'] = arg['action']
            if arg['type'] == 'bool':
                kwargs['action'] = 'store_true'
            else:
                kwargs['type'] = ARG_TYPES[arg['type']]
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            if arg['name'].startswith('--'):
                carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def parse_namespace_map(values: Optional[List[str]]) -> Dict[str, str]:
    """
    Parses URI=package pairs. The split happens at the last '=' since
    namespace URIs may contain one.
    """
    package_map: Dict[str, str] = {}
    for value in values or []:
        if '=' not in value:
            raise ValueError(f"Invalid namespace mapping '{value}', expected URI=package")
        uri, package = value.rsplit('=', 1)
        package_map[uri] = package
    return package_map


def selected_artifacts(args) -> Set[ArtifactKind]:
    """Artifact kinds left after the --no-* switches."""
    artifacts = set(ArtifactKind)
    for switch, kinds in ARTIFACT_SWITCHES.items():
        if getattr(args, switch, False):
            artifacts.difference_update(kinds)
    return artifacts


def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Generate Java bindings, JSON Schema and stream codecs from XML Schema.')
    parser.add_argument('--version', action='store_true', help='Print the version of xmlbindgen.')
    parser.add_argument('--verbose', action='store_true', help='Log progress information.')
    parser.add_argument('--debug', action='store_true', help='Log debug information.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if args.version:
        print(f'xmlbindgen {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    try:
        command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
        if not command:
            print(f"Error: Command {args.command} not found.")
            sys.exit(1)

        args.package_map = parse_namespace_map(getattr(args, 'namespace_map', None))
        args.artifacts = selected_artifacts(args)

        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = {}
        for arg, val in command['function']['args'].items():
            if val.startswith('args.'):
                if hasattr(args, val[5:]):
                    func_args[arg] = getattr(args, val[5:])
            else:
                func_args[arg] = val
        result = func(**func_args)
    except Exception as e:  # pylint: disable=broad-except
        print(f"Error: {e}")
        sys.exit(1)

    if result is False:
        print("Error: some artifacts could not be written")
        sys.exit(2)


if __name__ == "__main__":
    main()
