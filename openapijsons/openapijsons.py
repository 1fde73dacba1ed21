"""

Command line utility to generate JSON Schema documents from OpenAPI specifications.

"""


import argparse
import json
import logging
import os
import sys
from openapijsons import _version
from openapijsons.messages import StructuralError
from openapijsons.openapitojsons import OpenApiLoadError, print_message

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INPUT_ERROR = 2
EXIT_OUTPUT_ERROR = 3
EXIT_CONVERSION_ERROR = 4

ARG_TYPES = {'str': str, 'int': int, 'float': float}


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
            if arg['type'] == 'bool':
                kwargs['action'] = 'store_true'
            else:
                kwargs['type'] = ARG_TYPES[arg['type']]
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            if arg['name'].startswith('-'):
                carg.required = arg.get('required', True)

def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)

def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Generate JSON Schema documents from OpenAPI specifications.')
    parser.add_argument('--version', action='store_true', help='Print the version of openapijsons.')
    parser.add_argument('--verbose', action='store_true', help='Log conversion details to stderr.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'openapijsons {_version.version}')
        return EXIT_OK

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    if getattr(args, 'verbose', False):
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
    if not command:
        print(f"Error: Command {args.command} not found.", file=sys.stderr)
        return EXIT_FAILURE

    input_file_path = getattr(args, 'input', None) or '-'
    output_file_path = getattr(args, 'out', None)

    module_name, func_name = command['function']['name'].rsplit('.', 1)
    func = dynamic_import(module_name, func_name)
    func_args = {}
    for arg, val in command['function']['args'].items():
        if val == 'input_file_path':
            func_args[arg] = input_file_path
        elif val == 'output_file_path':
            func_args[arg] = output_file_path
        elif val.startswith('args.'):
            if hasattr(args, val[5:]):
                func_args[arg] = getattr(args, val[5:])
        else:
            func_args[arg] = val

    try:
        func(**func_args)
    except OpenApiLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except StructuralError as e:
        print_message(e.to_message())
        return EXIT_CONVERSION_ERROR
    except OSError as e:
        print(f"ERROR: Failed to generate json: {e}", file=sys.stderr)
        return EXIT_OUTPUT_ERROR
    except Exception as e:  # pylint: disable=broad-except
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
