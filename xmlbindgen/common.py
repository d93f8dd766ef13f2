"""
Common utility functions for xmlbindgen.
"""

# pylint: disable=line-too-long

import os
import re

import jinja2

from xmlbindgen.constants import JAVA_KEYWORDS


def _words(string: str) -> list:
    words = []
    for part in re.split(r'[_\-\s]', string):
        if part:
            words.extend(re.findall(r'[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+|[0-9]+', part) or [part])
    return words or [string]


def pascal(string):
    """
    Convert a string to PascalCase from snake_case, kebab-case, camelCase, or PascalCase.
    Dots are preserved in the output. A leading underscore is preserved.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    if '.' in string:
        return '.'.join(pascal(s) for s in string.split('.'))
    if not string:
        return string
    startswith_under = string[0] == '_'
    result = ''.join(word[0].upper() + word[1:] for word in _words(string))
    if startswith_under:
        result = '_' + result
    return result


def camel(string):
    """
    Convert a string to camelCase from snake_case, kebab-case, camelCase, or PascalCase.
    Dots are preserved in the output.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in camelCase.
    """
    if '.' in string:
        return '.'.join(camel(s) for s in string.split('.'))
    if not string:
        return string
    words = _words(string)
    first = words[0]
    # an all-caps leading acronym is lowered as a whole
    if first.isupper():
        first = first.lower()
    else:
        first = first[0].lower() + first[1:]
    return first + ''.join(word[0].upper() + word[1:] for word in words[1:])


def java_identifier(name: str) -> str:
    """Makes a name usable as a Java identifier."""
    safe = re.sub(r'[^a-zA-Z0-9_]', '_', name)
    if not safe:
        return '_'
    if safe[0].isdigit():
        safe = '_' + safe
    if safe in JAVA_KEYWORDS:
        safe = safe + '_'
    return safe


def enum_constant_name(value: str) -> str:
    """Derives an upper snake case Java enum constant name from an enumeration value."""
    if not value:
        return 'EMPTY'
    words = re.findall(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+', value)
    name = '_'.join(w.upper() for w in words) if words else re.sub(r'[^a-zA-Z0-9]', '_', value).upper()
    if not name:
        name = 'EMPTY'
    if name[0].isdigit():
        name = '_' + name
    if name.lower() in JAVA_KEYWORDS:
        name = name + '_'
    return name


def plural(name: str) -> str:
    """Appends an 's' unless the name already ends with one."""
    return name if name.endswith('s') else name + 's'


def java_string_literal(text: str) -> str:
    """Renders text as a quoted Java string literal."""
    escaped = text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n').replace('\r', '\\r').replace('\t', '\\t')
    return f'"{escaped}"'


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package directory.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, keep_trailing_newline=True)
    template_env.filters['pascal'] = pascal
    template_env.filters['camel'] = camel
    template = template_env.get_template(file_path)
    return template.render(**kvargs)


def write_file(file_path: str, content: str):
    """
    Write text to a file, creating the parent directories.

    Raises:
        OSError: when the directory cannot be created or the file cannot be written.
    """
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(content)
