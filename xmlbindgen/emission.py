# pylint: disable=line-too-long

"""
Emission units and their registry.

A unit buffers the whole body of one generated artifact. Its header (package
line, imports, class opening) is produced only when the unit is closed, since
the imports and the foreign-namespace dependencies are discovered while the
body is written.
"""

import json
import logging
import os
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from xmlbindgen.common import process_template, write_file
from xmlbindgen.typemapper import TypeRef

logger = logging.getLogger(__name__)

INDENT = '    '


class ArtifactKind(Enum):
    """Kinds of per-namespace artifacts."""
    MODEL = 'model'
    FACTORY = 'factory'
    FACTORY_IMPL = 'factory-impl'
    JSON_SCHEMA = 'json-schema'
    XML_CODEC = 'xml-codec'
    JSON_CODEC = 'json-codec'


class NamespaceEmissionUnit:
    """Buffered output of one artifact of one namespace."""

    def __init__(self, namespace: str, kind: ArtifactKind, path: str) -> None:
        self.namespace = namespace
        self.kind = kind
        self.path = path
        self.dependencies: Dict[str, str] = {}
        self.closed = False

    def dependency_alias(self, namespace: str) -> str:
        """Alias of a foreign namespace, assigned in order of first use."""
        if namespace not in self.dependencies:
            self.dependencies[namespace] = f'ns{len(self.dependencies) + 1}'
        return self.dependencies[namespace]

    def add_used_type(self, ref: TypeRef):
        """Records a type reference made from this unit's body."""

    def render(self) -> str:
        """Full artifact text: header followed by the buffered body."""
        raise NotImplementedError

    def close(self):
        """Writes the artifact. A unit is closed once; later calls do nothing."""
        if self.closed:
            return
        self.closed = True
        write_file(self.path, self.render())
        logger.debug("Wrote %s", self.path)


class JavaEmissionUnit(NamespaceEmissionUnit):
    """A Java compilation unit with an import list derived from the references made by its body."""

    def __init__(self, namespace: str, kind: ArtifactKind, output_dir: str, package: str, class_name: str,
                 opening: Optional[Callable[['JavaEmissionUnit'], str]] = None) -> None:
        super().__init__(namespace, kind, os.path.join(output_dir, *package.split('.'), class_name + '.java'))
        self.package = package
        self.class_name = class_name
        self.opening = opening
        self.body: List[str] = []
        self.used_types: Dict[str, TypeRef] = {}
        self._claimed: Dict[str, str] = {class_name: f'{package}.{class_name}'}

    def write(self, text: str):
        """Appends text to the body."""
        self.body.append(text)

    def add_used_type(self, ref: TypeRef):
        for parameter in ref.parameters:
            self.add_used_type(parameter)
        if not ref.package:
            return
        outer = ref.name.split('.')[0]
        full = f'{ref.package}.{outer}'
        if outer not in self._claimed:
            self._claimed[outer] = full
        if full not in self.used_types:
            self.used_types[full] = TypeRef(ref.package, outer)

    def use(self, ref: TypeRef) -> str:
        """Records a reference and returns its source text."""
        self.add_used_type(ref)
        return self.type_name(ref)

    def type_name(self, ref: TypeRef) -> str:
        """Source text of a reference: simple name unless another class claimed it."""
        if not ref.package:
            text = ref.name
        else:
            outer = ref.name.split('.')[0]
            claimed = self._claimed.get(outer)
            text = ref.name if claimed in (None, f'{ref.package}.{outer}') else ref.qualified_name
        if ref.parameters:
            text += '<' + ', '.join(self.type_name(p) for p in ref.parameters) + '>'
        if ref.is_array:
            text += '[]'
        return text

    def imports(self) -> List[str]:
        """Sorted import list: used, non java.lang, foreign-package classes that own their simple name."""
        result = set()
        for full, ref in self.used_types.items():
            if ref.package in ('java.lang', self.package):
                continue
            if self._claimed.get(ref.name) != full:
                continue
            result.add(full)
        return sorted(result)

    def render(self) -> str:
        opening = self.opening(self) if self.opening is not None else ''
        header = process_template('javatemplates/unit_header.java.jinja', package=self.package, imports=self.imports())
        return header + opening + ''.join(self.body) + '}\n'


class JsonSchemaEmissionUnit(NamespaceEmissionUnit):
    """A JSON Schema document assembled from definitions added one type at a time."""

    def __init__(self, namespace: str, output_dir: str, package: str, schema_uri: str) -> None:
        super().__init__(namespace, ArtifactKind.JSON_SCHEMA, os.path.join(output_dir, f'{package}.schema.json'))
        self.package = package
        self.schema_uri = schema_uri
        self.definitions: Dict[str, Any] = {}
        self.top_level: List[str] = []
        self.closing: Optional[Callable[['JsonSchemaEmissionUnit'], None]] = None

    def document(self) -> Dict[str, Any]:
        """The schema document: header members first, then definitions and the top level choice."""
        if self.closing is not None:
            self.closing(self)
            self.closing = None
        doc: Dict[str, Any] = {'$schema': self.schema_uri, '$id': f'{self.package}.schema.json'}
        doc['definitions'] = self.definitions
        doc['oneOf'] = [{'$ref': f'#/definitions/{name}'} for name in self.top_level]
        return doc

    def render(self) -> str:
        return json.dumps(self.document(), indent=2) + '\n'


class EmissionRegistry:
    """
    Owns the persistent per-namespace units of one generation pass.

    Units are created on first use and closed together at the end of the pass.
    """

    def __init__(self, output_dir: str) -> None:
        self.output_dir = output_dir
        self._units: Dict[Tuple[str, ArtifactKind], NamespaceEmissionUnit] = {}

    def get(self, namespace: str, kind: ArtifactKind) -> Optional[NamespaceEmissionUnit]:
        """The unit of a namespace and kind, if it was created."""
        return self._units.get((namespace, kind))

    def unit(self, namespace: str, kind: ArtifactKind, create: Callable[[], NamespaceEmissionUnit]) -> NamespaceEmissionUnit:
        """Returns the unit for a namespace and kind, creating it on first use."""
        key = (namespace, kind)
        if key not in self._units:
            self._units[key] = create()
        return self._units[key]

    def namespaces(self) -> List[str]:
        """Namespaces that own at least one unit, in order of first use."""
        seen: Dict[str, None] = {}
        for namespace, _ in self._units:
            seen.setdefault(namespace, None)
        return list(seen)

    def close_all(self) -> bool:
        """
        Closes every unit, grouped by namespace. A failing unit does not keep
        the others from being written.

        Returns:
            bool: True if every unit was written.
        """
        success = True
        for namespace in self.namespaces():
            for kind in ArtifactKind:
                unit = self._units.get((namespace, kind))
                if unit is None or unit.closed:
                    continue
                try:
                    unit.close()
                except OSError as e:
                    logger.error("Failed to write %s: %s", unit.path, e)
                    success = False
        self._units.clear()
        return success
