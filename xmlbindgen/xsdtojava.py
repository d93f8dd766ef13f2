# pylint: disable=line-too-long

""" Generates Java bindings, factories, JSON Schema documents and stream codecs from XML Schema """

import logging
from typing import Dict, Iterable, List, Optional

from xmlbindgen.context import BindingContext
from xmlbindgen.emission import ArtifactKind
from xmlbindgen.schemamodel import TypeSystem
from xmlbindgen.typestofactory import FactoryEmitter
from xmlbindgen.typestojava import ModelEmitter
from xmlbindgen.typestojsonbind import JsonCodecEmitter
from xmlbindgen.typestojsons import JsonSchemaEmitter
from xmlbindgen.typestoxmlbind import XmlCodecEmitter
from xmlbindgen.xsdtotypes import load_xsd

logger = logging.getLogger(__name__)


def generate_bindings(type_system: TypeSystem, output_dir: str, package_map: Optional[Dict[str, str]] = None,
                      artifacts: Optional[Iterable[ArtifactKind]] = None) -> bool:
    """
    Runs one generation pass over every global, document and attribute type.

    Model units are written as soon as a type is emitted; the per-namespace
    units are written together at the end of the pass. A unit that cannot be
    written is logged and skipped.

    Params:
    type_system: TypeSystem - The schema types to generate bindings for.
    output_dir: str - Root directory of the generated sources.
    package_map: Dict[str, str] | None - Java package per namespace URI; unmapped namespaces are derived from the URI.
    artifacts: Iterable[ArtifactKind] | None - Artifact kinds to generate, all when None.

    Returns:
    bool - True if every artifact was written.
    """
    selected = set(artifacts) if artifacts is not None else set(ArtifactKind)
    context = BindingContext(type_system, output_dir, package_map)
    model = ModelEmitter(context) if ArtifactKind.MODEL in selected else None
    emitters: List = []
    if ArtifactKind.FACTORY in selected or ArtifactKind.FACTORY_IMPL in selected:
        emitters.append(FactoryEmitter(context))
    if ArtifactKind.JSON_SCHEMA in selected:
        emitters.append(JsonSchemaEmitter(context))
    if ArtifactKind.XML_CODEC in selected:
        emitters.append(XmlCodecEmitter(context))
    if ArtifactKind.JSON_CODEC in selected:
        emitters.append(JsonCodecEmitter(context))

    success = True
    model_units = 0
    for t in type_system.all_types():
        if not context.eligibility.generated(t):
            logger.debug("Skipping %s, no bindings are generated for it", t)
            continue
        if model is not None:
            for unit in model.emit(t):
                try:
                    unit.close()
                    model_units += 1
                except OSError as e:
                    logger.error("Failed to write %s: %s", unit.path, e)
                    success = False
        for emitter in emitters:
            emitter.emit(t)

    namespaces = context.registry.namespaces()
    closed = context.registry.close_all()
    logger.info("Generated %d model units and the artifacts of %d namespaces in %s", model_units, len(namespaces), output_dir)
    return closed and success


def convert_xsd_to_java(xsd_paths, output_dir: str, package_map: Optional[Dict[str, str]] = None,
                        artifacts: Optional[Iterable[ArtifactKind]] = None) -> bool:
    """
    Loads XSD files and generates their Java bindings.

    Params:
    xsd_paths: str | List[str] - Paths of the XSD files. Imported and included files are followed.
    output_dir: str - Root directory of the generated sources.
    package_map: Dict[str, str] | None - Java package per namespace URI.
    artifacts: Iterable[ArtifactKind] | None - Artifact kinds to generate, all when None.
    """
    type_system = load_xsd(xsd_paths)
    return generate_bindings(type_system, output_dir, package_map, artifacts)
