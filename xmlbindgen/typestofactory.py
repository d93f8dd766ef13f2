""" Generates the per-namespace factory interface and its default implementation """

import logging
from typing import List, Optional

from xmlbindgen.common import process_template
from xmlbindgen.constants import DEFAULT_FACTORY_NAME, FACTORY_NAME, IMPL_SUBPACKAGE
from xmlbindgen.context import BindingContext
from xmlbindgen.emission import INDENT, ArtifactKind, JavaEmissionUnit
from xmlbindgen.schemamodel import TypeNode
from xmlbindgen.typemapper import TypeRef

logger = logging.getLogger(__name__)


class FactoryEmitter:
    """Adds one construction operation per constructible type to the namespace's factory units."""

    def __init__(self, context: BindingContext) -> None:
        self.context = context
        self.naming = context.naming
        self.classifier = context.classifier
        self.eligibility = context.eligibility

    def factory_ref(self, namespace: str) -> TypeRef:
        """The factory interface of a namespace."""
        return TypeRef(self.context.package(namespace), FACTORY_NAME)

    def default_factory_ref(self, namespace: str) -> TypeRef:
        """The default factory implementation of a namespace."""
        return TypeRef(f'{self.context.package(namespace)}.{IMPL_SUBPACKAGE}', DEFAULT_FACTORY_NAME)

    def is_constructible(self, t: TypeNode) -> bool:
        """Concrete eligible types with an implementation class, excluding element-name collisions."""
        if not self.eligibility.generated(t) or t.is_abstract or t.is_simple_type:
            return False
        if t.is_document:
            content = t.content_type
            if content is None or content.is_simple_type or self.naming.is_colliding_document(t):
                return False
        return True

    def interface_unit(self, namespace: str) -> JavaEmissionUnit:
        """The persistent factory interface unit of a namespace."""
        ref = self.factory_ref(namespace)

        def create() -> JavaEmissionUnit:
            def opening(_unit: JavaEmissionUnit) -> str:
                return process_template('javatemplates/factory.java.jinja', namespace=namespace, class_name=ref.name)
            return JavaEmissionUnit(namespace, ArtifactKind.FACTORY, self.context.output_dir, ref.package, ref.name, opening)

        return self.context.registry.unit(namespace, ArtifactKind.FACTORY, create)

    def impl_unit(self, namespace: str) -> JavaEmissionUnit:
        """The persistent default factory unit of a namespace."""
        ref = self.default_factory_ref(namespace)

        def create() -> JavaEmissionUnit:
            unit = JavaEmissionUnit(namespace, ArtifactKind.FACTORY_IMPL, self.context.output_dir, ref.package, ref.name,
                                    lambda u: self._impl_opening(u, namespace))
            # the local interface owns the simple name 'Factory'
            unit.use(self.factory_ref(namespace))
            return unit

        return self.context.registry.unit(namespace, ArtifactKind.FACTORY_IMPL, create)

    def _impl_opening(self, unit: JavaEmissionUnit, namespace: str) -> str:
        dependencies = []
        for foreign, alias in unit.dependencies.items():
            if self.context.registry.get(foreign, ArtifactKind.FACTORY) is None:
                logger.debug("No factory generated for namespace %s, dependency of %s dropped", foreign, namespace)
                continue
            dependencies.append((unit.use(self.factory_ref(foreign)), f'{alias}Factory',
                                 unit.use(self.default_factory_ref(foreign))))
        return process_template('javatemplates/factory_impl.java.jinja', namespace=namespace,
                                class_name=DEFAULT_FACTORY_NAME, interface=unit.use(self.factory_ref(namespace)),
                                dependencies=dependencies)

    def referenced_namespaces(self, t: TypeNode) -> List[str]:
        """Foreign namespaces of the generated base and the property types of a type."""
        referenced: List[Optional[TypeNode]] = [self.classifier.model_base(t)]
        referenced.extend(info.value_node for info in self.classifier.describe_all(t))
        result: List[str] = []
        for node in referenced:
            if node is None or node.is_simple_type or not self.eligibility.generated(node):
                continue
            if node.namespace != t.namespace and node.namespace not in result:
                result.append(node.namespace)
        return result

    def emit(self, t: TypeNode):
        """Registers the construction operation of a type, if it is constructible."""
        if not self.is_constructible(t):
            return
        iface = self.interface_unit(t.namespace)
        impl = self.impl_unit(t.namespace)
        name = self.naming.short_name(t)
        model = self.naming.full_name(t)

        iface_type = iface.use(model)
        iface.write(f"{INDENT}\n{INDENT}\n{INDENT}public {iface_type} new{name}();\n")

        impl_type = impl.use(model)
        impl_class = impl.use(self.naming.impl_name(t))
        impl.write(f"{INDENT}\n{INDENT}\n{INDENT}@Override\n{INDENT}public {impl_type} new{name}()\n{INDENT}{{\n"
                   f"{INDENT}{INDENT}return new {impl_class}();\n{INDENT}}}\n")

        for namespace in self.referenced_namespaces(t):
            impl.dependency_alias(namespace)
