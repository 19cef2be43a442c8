"""
Rust code generation from assembled database schemas.

One snippet is produced per enum, composite type and table:
- Field types resolved through the backend's type mapper
- Imports and sibling dependencies collected per snippet
- Optional parallel processing of entities
- Deterministic finalization (sorted imports and dependencies)
"""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Final, Iterable, Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..database import CompositeType, DatabaseEnum, DatabaseSchema, Table
from ..mapping import Custom, TypeDescriptor, dependencies_for, imports_for, nullable, render
from ..shared import (
    SchemaError,
    SchemaValidationError,
    sanitize_field_name,
    sanitize_type_name,
    singularize,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

TypeResolver = Callable[[str], TypeDescriptor]


class EntityKind(Enum):
    ENUM = "enum"
    COMPOSITE = "composite"
    TABLE = "table"


@dataclass(frozen=True, slots=True)
class Options:
    """Formatting and execution options for a generation pass.

    Attributes:
        singular_names: Name entities after the singular form of their catalog name.
        parallel: Process entities on a thread pool.
        max_workers: Thread pool size; the executor default when None.
    """

    singular_names: bool = False
    parallel: bool = True
    max_workers: int | None = None


@dataclass(frozen=True, slots=True)
class Field:
    """A rendered struct field."""

    name: str
    type: str
    descriptor: TypeDescriptor


@dataclass(frozen=True)
class Snippet:
    """Generated source for one entity.

    ``identifier`` is the public name ``body`` declares. ``code`` is empty
    until the snippet is finalized.
    """

    id: str
    kind: EntityKind
    identifier: str
    body: str
    imports: frozenset[str] = frozenset()
    dependencies: frozenset[str] = frozenset()
    code: str = ""

    @property
    def finalized(self) -> bool:
        return bool(self.code)


@dataclass
class GeneratorContext:
    """Context for code generation with pre-compiled templates."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
            autoescape=False,
        )
        self._enum_template = self.template_env.get_template("enum.rs.j2")
        self._struct_template = self.template_env.get_template("struct.rs.j2")
        self._snippet_template = self.template_env.get_template("snippet.rs.j2")
        self._file_template = self.template_env.get_template("file.rs.j2")
        self._mod_template = self.template_env.get_template("mod.rs.j2")

    @property
    def enum_template(self):
        return self._enum_template

    @property
    def struct_template(self):
        return self._struct_template

    @property
    def snippet_template(self):
        return self._snippet_template

    @property
    def file_template(self):
        return self._file_template

    @property
    def mod_template(self):
        return self._mod_template


_default_context: GeneratorContext | None = None


def _get_default_context() -> GeneratorContext:
    global _default_context
    if _default_context is None:
        _default_context = GeneratorContext()
    return _default_context


class CodeGenerator:
    """Turns a :class:`DatabaseSchema` into unfinished :class:`Snippet` objects.

    Args:
        resolve_type: Maps a native type name to a descriptor, usually
            ``InfoProvider.map_type``.
        options: Formatting and execution options.
        context: Template context; shared default when None.
    """

    def __init__(
        self,
        resolve_type: TypeResolver,
        options: Options | None = None,
        context: GeneratorContext | None = None,
    ) -> None:
        self.resolve_type = resolve_type
        self.options = options or Options()
        self.ctx = context or _get_default_context()

    def format_name(self, name: str) -> str:
        """Apply the singularization option to an entity name."""
        if self.options.singular_names:
            return singularize(name)
        return name

    def type_name(self, name: str) -> str:
        return sanitize_type_name(self.format_name(name))

    def generate(self, schema: DatabaseSchema) -> list[Snippet]:
        """Generate one snippet per entity, enums first, then composites, then tables.

        Raises:
            SchemaValidationError: If two entities resolve to the same identifier.
            SchemaError: If generating any entity fails.
        """
        local_types = {
            entity.name: self.type_name(entity.name)
            for entity in (*schema.enumerations, *schema.composite_types)
        }
        tasks: list[tuple[EntityKind, Any]] = [
            *((EntityKind.ENUM, e) for e in schema.enumerations),
            *((EntityKind.COMPOSITE, c) for c in schema.composite_types),
            *((EntityKind.TABLE, t) for t in schema.tables),
        ]
        self._check_unique_identifiers(tasks)

        if self.options.parallel and len(tasks) > 1:
            snippets = self._generate_parallel(tasks, local_types)
        else:
            snippets = [
                self._generate_entity(kind, entity, local_types) for kind, entity in tasks
            ]

        logger.info("Generated %d snippet(s)", len(snippets))
        return snippets

    def _generate_parallel(
        self,
        tasks: Sequence[tuple[EntityKind, Any]],
        local_types: Mapping[str, str],
    ) -> list[Snippet]:
        results: list[Snippet | None] = [None] * len(tasks)
        with ThreadPoolExecutor(max_workers=self.options.max_workers) as executor:
            futures = {
                executor.submit(self._generate_entity, kind, entity, local_types): index
                for index, (kind, entity) in enumerate(tasks)
            }
            for future in as_completed(futures):
                index = futures[future]
                results[index] = future.result()
        return [snippet for snippet in results if snippet is not None]

    def _generate_entity(
        self,
        kind: EntityKind,
        entity: Any,
        local_types: Mapping[str, str],
    ) -> Snippet:
        try:
            if kind is EntityKind.ENUM:
                return self.code_from_enum(entity)
            if kind is EntityKind.COMPOSITE:
                return self.code_from_composite(entity, local_types)
            return self.code_from_table(entity, local_types)
        except SchemaError:
            raise
        except Exception as e:
            raise SchemaError(
                f"Failed to generate snippet for {kind.value} '{entity.name}': {e}"
            ) from e

    def _check_unique_identifiers(self, tasks: Iterable[tuple[EntityKind, Any]]) -> None:
        seen: dict[str, str] = {}
        for kind, entity in tasks:
            identifier = self.type_name(entity.name)
            if identifier in seen:
                raise SchemaValidationError(
                    f"{kind.value} '{entity.name}' and {seen[identifier]} "
                    f"both generate '{identifier}'",
                    field=entity.name,
                )
            seen[identifier] = f"{kind.value} '{entity.name}'"

    @staticmethod
    def _check_unique_members(
        kind: EntityKind,
        entity_name: str,
        what: str,
        pairs: Iterable[tuple[str, str]],
    ) -> None:
        seen: dict[str, str] = {}
        for original, generated in pairs:
            if generated in seen:
                raise SchemaValidationError(
                    f"{what} '{seen[generated]}' and '{original}' of {kind.value} "
                    f"'{entity_name}' both generate '{generated}'",
                    field=entity_name,
                )
            seen[generated] = original

    def _localize(self, descriptor: TypeDescriptor, local_types: Mapping[str, str]) -> TypeDescriptor:
        """Point custom descriptors at the generated sibling of the same catalog name."""
        if isinstance(descriptor, Custom):
            local = local_types.get(descriptor.native or "")
            if local is not None:
                return Custom(local, native=descriptor.native)
            return descriptor
        if isinstance(descriptor, Enum):
            return descriptor
        inner = self._localize(descriptor.inner, local_types)
        return dataclasses.replace(descriptor, inner=inner)

    def code_from_enum(self, enum: DatabaseEnum) -> Snippet:
        identifier = self.type_name(enum.name)
        variants = [sanitize_type_name(value.name, fallback="Value") for value in enum.values]
        self._check_unique_members(
            EntityKind.ENUM,
            enum.name,
            "values",
            zip((value.name for value in enum.values), variants),
        )
        body = self.ctx.enum_template.render(
            name=identifier,
            variants=variants,
        )
        return Snippet(
            id=self.format_name(enum.name),
            kind=EntityKind.ENUM,
            identifier=identifier,
            body=body,
        )

    def code_from_composite(
        self,
        composite: CompositeType,
        local_types: Mapping[str, str] | None = None,
    ) -> Snippet:
        identifier = self.type_name(composite.name)
        fields = [
            self._field(attribute.name, attribute.data_type, False, local_types or {})
            for attribute in composite.attributes
        ]
        self._check_unique_members(
            EntityKind.COMPOSITE,
            composite.name,
            "attributes",
            zip((a.name for a in composite.attributes), (f.name for f in fields)),
        )
        return self._struct_snippet(
            composite.name, EntityKind.COMPOSITE, identifier, fields, set()
        )

    def code_from_table(
        self,
        table: Table,
        local_types: Mapping[str, str] | None = None,
    ) -> Snippet:
        identifier = self.type_name(table.name)
        fields: list[Field] = []
        references: set[str] = set()

        for column in table.columns:
            fields.append(
                self._field(column.name, column.udt_name, column.is_nullable, local_types or {})
            )
            if column.foreign_key_table:
                references.add(self.type_name(column.foreign_key_table))

        self._check_unique_members(
            EntityKind.TABLE,
            table.name,
            "columns",
            zip((c.name for c in table.columns), (f.name for f in fields)),
        )

        return self._struct_snippet(
            table.name, EntityKind.TABLE, identifier, fields, references
        )

    def _field(
        self,
        name: str,
        native_type: str,
        is_nullable: bool,
        local_types: Mapping[str, str],
    ) -> Field:
        descriptor = self._localize(self.resolve_type(native_type), local_types)
        if is_nullable:
            descriptor = nullable(descriptor)
        return Field(
            name=sanitize_field_name(name),
            type=render(descriptor),
            descriptor=descriptor,
        )

    def _struct_snippet(
        self,
        name: str,
        kind: EntityKind,
        identifier: str,
        fields: Sequence[Field],
        references: set[str],
    ) -> Snippet:
        imports: set[str] = set()
        dependencies = set(references)
        for f in fields:
            imports |= imports_for(f.descriptor)
            dependencies |= dependencies_for(f.descriptor)
        # A self-referencing foreign key needs no import.
        dependencies.discard(identifier)

        body = self.ctx.struct_template.render(name=identifier, fields=fields)
        return Snippet(
            id=self.format_name(name),
            kind=kind,
            identifier=identifier,
            body=body,
            imports=frozenset(imports),
            dependencies=frozenset(dependencies),
        )


def apply_annotations(
    snippets: Iterable[Snippet],
    annotations: Mapping[EntityKind, Sequence[str]],
) -> list[Snippet]:
    """Prepend caller-supplied attribute lines to each snippet body, verbatim."""
    annotated: list[Snippet] = []
    for snippet in snippets:
        lines = annotations.get(snippet.kind, ())
        prefix = "".join(f"{line}\n" for line in lines)
        annotated.append(dataclasses.replace(snippet, body=prefix + snippet.body))
    return annotated


def finalize(snippet: Snippet, context: GeneratorContext | None = None) -> Snippet:
    """Render a snippet's final text.

    Imports come first, then sibling dependencies, each sorted, then a
    blank line when either is present, then the unmodified body.
    """
    ctx = context or _get_default_context()
    code = ctx.snippet_template.render(
        imports=sorted(snippet.imports),
        dependencies=sorted(snippet.dependencies),
        body=snippet.body,
    )
    return dataclasses.replace(snippet, code=code)


def generate_snippets(
    schema: DatabaseSchema,
    resolve_type: TypeResolver,
    options: Options | None = None,
    annotations: Mapping[EntityKind, Sequence[str]] | None = None,
) -> list[Snippet]:
    """Generate, annotate and finalize snippets for every entity of a schema."""
    generator = CodeGenerator(resolve_type, options)
    snippets = generator.generate(schema)
    if annotations:
        snippets = apply_annotations(snippets, annotations)
    return [finalize(snippet, generator.ctx) for snippet in snippets]
