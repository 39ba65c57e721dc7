"""Render generated types and their CRUD accessor functions to Python source.

The renderer is dialect-agnostic: every SQL fragment comes from the
``DialectReader`` it was created with. Each ``render_*`` call returns new
text; nothing is accumulated between calls.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Final, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from ..dialects import DialectReader
from .model import GeneratedFile, GeneratedProperty, GeneratedType, import_for_type

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

AUTO_GENERATED_HEADER: Final[str] = "\n".join([
    "# <auto-generated>",
    "# This code was generated by a tool.",
    "# Changes to this file may cause incorrect behavior and will be lost if the code is regenerated.",
    "# </auto-generated>",
])

# Order in which accessor functions appear for each table
METHOD_ORDER: Final[tuple[str, ...]] = (
    "list",
    "insert",
    "get_by_id",
    "save",
    "update",
    "delete",
)

_EXTENSIONS_IMPORTS: Final[tuple[str, ...]] = (
    "from dataclasses import asdict",
    "from typing import Any",
)


@lru_cache(maxsize=256)
def _quote(value: str) -> str:
    """Quote a string for Python literal embedding. Cached for performance."""
    return json.dumps(value)


def _sort_imports(lines: Sequence[str]) -> list[str]:
    """Deduplicate import lines, plain imports first."""
    return sorted(set(lines), key=lambda line: (line.startswith("from "), line))


@dataclass(frozen=True, slots=True)
class PropertySets:
    """Write/read-back classification of a type's properties."""

    write: list[GeneratedProperty]
    read_back: list[GeneratedProperty]
    defaults: list[GeneratedProperty]


def classify(generated_type: GeneratedType) -> PropertySets:
    """Split properties into the write set, read-back set and default subset.

    The identity column is always read back, whatever its ``read_only``
    flag says, because the server assigns it.
    """
    write: list[GeneratedProperty] = []
    read_back: list[GeneratedProperty] = []

    for p in generated_type.properties:
        if p.name == generated_type.identity_column or p.read_only:
            read_back.append(p)
        else:
            write.append(p)

    return PropertySets(
        write=write,
        read_back=read_back,
        defaults=[p for p in write if p.has_default],
    )


@dataclass
class RenderContext:
    """Template environment with pre-compiled templates."""

    template_env: Environment = field(init=False)
    templates: dict[str, Template] = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self.template_env.filters["quote"] = _quote
        self.templates = {
            path.name.removesuffix(".py.j2"): self.template_env.get_template(path.name)
            for path in sorted(TEMPLATE_DIR.glob("*.py.j2"))
        }

    def render(self, template_name: str, **context: object) -> str:
        return self.templates[template_name].render(**context)


class Renderer:
    """Turns structural models into module source text for one dialect."""

    def __init__(self, dialect: DialectReader, context: RenderContext | None = None) -> None:
        self.dialect = dialect
        self.context = context or RenderContext()

    def _base_context(self, generated_file: GeneratedFile) -> dict[str, object]:
        generated_type = generated_file.generated_type
        return {
            "module": generated_file.module_name,
            "type_name": generated_type.name,
            "identity": generated_type.identity_property,
        }

    def render_type_module(self, generated_file: GeneratedFile) -> str:
        """Render the module declaring the data-holder type."""
        generated_type = generated_file.generated_type
        return self.context.render(
            "type_module",
            header=AUTO_GENERATED_HEADER,
            namespace=generated_file.namespace,
            table_name=generated_type.table_name,
            name=generated_type.name,
            imports=_sort_imports(
                [*generated_file.imports, "from dataclasses import dataclass"]
            ),
            properties=generated_type.properties,
        )

    def render_list_method(self, generated_file: GeneratedFile) -> str:
        generated_type = generated_file.generated_type
        columns = generated_type.column_names
        return self.context.render(
            "list",
            **self._base_context(generated_file),
            select_all_query=self.dialect.select_all_query(generated_type.table_name, columns),
            select_where_query=self.dialect.select_where_query(generated_type.table_name, columns),
        )

    def render_get_by_id_method(self, generated_file: GeneratedFile) -> str:
        generated_type = generated_file.generated_type
        identity = generated_type.identity_property
        if identity is None:
            return ""

        return self.context.render(
            "get_by_id",
            **self._base_context(generated_file),
            select_by_id_query=self.dialect.select_by_id_query(
                generated_type.table_name,
                generated_type.column_names,
                identity.name,
            ),
        )

    def render_insert_method(self, generated_file: GeneratedFile) -> str:
        """Render the insert function, choosing the basic or advanced shape.

        The advanced shape is needed as soon as one written column has a
        server default: whether that column goes into the INSERT or is read
        back can only be decided per call.
        """
        sets = classify(generated_file.generated_type)
        if not sets.defaults:
            return self._render_basic_insert(generated_file, sets)
        return self._render_advanced_insert(generated_file, sets)

    def _render_basic_insert(self, generated_file: GeneratedFile, sets: PropertySets) -> str:
        table_name = generated_file.generated_type.table_name
        insert_query = self.dialect.basic_insert_query(
            table_name,
            [p.name for p in sets.write],
            [p.name for p in sets.read_back],
        )
        return self.context.render(
            "insert_basic",
            **self._base_context(generated_file),
            insert_query=insert_query,
            read_columns=sets.read_back,
        )

    def _render_advanced_insert(self, generated_file: GeneratedFile, sets: PropertySets) -> str:
        table_name = generated_file.generated_type.table_name
        return self.context.render(
            "insert_advanced",
            **self._base_context(generated_file),
            fixed_columns=[p for p in sets.write if not p.has_default],
            read_columns=sets.read_back,
            default_columns=sets.defaults,
            output_text=self.dialect.advanced_insert_output_text(),
            output_column_template=self.dialect.output_column_template,
            quote_template=self.dialect.quote_template,
            quote_close=self.dialect.quote_close,
            insert_query=self.dialect.advanced_insert_query(table_name),
            default_values_query=self.dialect.default_values_insert_query(table_name),
        )

    def render_update_method(self, generated_file: GeneratedFile) -> str:
        generated_type = generated_file.generated_type
        identity = generated_type.identity_property
        if identity is None:
            return ""

        write_columns = [p.name for p in classify(generated_type).write]
        update_query = (
            self.dialect.update_query(generated_type.table_name, identity.name, write_columns)
            if write_columns
            else ""
        )
        return self.context.render(
            "update",
            **self._base_context(generated_file),
            update_query=update_query,
            select_by_id_query=self.dialect.select_by_id_query(
                generated_type.table_name,
                generated_type.column_names,
                identity.name,
            ),
        )

    def render_save_method(self, generated_file: GeneratedFile) -> str:
        if generated_file.generated_type.identity_property is None:
            return ""
        return self.context.render("save", **self._base_context(generated_file))

    def render_delete_method(self, generated_file: GeneratedFile) -> str:
        generated_type = generated_file.generated_type
        identity = generated_type.identity_property
        if identity is None:
            return ""

        return self.context.render(
            "delete",
            **self._base_context(generated_file),
            delete_query=self.dialect.delete_query(generated_type.table_name, identity.name),
        )

    def render_methods(self, generated_file: GeneratedFile) -> dict[str, str]:
        """Render every accessor that applies to the type, in ``METHOD_ORDER``.

        Tables without an identity column only get ``list`` and ``insert``.
        """
        renderers = {
            "list": self.render_list_method,
            "insert": self.render_insert_method,
            "get_by_id": self.render_get_by_id_method,
            "save": self.render_save_method,
            "update": self.render_update_method,
            "delete": self.render_delete_method,
        }
        methods: dict[str, str] = {}
        for kind in METHOD_ORDER:
            rendered = renderers[kind](generated_file)
            if rendered:
                methods[kind] = rendered
        return methods

    def render_extensions_module(
        self,
        generated_files: Sequence[GeneratedFile],
        namespace: str,
        database_name: str,
    ) -> str:
        """Render one module holding the accessors of every generated type."""
        stdlib_imports: list[str] = list(_EXTENSIONS_IMPORTS)
        type_imports: list[str] = []
        sections: list[str] = []

        for generated_file in generated_files:
            generated_type = generated_file.generated_type
            # annotations and default literals both refer to these modules
            for p in generated_type.properties:
                import_line = import_for_type(p.base_type)
                if import_line is not None:
                    stdlib_imports.append(import_line)
            type_imports.append(
                f"from {namespace}.{generated_file.module_name} import {generated_type.name}"
            )

            methods = self.render_methods(generated_file)
            sections.append(
                "\n\n\n".join(text.rstrip("\n") for text in methods.values())
            )

        return self.context.render(
            "extensions_module",
            header=AUTO_GENERATED_HEADER,
            database_name=database_name,
            imports=_sort_imports(stdlib_imports),
            type_imports=type_imports,
            sections=sections,
        )
