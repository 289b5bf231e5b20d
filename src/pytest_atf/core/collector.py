"""Configuration collector.

Reads test set configuration documents and builds normalized test sets
ready to be executed. Three formats are supported, selected by the file
extension:

- JSON (`.json`), with PascalCase field names;
- XML (`.xml`), with `<TestSet name="...">` as the root element, cases
  listed under `<Cases>` and steps under `<Steps>`;
- YAML (`.yaml`, `.yml`), with either PascalCase or snake_case names.
"""

import logging
from enum import StrEnum
from json import JSONDecodeError, loads
from pathlib import Path
from typing import TYPE_CHECKING, Any

from lxml import etree
from pydantic import ValidationError
from pydantic.alias_generators import to_pascal
from yaml import SafeLoader, load
from yaml.error import MarkedYAMLError

from pytest_atf.errors import ATFConfigError, ATFSchemaError, ErrorContext
from pytest_atf.schema import TestSet

if TYPE_CHECKING:
    from io import TextIOBase

if TYPE_CHECKING:
    from yaml import BaseLoader

logger = logging.getLogger(__name__)


class Format(StrEnum):
    """Supported configuration formats."""

    JSON = 'json'
    XML = 'xml'
    YAML = 'yaml'


#: Configuration file extensions and their formats.
EXTENSIONS = {
    '.json': Format.JSON,
    '.xml': Format.XML,
    '.yaml': Format.YAML,
    '.yml': Format.YAML,
}

#: XML elements holding lists of nested elements.
XML_LIST_TAGS = frozenset(('Cases', 'Steps'))
#: XML elements always holding a nested structure, even when empty.
XML_ELEMENT_TAGS = frozenset(('Action', 'Setup', 'Cleanup', 'SystemUnderTest'))
#: Expected XML root element.
XML_ROOT_TAG = 'TestSet'


def make_xml_parser() -> etree.XMLParser:
    """Create a parser that never resolves entities or fetches resources."""
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def element_to_data(element: 'etree._Element') -> dict[str, Any]:
    """Convert an XML element into a mapping of model fields.

    Attributes become PascalCase fields, list elements become lists,
    structural elements become nested mappings and any other element
    becomes a text field. Comments and processing instructions are
    skipped.

    Args:
        element: XML element to convert.

    Returns:
        Mapping suitable for model validation.
    """
    data: dict[str, Any] = {
        to_pascal(name): value
        for name, value in element.attrib.items()
    }

    for child in element:
        if not isinstance(child.tag, str):
            continue
        if child.tag in XML_LIST_TAGS:
            data[child.tag] = [element_to_data(item) for item in child]
        elif child.tag in XML_ELEMENT_TAGS:
            data[child.tag] = element_to_data(child)
        else:
            data[child.tag] = (child.text or '').strip()

    return data


class DocumentLoader:
    """Loader of test set configuration documents.

    In strict mode, expectations other than `Pass` and `XFail` are
    rejected at load time. Otherwise they are kept and evaluate to
    `NotTested`.
    """

    def __init__(self, loader: type['BaseLoader'] = SafeLoader, *,
                 strict: bool = False) -> None:
        """Initialize the loader.

        Args:
            loader: YAML loader class used for YAML documents.
            strict: Whether to reject invalid expectations.
        """
        self.loader = loader
        self.strict_mode = strict

    def parse(self, content: 'TextIOBase | str', fmt: Format | str, *,
              filename: str | None = None) -> Any:  # noqa: ANN401
        """Parse a configuration document into raw data.

        Args:
            content: Document as a string or file-like object.
            fmt: Document format.
            filename: Optional name of the source file.

        Returns:
            Raw document data.

        Raises:
            ATFSchemaError: If the format is unsupported or the document
                is not well-formed.
        """
        try:
            fmt = Format(fmt)
        except ValueError as base:
            raise ATFSchemaError(f'Unsupported configuration format {fmt!r}') from base

        if not isinstance(content, str) and fmt is not Format.YAML:
            content = content.read()

        match fmt:
            case Format.JSON:
                try:
                    return loads(content)
                except JSONDecodeError as base:
                    raise ATFSchemaError.from_json_error(base, filename=filename) from base

            case Format.XML:
                if isinstance(content, str):
                    content = content.encode('utf-8')
                try:
                    root = etree.fromstring(content, parser=make_xml_parser())  # noqa: S320
                except etree.XMLSyntaxError as base:
                    raise ATFSchemaError.from_xml_error(base, filename=filename) from base

                if root.tag != XML_ROOT_TAG:
                    raise ATFSchemaError(
                        f'Unexpected root element <{root.tag}>, expected <{XML_ROOT_TAG}>',
                        context=ErrorContext(filename=filename),
                    )

                return element_to_data(root)

            case _:
                try:
                    return load(content, Loader=self.loader)  # noqa: S506
                except MarkedYAMLError as base:
                    raise ATFSchemaError.from_yaml_error(base, filename=filename) from base

    def load(self, content: 'TextIOBase | str', *,
             fmt: Format | str = Format.YAML,
             filename: str | None = None) -> TestSet:
        """Load a test set from a configuration document.

        Args:
            content: Document as a string or file-like object.
            fmt: Document format.
            filename: Optional name of the source file.

        Returns:
            Normalized test set.

        Raises:
            ATFSchemaError: If the document cannot be parsed or does not
                describe a valid test set.
            ATFConfigError: If a test step has no action.
        """
        data = self.parse(content, fmt, filename=filename)
        if not isinstance(data, dict):
            raise ATFSchemaError('Test set document must be a mapping', context=ErrorContext(
                filename=filename,
                element=data,
            ))

        try:
            test_set = TestSet.model_validate(data, context={'strict': self.strict_mode})
        except ValidationError as base:
            raise ATFSchemaError.from_pydantic_error(
                base,
                data=data,
                filename=filename,
            ) from base

        try:
            test_set.normalize()
        except ATFConfigError as base:
            raise base.locate(filename=filename) from base

        logger.debug('Loaded test set %r with %d cases', test_set.name, len(test_set.cases))

        return test_set

    def load_file(self, path: Path | str) -> TestSet:
        """Load a test set from a configuration file.

        The format is selected from the file extension.

        Args:
            path: Path to the configuration file.

        Returns:
            Normalized test set.

        Raises:
            ATFSchemaError: If the file type is unsupported, the file
                cannot be read or its content is invalid.
            ATFConfigError: If a test step has no action.
        """
        path = Path(path)

        fmt = EXTENSIONS.get(path.suffix.lower())
        if fmt is None:
            raise ATFSchemaError(
                f'Unsupported configuration file type {path.suffix!r}',
                context=ErrorContext(filename=f'{path}'),
            )

        logger.info('Collecting test set from %s', path)

        try:
            content = path.read_text(encoding='utf-8')
        except OSError as base:
            raise ATFSchemaError(
                f'Cannot read configuration file: {base.strerror}',
                context=ErrorContext(filename=f'{path}'),
            ) from base

        return self.load(content, fmt=fmt, filename=f'{path}')


def collect(path: Path | str, *, strict: bool = False) -> TestSet:
    """Load a normalized test set from a configuration file.

    Args:
        path: Path to the configuration file.
        strict: Whether to reject invalid expectations.

    Returns:
        Normalized test set, ready to be executed.
    """
    return DocumentLoader(strict=strict).load_file(path)
