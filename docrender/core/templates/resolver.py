"""
Template Resolver
=================

Ordered chain of template sources (bundled package templates, filesystem
directory) resolving a template name to its content by first-match lookup.
"""

from typing import Any, Callable, List, Optional, Tuple, Union
from abc import ABC, abstractmethod
from pathlib import Path
import jinja2

from docrender.config.logging import get_logger
from docrender.core.errors import (
    ConfigurationError,
    InvalidArgumentError,
    TemplateNotFoundError,
    degradable,
)

logger = get_logger(__name__)

DEFAULT_TEMPLATE_DIR = "templates"
DEFAULT_TEMPLATE_PACKAGE = "docrender"

# Loaders only need an environment for signature compatibility.
_LOOKUP_ENV = jinja2.Environment()


class TemplateSource(ABC):
    """A single place templates can be loaded from."""

    @property
    @abstractmethod
    def loader(self) -> jinja2.BaseLoader:
        """Jinja2 loader reading from this source."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Human readable location used in diagnostics."""
        pass

    def get_source(self, name: str) -> Optional[str]:
        """Return template content, or None when this source has no such template."""
        try:
            content, _, _ = self.loader.get_source(_LOOKUP_ENV, name)
        except jinja2.TemplateNotFound:
            return None
        return content

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"


class EmbeddedTemplateSource(TemplateSource):
    """Templates bundled as package data under ``package/prefix``."""

    def __init__(self, package: str, prefix: str = DEFAULT_TEMPLATE_DIR) -> None:
        self.package = package
        self.prefix = prefix.strip("/")
        try:
            self._loader = jinja2.PackageLoader(package, self.prefix)
        except ModuleNotFoundError as e:
            raise ConfigurationError(f"Template package does not exist: {package}") from e

    @property
    def loader(self) -> jinja2.BaseLoader:
        return self._loader

    def describe(self) -> str:
        return f"package:{self.package}/{self.prefix}"


class FileSystemTemplateSource(TemplateSource):
    """Templates stored in a filesystem directory."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self._loader = jinja2.FileSystemLoader(str(self.directory), encoding="utf-8")

    @property
    def loader(self) -> jinja2.BaseLoader:
        return self._loader

    def describe(self) -> str:
        return f"directory:{self.directory}"


class TemplateSourceChain:
    """Immutable, ordered sequence of template sources."""

    def __init__(self, sources: Tuple[TemplateSource, ...] = ()) -> None:
        self._sources = tuple(sources)

    @property
    def sources(self) -> Tuple[TemplateSource, ...]:
        return self._sources

    @property
    def filesystem_root(self) -> Optional[Path]:
        """Directory of the first filesystem tier, if the chain has one."""
        for source in self._sources:
            if isinstance(source, FileSystemTemplateSource):
                return source.directory
        return None

    def describe(self) -> Tuple[str, ...]:
        return tuple(source.describe() for source in self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"TemplateSourceChain({', '.join(self.describe())})"


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class TemplateResolver:
    """
    Resolves template names against a configured source chain.

    The chain is replaced as a whole by ``configure_single`` and
    ``configure_chain``; it is never reordered per call. Resolution is
    first-match, uncached, and never merges content across sources.
    """

    def __init__(
        self,
        chain: Optional[TemplateSourceChain] = None,
        package: str = DEFAULT_TEMPLATE_PACKAGE,
    ) -> None:
        self.package = package
        self.logger: Any = logger.bind(component="resolver")  # structlog.BoundLoggerBase
        self._chain = chain or TemplateSourceChain()

    @property
    def chain(self) -> TemplateSourceChain:
        return self._chain

    @property
    def sources(self) -> Tuple[TemplateSource, ...]:
        return self._chain.sources

    @property
    def filesystem_root(self) -> Optional[Path]:
        return self._chain.filesystem_root

    @property
    def loader(self) -> jinja2.BaseLoader:
        """Jinja2 loader trying each source of the chain in order."""
        return jinja2.ChoiceLoader([source.loader for source in self._chain.sources])

    def configure_single(self, directory: Union[str, Path]) -> TemplateSourceChain:
        """
        Load templates from one filesystem directory only.

        Raises:
            ConfigurationError: If the path does not exist or is not a directory
        """
        path = Path(directory)
        if not path.exists() or not path.is_dir():
            raise ConfigurationError(f"Template directory does not exist: {directory}")

        self._chain = TemplateSourceChain((FileSystemTemplateSource(path),))
        self.logger.info("Templates configured from directory", directory=str(path))
        return self._chain

    def configure_chain(
        self,
        embedded_prefix: Optional[str] = None,
        filesystem_dir: Union[str, Path, None] = None,
    ) -> TemplateSourceChain:
        """
        Load templates from bundled package data first, then a filesystem directory.

        Blank arguments default to ``"templates"``. A missing directory is
        created; when that fails the chain degrades to bundled templates only.

        Raises:
            ConfigurationError: If the filesystem path exists but is not a directory
        """
        prefix = DEFAULT_TEMPLATE_DIR if _blank(embedded_prefix) else str(embedded_prefix).strip()
        directory = Path(DEFAULT_TEMPLATE_DIR if _blank(filesystem_dir) else filesystem_dir)

        sources: List[TemplateSource] = []
        with degradable(
            self.logger,
            "Bundled templates not available",
            package=self.package,
            prefix=prefix,
        ):
            sources.append(EmbeddedTemplateSource(self.package, prefix))

        if not directory.exists():
            with degradable(
                self.logger, "Could not create template directory", directory=str(directory)
            ):
                directory.mkdir(parents=True)

        if directory.exists():
            if not directory.is_dir():
                raise ConfigurationError(f"Template path is not a directory: {directory}")
            sources.append(FileSystemTemplateSource(directory))

        self._chain = TemplateSourceChain(tuple(sources))
        self.logger.info("Template source chain configured", sources=list(self._chain.describe()))
        return self._chain

    def resolve(self, name: str) -> str:
        """
        Return the content of the first source holding ``name``.

        Raises:
            InvalidArgumentError: If the name is blank
            TemplateNotFoundError: If no configured source has the template
        """
        if _blank(name):
            raise InvalidArgumentError("Template name cannot be empty")

        for source in self._chain.sources:
            content = source.get_source(name)
            if content is not None:
                self.logger.debug("Template resolved", template=name, source=source.describe())
                return content

        raise TemplateNotFoundError(name, self._chain.describe())

    def list_templates(self) -> List[str]:
        """Sorted names of all templates visible through the chain."""
        names = set()
        for source in self._chain.sources:
            names.update(source.loader.list_templates())
        return sorted(names)


class ResolverLoader(jinja2.BaseLoader):
    """
    Jinja2 loader reading through a resolver's current chain.

    The chain is looked up on every load, so ``{% include %}`` follows
    reconfiguration of the resolver without rebuilding the environment.
    """

    def __init__(self, resolver: TemplateResolver) -> None:
        self.resolver = resolver

    def get_source(
        self, environment: jinja2.Environment, template: str
    ) -> Tuple[str, Optional[str], Optional[Callable[[], bool]]]:
        return self.resolver.loader.get_source(environment, template)

    def list_templates(self) -> List[str]:
        return self.resolver.list_templates()
