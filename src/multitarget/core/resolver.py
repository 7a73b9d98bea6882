"""
Remote Source Resolver
======================

Fetches a HAL crate's manifest and primary source file from a GitHub
repository using raw-content URLs of the form
``<host>/<owner>/<repo>/<branch>/<path>``, then runs extraction and
classification over them to produce a CapabilityReport.

Branch fallback is an ordered list of candidates tried lazily: the first
branch that answers HTTP 200 wins and later branches are never requested.
The manifest and the source file each run their own fallback. Each branch
gets exactly one attempt.
"""

import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from multitarget.core.classifier import classify
from multitarget.core.errors import InvalidLocator, SourceUnavailable
from multitarget.core.extractor import (
    ExtractionResult,
    Parsed,
    Unparseable,
    extract_interfaces,
)
from multitarget.core.http import RawContentClient
from multitarget.models.glue import CapabilityReport

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://raw.githubusercontent.com"
DEFAULT_BRANCHES = ("main", "master")
DEFAULT_MANIFEST_PATH = "Cargo.toml"
DEFAULT_SOURCE_PATH = "src/lib.rs"

GITHUB_LOCATOR = re.compile(
    r"^https?://(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+?)(?:\.git)?/?$"
)

SOURCE_NOT_FOUND = "primary source not found"


class TextClient(Protocol):
    """Anything that can GET a URL and return its body on success, else None."""

    def get_text(self, url: str) -> Optional[str]: ...


@dataclass(frozen=True)
class RepositoryRef:
    """Owner/repository pair parsed from a locator."""

    owner: str
    repo: str
    locator: str

    def raw_url(self, host: str, branch: str, path: str) -> str:
        return f"{host.rstrip('/')}/{self.owner}/{self.repo}/{branch}/{path.lstrip('/')}"


@dataclass(frozen=True)
class ManifestInfo:
    """The parts of a Cargo manifest the analysis uses."""

    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FetchedSource:
    """Raw files retrieved for one repository."""

    repository: RepositoryRef
    manifest_text: str
    manifest_branch: str
    source_text: Optional[str] = None
    source_branch: Optional[str] = None


def parse_locator(locator: str) -> RepositoryRef:
    """
    Parse a GitHub repository URL.

    Raises:
        InvalidLocator: If the URL does not name a GitHub owner/repository
    """
    match = GITHUB_LOCATOR.match(locator.strip())
    if match is None:
        raise InvalidLocator(locator)
    return RepositoryRef(owner=match.group("owner"), repo=match.group("repo"), locator=locator)


def parse_manifest(text: str) -> ManifestInfo:
    """
    Read package name, version and dependency names from Cargo.toml text.

    An invalid manifest is reported through ``warnings`` rather than raised.
    Inherited values such as ``version.workspace = true`` are treated as absent.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Manifest is not valid TOML: {e}")
        return ManifestInfo(warnings=(f"Cargo.toml could not be parsed: {e}",))

    package = data.get("package", {})
    name = package.get("name") if isinstance(package.get("name"), str) else None
    version = package.get("version") if isinstance(package.get("version"), str) else None

    dependencies: List[str] = []
    tables: List[Any] = [data.get("dependencies", {})]
    for target_table in data.get("target", {}).values():
        if isinstance(target_table, dict):
            tables.append(target_table.get("dependencies", {}))
    for table in tables:
        if not isinstance(table, dict):
            continue
        for dep in table:
            if dep not in dependencies:
                dependencies.append(dep)

    return ManifestInfo(name=name, version=version, dependencies=tuple(dependencies))


@dataclass
class RemoteSourceResolver:
    """
    Fetches and analyzes a HAL crate hosted on GitHub.

    Args:
        client: HTTP client; a RawContentClient is created when omitted
        host: Raw-content host
        branches: Candidate branch names, tried in order
        manifest_path: Path of the package manifest inside the repository
        source_path: Path of the primary source file inside the repository

    Example:
        >>> resolver = RemoteSourceResolver()
        >>> report = resolver.analyze("https://github.com/acme/widget-hal")
        >>> report.version
        '1.2.0'
    """

    client: Optional[TextClient] = None
    host: str = DEFAULT_HOST
    branches: Sequence[str] = DEFAULT_BRANCHES
    manifest_path: str = DEFAULT_MANIFEST_PATH
    source_path: str = DEFAULT_SOURCE_PATH
    _owns_client: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = RawContentClient()
            self._owns_client = True

    @classmethod
    def from_config(cls, fetch: Dict[str, Any], client: Optional[TextClient] = None):
        """Build a resolver from the ``[fetch]`` configuration section."""
        owns_client = client is None
        if client is None:
            kwargs = {}
            if "timeout" in fetch:
                kwargs["timeout"] = fetch["timeout"]
            if "user_agent" in fetch:
                kwargs["user_agent"] = fetch["user_agent"]
            client = RawContentClient(**kwargs)
        return cls(
            client=client,
            host=fetch.get("host", DEFAULT_HOST),
            branches=tuple(fetch.get("branches", DEFAULT_BRANCHES)),
            manifest_path=fetch.get("manifest_path", DEFAULT_MANIFEST_PATH),
            source_path=fetch.get("source_path", DEFAULT_SOURCE_PATH),
            _owns_client=owns_client,
        )

    @property
    def module_name(self) -> str:
        return PurePosixPath(self.source_path).stem

    def _first_success(self, repo: RepositoryRef, path: str) -> Optional[Tuple[str, str]]:
        for branch in self.branches:
            url = repo.raw_url(self.host, branch, path)
            logger.debug(f"Trying {url}")
            text = self.client.get_text(url)
            if text is not None:
                logger.info(f"Fetched {path} from {repo.owner}/{repo.repo}@{branch}")
                return branch, text
            logger.debug(f"No {path} on branch '{branch}'")
        return None

    def fetch(self, locator: str) -> FetchedSource:
        """
        Fetch the manifest and primary source for ``locator``.

        Raises:
            InvalidLocator: If the locator is malformed
            SourceUnavailable: If no branch yields the manifest
        """
        repo = parse_locator(locator)

        manifest = self._first_success(repo, self.manifest_path)
        if manifest is None:
            raise SourceUnavailable(locator, self.branches)
        manifest_branch, manifest_text = manifest

        source = self._first_success(repo, self.source_path)
        if source is None:
            logger.warning(f"{self.source_path} not found in {repo.owner}/{repo.repo}")
            return FetchedSource(repo, manifest_text, manifest_branch)

        source_branch, source_text = source
        return FetchedSource(repo, manifest_text, manifest_branch, source_text, source_branch)

    def analyze(self, locator: str) -> CapabilityReport:
        """
        Fetch, extract and classify a HAL crate.

        Returns:
            A complete CapabilityReport. Parse problems and a missing source
            file become warnings on the report, not errors.

        Raises:
            InvalidLocator: If the locator is malformed
            SourceUnavailable: If no branch yields the manifest
        """
        fetched = self.fetch(locator)
        manifest = parse_manifest(fetched.manifest_text)

        result: ExtractionResult
        if fetched.source_text is None:
            result = Unparseable(SOURCE_NOT_FOUND)
        else:
            result = extract_interfaces(
                fetched.source_text,
                module=self.module_name,
                dependencies=manifest.dependencies,
            )

        return build_report(locator, manifest, result)

    def close(self) -> None:
        if self._owns_client and hasattr(self.client, "close"):
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def build_report(locator: str, manifest: ManifestInfo, result: ExtractionResult) -> CapabilityReport:
    """Combine manifest facts and an extraction outcome into a CapabilityReport."""
    warnings: List[str] = list(manifest.warnings)

    if isinstance(result, Parsed):
        interfaces = result.interfaces
        required = result.required_traits
    else:
        logger.warning(f"Analysis of {locator} degraded: {result.reason}")
        warnings.append(f"Could not analyze source: {result.reason}")
        interfaces = []
        required = []

    mocked, unmockable = classify(info.name for info in interfaces)
    warnings.extend(unmockable)

    return CapabilityReport(
        source=locator,
        version=manifest.version,
        package=manifest.name,
        traits=tuple(interfaces),
        required_traits=tuple(required),
        mocked_traits=tuple(mocked),
        warnings=tuple(warnings),
    )
