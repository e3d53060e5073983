"""Subprocess wrappers for git, helm and dyff.

These produce the raw diff text the analysis engine consumes; none of the
diff logic lives here.
"""

from __future__ import annotations

import difflib
import logging
import os
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from chartdiff.config.schema import HelmConfig

_log = logging.getLogger(__name__)

_REPO_URL_RE = re.compile(r"^(https?://|git@)")
_CHART_DIR_HINTS = ("charts", "chart", "helm-charts", "helm")
_SAMPLE = 10
MAX_TAGS = 50
MAX_BRANCHES = 20


class HelmError(Exception):
    """Raised when git, helm, or dyff fail or are unavailable."""


@dataclass
class CompareRequest:
    repository: str
    chart_path: str
    version1: str
    version2: str
    values_file: Optional[str] = None  # path inside the repository
    values_content: Optional[str] = None  # inline values, wins over values_file


@dataclass
class VersionListing:
    tags: List[str]
    branches: List[str]


@dataclass
class ComparisonResult:
    diff: str
    version1: str
    version2: str

    @property
    def has_diff(self) -> bool:
        return bool(self.diff.strip())


def _env() -> Dict[str, str]:
    """Process environment with interactive git credential prompts disabled."""
    env = dict(os.environ)
    env.update({"GIT_TERMINAL_PROMPT": "0", "GIT_ASKPASS": "", "GIT_CREDENTIAL_HELPER": ""})
    return env


def _run(
    args: List[str],
    cwd: Optional[Path] = None,
    timeout: int = 60,
    ok_codes: tuple[int, ...] = (0,),
) -> subprocess.CompletedProcess:
    """Run a command and return the completed process. Raises HelmError."""
    _log.debug("running: %s", " ".join(args))
    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=_env(),
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise HelmError(f"{args[0]} is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise HelmError(f"command timed out after {timeout}s: {' '.join(args)}") from exc

    if result.returncode not in ok_codes:
        detail = (result.stderr or result.stdout).strip()
        raise HelmError(f"{' '.join(args[:2])} failed: {detail or f'exit {result.returncode}'}")
    return result


def validate_repository_url(url: str) -> bool:
    return _REPO_URL_RE.match(url) is not None


# ── git ───────────────────────────────────────────────────────────────────────


def clone_repository(url: str, target: Path) -> None:
    """Clone *url* with every branch and tag into *target*."""
    if not validate_repository_url(url):
        raise HelmError(
            f"Invalid repository URL: {url} "
            "(use https://host/user/repo.git or git@host:user/repo.git)"
        )
    _run(["git", "clone", "--no-single-branch", url, str(target)], timeout=120)
    _run(["git", "-C", str(target), "fetch", "--tags"], timeout=30)


def list_refs(repo: Path) -> VersionListing:
    """Return recent tags (newest first) and remote branches (latest commit first)."""
    try:
        tags = _run(["git", "-C", str(repo), "tag", "--sort=-creatordate"], timeout=10).stdout.split()
    except HelmError as exc:
        _log.debug("no tags listed: %s", exc)
        tags = []
    try:
        raw_branches = _run(
            ["git", "-C", str(repo), "branch", "-r", "--sort=-committerdate"], timeout=10
        ).stdout.splitlines()
    except HelmError as exc:
        _log.debug("no branches listed: %s", exc)
        raw_branches = []

    branches: List[str] = []
    for line in raw_branches:
        name = re.sub(r"^origin/", "", line.strip())
        # skip "origin/HEAD -> origin/main"
        if name and "HEAD" not in name:
            branches.append(name)
    return VersionListing(tags=tags[:MAX_TAGS], branches=branches[:MAX_BRANCHES])


def list_versions(url: str) -> VersionListing:
    """Clone *url* into a scratch directory and list the refs worth comparing."""
    with tempfile.TemporaryDirectory(prefix="chartdiff-versions-") as tmp:
        repo = Path(tmp) / "repo"
        clone_repository(url, repo)
        listing = list_refs(repo)
    _log.info("found %d tag(s) and %d branch(es) in %s", len(listing.tags), len(listing.branches), url)
    return listing


def _available_refs(repo: Path) -> str:
    listing = list_refs(repo)
    return (
        f"\nAvailable tags (sample): {', '.join(listing.tags[:_SAMPLE]) or 'none'}"
        f"\nAvailable branches (sample): {', '.join(listing.branches[:_SAMPLE]) or 'none'}"
    )


def checkout(repo: Path, ref: str) -> None:
    """Check out a tag, branch, or commit in *repo*."""
    try:
        _run(["git", "-C", str(repo), "checkout", ref], timeout=15)
    except HelmError as exc:
        raise HelmError(
            f'Version/tag/branch "{ref}" not found in the repository.'
            f"{_available_refs(repo)}"
        ) from exc


def _chart_suggestions(repo: Path) -> List[str]:
    found: List[str] = []
    for hint in _CHART_DIR_HINTS:
        base = repo / hint
        if base.is_dir():
            found += sorted(f"{hint}/{p.name}" for p in base.iterdir() if p.is_dir())[:_SAMPLE]
    found += sorted(p.name for p in repo.iterdir() if p.is_dir() and not p.name.startswith("."))[:_SAMPLE]
    return found[:_SAMPLE]


def locate_chart(repo: Path, chart_path: str) -> Path:
    """Return the chart directory inside *repo*, validating it looks like a chart."""
    chart_dir = repo / chart_path.strip("/")
    if chart_dir.is_dir() and (
        (chart_dir / "Chart.yaml").is_file() or (chart_dir / "templates").is_dir()
    ):
        return chart_dir

    message = f'Chart path not found or not a Helm chart: "{chart_path}".'
    suggestions = _chart_suggestions(repo)
    if suggestions:
        message += f"\nAvailable chart directories (sample): {', '.join(suggestions)}"
    raise HelmError(message)


# ── helm ──────────────────────────────────────────────────────────────────────


def parse_chart_repositories(chart_yaml: str) -> List[str]:
    """Return the http(s) repository URLs a Chart.yaml depends on."""
    try:
        data = yaml.safe_load(chart_yaml) or {}
    except yaml.YAMLError as exc:
        raise HelmError(f"Failed to parse Chart.yaml: {exc}") from exc
    if not isinstance(data, dict):
        return []

    urls: List[str] = []
    for dep in data.get("dependencies") or []:
        if isinstance(dep, dict):
            urls.append(str(dep.get("repository") or ""))
    for repo in data.get("repositories") or []:
        if isinstance(repo, dict):
            urls.append(str(repo.get("url") or ""))

    seen: List[str] = []
    for url in (u.strip() for u in urls):
        if url.startswith(("http://", "https://")) and url not in seen:
            seen.append(url)
    return seen


def repo_name_for(url: str) -> str:
    """Derive a ``helm repo add`` alias from a repository URL."""
    name = re.sub(r"^https?://", "", url)
    name = re.sub(r"^www\.", "", name)
    name = re.sub(r"[^a-z0-9-]", "-", name, flags=re.IGNORECASE)
    name = re.sub(r"-+", "-", name).strip("-").lower()
    return name[:50] or "chart-repo"


def build_dependencies(chart_dir: Path, timeout: int = 120) -> None:
    """Add dependency repositories and fetch chart dependencies.

    Failures are logged; rendering reports the real error if one remains.
    """
    chart_yaml = chart_dir / "Chart.yaml"
    if not chart_yaml.is_file():
        return
    text = chart_yaml.read_text(encoding="utf-8")
    repositories = parse_chart_repositories(text)
    if not repositories and "dependencies:" not in text:
        return

    for url in repositories:
        name = repo_name_for(url)
        try:
            _run(["helm", "repo", "add", name, url], timeout=30)
        except HelmError as exc:
            _log.warning("Failed to add helm repository %s: %s", name, exc)
    if repositories:
        try:
            _run(["helm", "repo", "update"], timeout=60)
        except HelmError as exc:
            _log.warning("helm repo update failed: %s", exc)

    for action in ("update", "build"):
        try:
            _run(["helm", "dependency", action, str(chart_dir)], timeout=timeout)
        except HelmError as exc:
            _log.warning("helm dependency %s failed for %s: %s", action, chart_dir, exc)


def render_chart(
    chart_dir: Path,
    release_name: str = "diff-comparison",
    values_file: Optional[Path] = None,
    timeout: int = 60,
) -> str:
    """Render *chart_dir* to a flat manifest with ``helm template``."""
    args = ["helm", "template", release_name, str(chart_dir)]
    if values_file is not None:
        args += ["-f", str(values_file)]
    return _run(args, timeout=timeout).stdout


# ── diff producer ─────────────────────────────────────────────────────────────


def line_diff(old: str, new: str) -> str:
    """Line-oriented unified diff, used when dyff is unavailable."""
    return "".join(
        difflib.unified_diff(
            old.splitlines(keepends=True),
            new.splitlines(keepends=True),
            fromfile="version1.yaml",
            tofile="version2.yaml",
        )
    )


def diff_manifests(old: str, new: str, *, use_dyff: bool = True, timeout: int = 30) -> str:
    """Return raw diff text between two rendered manifests.

    Prefers ``dyff between`` (path-oriented output); falls back to a unified
    line diff when dyff is disabled or not installed.
    """
    if not use_dyff or shutil.which("dyff") is None:
        _log.info("dyff unavailable; falling back to a line diff")
        return line_diff(old, new).strip()

    with tempfile.TemporaryDirectory(prefix="chartdiff-dyff-") as tmp:
        old_path = Path(tmp) / "version1.yaml"
        new_path = Path(tmp) / "version2.yaml"
        old_path.write_text(old, encoding="utf-8")
        new_path.write_text(new, encoding="utf-8")
        # dyff exits 1 when differences were found
        result = _run(
            ["dyff", "between", str(old_path), str(new_path), "--omit-header"],
            timeout=timeout,
            ok_codes=(0, 1),
        )
    return (result.stdout or result.stderr).strip()


def _extract_version(repo: Path, request: CompareRequest, ref: str, timeout: int) -> Path:
    checkout(repo, ref)
    chart_dir = locate_chart(repo, request.chart_path)
    target = repo.parent / f"chart-{re.sub(r'[^A-Za-z0-9._-]', '_', ref)}"
    shutil.copytree(chart_dir, target, dirs_exist_ok=True)
    build_dependencies(target, timeout=timeout)
    return target


def compare_versions(request: CompareRequest, settings: Optional[HelmConfig] = None) -> ComparisonResult:
    """Clone, render both chart versions, and diff the rendered manifests."""
    settings = settings or HelmConfig()

    with tempfile.TemporaryDirectory(prefix="chartdiff-") as tmp:
        work = Path(tmp)
        repo = work / "repo"
        clone_repository(request.repository, repo)

        values: Optional[Path] = None
        if request.values_content:
            values = work / "values.yaml"
            values.write_text(request.values_content, encoding="utf-8")

        rendered: List[str] = []
        for ref in (request.version1, request.version2):
            chart_dir = _extract_version(repo, request, ref, settings.timeout)
            if request.values_file and values is None:
                values = repo / request.values_file
            rendered.append(
                render_chart(chart_dir, settings.release_name, values, timeout=settings.timeout)
            )

        diff = diff_manifests(
            rendered[0], rendered[1], use_dyff=settings.use_dyff, timeout=settings.timeout
        )

    _log.info("compared %s..%s (%d bytes of diff)", request.version1, request.version2, len(diff))
    return ComparisonResult(diff=diff, version1=request.version1, version2=request.version2)
