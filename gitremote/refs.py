"""
Parsing for `git ls-remote` output.

ls-remote prints one ref per line, tab separated:

    <sha>\trefs/tags/v1.2.3
    ref: refs/heads/main\tHEAD        (only with --symref)

Nothing here runs git; these functions only read text, so they are safe to
call from any number of threads at once.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from semver import Version

from .exit_codes import NoVersionsError, ParseError

logger = logging.getLogger(__name__)

SYMREF_MARKER = "ref:"
HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"


@dataclass(frozen=True)
class RemoteRef:
    """One parsed line of ls-remote output."""
    ref_name: str
    target: str
    symbolic: bool = False


def parse_ref_line(line: str) -> Optional[RemoteRef]:
    """
    Parse a single ls-remote line.

    Returns None for blank or unrecognized lines.
    """
    fields = line.split()
    if len(fields) >= 3 and fields[0] == SYMREF_MARKER:
        return RemoteRef(ref_name=fields[2], target=fields[1], symbolic=True)
    if len(fields) >= 2:
        return RemoteRef(ref_name=fields[1], target=fields[0])
    return None


def iter_refs(output: str) -> Iterator[RemoteRef]:
    """Yield a RemoteRef for every parseable line of output."""
    for line in output.splitlines():
        ref = parse_ref_line(line)
        if ref is not None:
            yield ref


def parse_default_branch(output: str) -> str:
    """
    Extract the branch HEAD points to from `ls-remote --symref ... HEAD`.

    Args:
        output: Captured stdout of the command

    Returns:
        Branch name with the refs/heads/ prefix removed

    Raises:
        ParseError: No `ref: <ref> HEAD` line was found
    """
    for ref in iter_refs(output):
        if ref.symbolic and ref.ref_name == "HEAD":
            target = ref.target
            if target.startswith(HEADS_PREFIX):
                target = target[len(HEADS_PREFIX):]
            return target

    raise ParseError(
        f"could not deduce default branch from output:\n{output}",
        output=output,
    )


def _parse_semver(tag: str) -> Optional[Version]:
    if not tag.startswith("v"):
        return None
    try:
        return Version.parse(tag[1:])
    except (ValueError, TypeError):
        return None


def is_semver_tag(tag: str) -> bool:
    """Check that tag is a full `vMAJOR.MINOR.PATCH[-pre][+build]` version."""
    return _parse_semver(tag) is not None


def sort_semver_tags(tags: Iterable[str]) -> List[str]:
    """
    Sort valid semver tags by precedence, lowest first.

    Build metadata carries no precedence, so tags that compare equal
    (v1.0.0+a, v1.0.0+b) fall back to plain string order.
    Invalid tags are dropped.
    """
    keyed = []
    for tag in tags:
        version = _parse_semver(tag)
        if version is not None:
            keyed.append((version, tag))
    keyed.sort()
    return [tag for _, tag in keyed]


def collect_semver_tags(output: str, prefix: str = "") -> List[str]:
    """
    Collect the semver tags under refs/tags/<prefix> from `ls-remote --tags`.

    The ref name is the second whitespace-separated field of each line,
    whatever the first field holds. The prefix is stripped from each tag.
    Lines outside the prefix, malformed versions and peeled entries
    (`v1.0.0^{}`) are skipped.
    """
    ref_prefix = TAGS_PREFIX + prefix
    tags = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 2 or not fields[1].startswith(ref_prefix):
            continue
        candidate = fields[1][len(ref_prefix):]
        if is_semver_tag(candidate):
            tags.append(candidate)
        else:
            logger.debug(f"Ignoring non-semver tag: {fields[1]}")
    return tags


def parse_latest_semver_tag(output: str, prefix: str = "") -> str:
    """
    Pick the highest semver tag out of `ls-remote --tags` output.

    Raises:
        NoVersionsError: No tag under the prefix is a valid version
    """
    versions = sort_semver_tags(collect_semver_tags(output, prefix))
    if not versions:
        raise NoVersionsError("no versions present")
    return versions[-1]
