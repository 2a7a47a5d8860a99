"""
Tests for ls-remote output parsing.
"""

import pytest

from gitremote.exit_codes import NoVersionsError, ParseError, PARSE_ERROR, NO_VERSIONS
from gitremote.refs import (
    RemoteRef,
    parse_ref_line,
    parse_default_branch,
    is_semver_tag,
    sort_semver_tags,
    collect_semver_tags,
    parse_latest_semver_tag,
)

SHA_A = "5b8e1c4f9d2a7e3b6c0f1a8d4e7b2c9f0a3d6e1b"
SHA_B = "9f0a3d6e1b5b8e1c4f9d2a7e3b6c0f1a8d4e7b2c"


class TestParseRefLine:
    """Test single-line parsing."""

    def test_symref_line(self):
        ref = parse_ref_line("ref: refs/heads/main\tHEAD")
        assert ref == RemoteRef(ref_name="HEAD", target="refs/heads/main", symbolic=True)

    def test_plain_ref_line(self):
        ref = parse_ref_line(f"{SHA_A}\trefs/tags/v1.0.0")
        assert ref == RemoteRef(ref_name="refs/tags/v1.0.0", target=SHA_A)
        assert not ref.symbolic

    def test_blank_and_short_lines(self):
        assert parse_ref_line("") is None
        assert parse_ref_line("   ") is None
        assert parse_ref_line(SHA_A) is None


class TestParseDefaultBranch:
    """Test default branch extraction from `ls-remote --symref`."""

    def test_minimal_symref_output(self):
        assert parse_default_branch("ref: refs/heads/main\tHEAD\n") == "main"

    def test_full_symref_output(self):
        output = (
            "ref: refs/heads/develop\tHEAD\n"
            f"{SHA_A}\tHEAD\n"
        )
        assert parse_default_branch(output) == "develop"

    def test_branch_with_slashes(self):
        output = f"ref: refs/heads/release/2024\tHEAD\n{SHA_A}\tHEAD\n"
        assert parse_default_branch(output) == "release/2024"

    def test_spaces_as_separators(self):
        assert parse_default_branch("ref:   refs/heads/trunk   HEAD") == "trunk"

    def test_non_heads_target_kept_as_is(self):
        assert parse_default_branch("ref: refs/remotes/origin/main\tHEAD") == "refs/remotes/origin/main"

    def test_symref_for_other_ref_ignored(self):
        output = (
            "ref: refs/heads/main\trefs/remotes/origin/HEAD\n"
            "ref: refs/heads/stable\tHEAD\n"
        )
        assert parse_default_branch(output) == "stable"

    def test_no_symref_line_raises_parse_error(self):
        output = f"{SHA_A}\tHEAD\n"
        with pytest.raises(ParseError) as exc_info:
            parse_default_branch(output)
        assert "could not deduce default branch from output" in str(exc_info.value)
        assert exc_info.value.output == output
        assert SHA_A in str(exc_info.value)
        assert exc_info.value.exit_code == PARSE_ERROR

    def test_empty_output_raises_parse_error(self):
        with pytest.raises(ParseError):
            parse_default_branch("")

    def test_truncated_symref_line_raises(self):
        with pytest.raises(ParseError):
            parse_default_branch("ref: refs/heads/main\n")


class TestSemverTags:
    """Test semantic version validation and ordering."""

    @pytest.mark.parametrize("tag", [
        "v1.2.3",
        "v1.2.3-rc1",
        "v0.0.0",
        "v10.20.30",
        "v1.0.0-alpha.1",
        "v1.0.0+build.5",
        "v1.0.0-beta+exp.sha.5114f85",
    ])
    def test_valid(self, tag):
        assert is_semver_tag(tag)

    @pytest.mark.parametrize("tag", [
        "v1.2",
        "v1",
        "release-1",
        "1.2.3",
        "v01.2.3",
        "v1.2.3.4",
        "v1.2.3^{}",
        "v1.2.3-",
        "",
    ])
    def test_invalid(self, tag):
        assert not is_semver_tag(tag)

    def test_numeric_not_lexicographic(self):
        tags = ["v1.0.0", "v1.2.0", "v1.10.0", "v1.2.0-beta"]
        assert sort_semver_tags(tags) == ["v1.0.0", "v1.2.0-beta", "v1.2.0", "v1.10.0"]

    def test_prerelease_identifiers(self):
        tags = ["v1.0.0-rc.10", "v1.0.0", "v1.0.0-rc.2", "v1.0.0-alpha"]
        assert sort_semver_tags(tags) == ["v1.0.0-alpha", "v1.0.0-rc.2", "v1.0.0-rc.10", "v1.0.0"]

    def test_build_metadata_ties_are_stable(self):
        assert sort_semver_tags(["v1.0.0+b", "v1.0.0+a"]) == ["v1.0.0+a", "v1.0.0+b"]

    def test_invalid_dropped(self):
        assert sort_semver_tags(["v2", "v1.0.0", "junk"]) == ["v1.0.0"]


class TestLatestSemverTag:
    """Test tag collection and selection from `ls-remote --tags`."""

    def test_release_beats_prerelease(self):
        output = f"abc123\trefs/tags/v1.0.0\ndef456\trefs/tags/v2.0.0-alpha\n"
        assert parse_latest_semver_tag(output) == "v2.0.0-alpha"

        output += "ghi789\trefs/tags/v2.0.0\n"
        assert parse_latest_semver_tag(output) == "v2.0.0"

    def test_sorting_example(self):
        output = "\n".join(
            f"{SHA_A}\trefs/tags/{tag}"
            for tag in ["v1.0.0", "v1.2.0", "v1.10.0", "v1.2.0-beta"]
        )
        assert parse_latest_semver_tag(output) == "v1.10.0"

    def test_prefix_filters_and_strips(self):
        output = (
            f"{SHA_A}\trefs/tags/sub/v1.0.0\n"
            f"{SHA_B}\trefs/tags/other/v2.0.0\n"
        )
        assert parse_latest_semver_tag(output, prefix="sub/") == "v1.0.0"

    def test_nested_prefix_does_not_leak(self):
        output = (
            f"{SHA_A}\trefs/tags/sub/v1.0.0\n"
            f"{SHA_B}\trefs/tags/sub/deeper/v9.0.0\n"
        )
        assert collect_semver_tags(output, prefix="sub/") == ["v1.0.0"]

    def test_no_prefix_ignores_prefixed_tags(self):
        output = (
            f"{SHA_A}\trefs/tags/v1.0.0\n"
            f"{SHA_B}\trefs/tags/sub/v3.0.0\n"
        )
        assert parse_latest_semver_tag(output) == "v1.0.0"

    def test_peeled_and_branch_refs_ignored(self):
        output = (
            f"{SHA_A}\trefs/tags/v1.1.0\n"
            f"{SHA_B}\trefs/tags/v1.1.0^{{}}\n"
            f"{SHA_A}\trefs/heads/v9.9.9\n"
            f"{SHA_B}\n"
            "\n"
        )
        assert collect_semver_tags(output) == ["v1.1.0"]

    def test_second_field_counts_whatever_the_first_holds(self):
        output = (
            f"{SHA_A}\trefs/tags/v1.1.0\n"
            "ref: refs/tags/v3.0.0\tHEAD\n"
            f"{SHA_B} refs/tags/v2.0.0 trailing\n"
        )
        assert collect_semver_tags(output) == ["v1.1.0", "v3.0.0", "v2.0.0"]
        assert parse_latest_semver_tag(output) == "v3.0.0"

    def test_malformed_tags_discarded(self):
        output = (
            f"{SHA_A}\trefs/tags/v1.2\n"
            f"{SHA_A}\trefs/tags/release-1\n"
            f"{SHA_A}\trefs/tags/v0.3.0\n"
        )
        assert parse_latest_semver_tag(output) == "v0.3.0"

    def test_no_versions(self):
        output = f"{SHA_A}\trefs/tags/v1.2\n{SHA_B}\trefs/tags/nightly\n"
        with pytest.raises(NoVersionsError) as exc_info:
            parse_latest_semver_tag(output)
        assert str(exc_info.value) == "no versions present"
        assert exc_info.value.exit_code == NO_VERSIONS

    def test_empty_output(self):
        with pytest.raises(NoVersionsError):
            parse_latest_semver_tag("")

    def test_no_versions_is_not_parse_error(self):
        with pytest.raises(NoVersionsError) as exc_info:
            parse_latest_semver_tag("", prefix="api/")
        assert not isinstance(exc_info.value, ParseError)
