"""
Tests for the unified diff generator.
"""

from workspace_agent.utils.diff import count_changes, generate_unified_diff


class TestGenerateUnifiedDiff:
    """Test cases for generate_unified_diff."""

    def test_headers(self):
        """Test the file headers."""
        diff = generate_unified_diff("src/a.ts", "a", "b")
        lines = diff.split("\n")

        assert lines[0] == "--- a/src/a.ts"
        assert lines[1] == "+++ b/src/a.ts"

    def test_identical_content_has_no_hunks(self):
        """Test that unchanged content yields only headers."""
        diff = generate_unified_diff("f.txt", "one\ntwo", "one\ntwo")

        assert diff == "--- a/f.txt\n+++ b/f.txt"
        assert count_changes(diff) == (0, 0)

    def test_single_line_replacement(self):
        """Test replacing the first line of a two-line file."""
        diff = generate_unified_diff("f.txt", "foo\nbaz", "bar\nbaz")

        assert diff.split("\n")[2:] == ["@@ -1,2 +1,2 @@", "-foo", "+bar", " baz"]
        assert count_changes(diff) == (1, 1)

    def test_context_is_limited_to_three_lines(self):
        """Test that a change in the middle carries three context lines per side."""
        original = "\n".join(f"line {n}" for n in range(1, 11))
        modified = original.replace("line 5", "line five")

        diff = generate_unified_diff("f.txt", original, modified)
        body = diff.split("\n")[2:]

        assert body[0] == "@@ -2,7 +2,7 @@"
        assert body[1:4] == [" line 2", " line 3", " line 4"]
        assert body[4:6] == ["-line 5", "+line five"]
        assert body[6:] == [" line 6", " line 7", " line 8"]

    def test_insertion_resynchronizes(self):
        """Test that inserted lines do not mark the following lines as changed."""
        original = "a\nb\nc\nd"
        modified = "a\nb\nnew 1\nnew 2\nc\nd"

        diff = generate_unified_diff("f.txt", original, modified)

        assert count_changes(diff) == (2, 0)
        assert "+new 1" in diff and "+new 2" in diff
        assert " c" in diff.split("\n")

    def test_deletion_resynchronizes(self):
        """Test that removed lines are reported as deletions only."""
        original = "a\nb\nc\nd\ne"
        modified = "a\nd\ne"

        diff = generate_unified_diff("f.txt", original, modified)

        assert count_changes(diff) == (0, 2)
        assert "@@ -1,5 +1,3 @@" in diff

    def test_append_at_end(self):
        """Test the hunk header for lines appended to the end."""
        diff = generate_unified_diff("f.txt", "a", "a\nb")

        assert diff.split("\n")[2:] == ["@@ -1,1 +1,2 @@", " a", "+b"]

    def test_distant_changes_produce_separate_hunks(self):
        """Test that changes far apart are split into two hunks."""
        original = "\n".join(f"line {n}" for n in range(1, 21))
        modified = original.replace("line 2\n", "line two\n").replace("line 19", "line nineteen")

        diff = generate_unified_diff("f.txt", original, modified)

        assert sum(1 for line in diff.split("\n") if line.startswith("@@")) == 2
        assert count_changes(diff) == (2, 2)

    def test_unrelated_rewrite_falls_back_to_pairs(self):
        """Test that content with no common lines is replaced pairwise."""
        original = "\n".join(f"old {n}" for n in range(12))
        modified = "\n".join(f"new {n}" for n in range(12))

        diff = generate_unified_diff("f.txt", original, modified)

        assert count_changes(diff) == (12, 12)


class TestCountChanges:
    """Test cases for count_changes."""

    def test_headers_are_not_counted(self):
        """Test that '---' and '+++' headers are not counted as changes."""
        diff = "--- a/x\n+++ b/x\n@@ -1,1 +1,1 @@\n-a\n+b"

        assert count_changes(diff) == (1, 1)
