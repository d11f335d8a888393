from ecsimages.report import format_failures, format_report


class TestReport:
    def test_format_report(self):
        report = format_report(
            {
                "repo/sidecar:1": {"svc-b", "svc-a"},
                "repo/app:1": {"svc-a"},
                "repo/orphan:1": set(),
            }
        )
        lines = report.split("\n")
        assert "Unique container image URIs and services using them:" in lines
        assert lines.index("repo/app:1") < lines.index("repo/orphan:1") < lines.index(
            "repo/sidecar:1"
        )
        start = lines.index("repo/sidecar:1")
        assert lines[start : start + 5] == [
            "repo/sidecar:1",
            "  Services:",
            "    - svc-a",
            "    - svc-b",
            "",
        ]
        orphan = lines.index("repo/orphan:1")
        assert lines[orphan + 1] == "  No active services using this image"

    def test_format_failures(self):
        assert format_failures([]) == ""
        warning = format_failures([("list_tasks", "svc-a", RuntimeError("boom"))])
        assert "1 request(s) failed" in warning
