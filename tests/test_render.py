"""
Tests for report rendering (dep_audit/render.py, dep_audit/table.py).
"""

import json

from dep_audit.models import ModuleReport, ResolvedDependency
from dep_audit.render import (
    create_report_table,
    format_report_table,
    format_summary,
    generate_multi_module_report,
    render_json,
)
from dep_audit.table import CSI_RE, display_width, format_table, strip_control_for_width


def dep(name, constraint="^1.0.0", installed="1.0.0", status="satisfied", ref="registry", error=None):
    return ResolvedDependency(
        name=name,
        kind="normal",
        declared_specifier=constraint,
        constraint=constraint,
        reference_type=ref,
        installed_version=installed,
        status=status,
        error=error,
    )


class TestTable:
    """Tests for column alignment."""

    def test_strip_control_for_width(self):
        colored = "\033[31;1mleft-pad\033[0m"
        assert strip_control_for_width(colored) == "left-pad"
        assert display_width(colored) == 8

    def test_osc8_links_ignored_for_width(self):
        link = "\033]8;;https://npmjs.com\033\\npm\033]8;;\033\\"
        assert display_width(link) == 3

    def test_wide_characters(self):
        assert display_width("包") == 2

    def test_format_table_aligns_rows_only(self):
        """Test lines without three cells pass through untouched."""
        text = "header\na | bb | c\nlonger | b | c"
        assert format_table(text) == "header\na      | bb | c\nlonger | b  | c"

    def test_indentation_preserved(self):
        text = "  x | y | z\n  long | y | z"
        assert format_table(text) == "  x    | y | z\n  long | y | z"


class TestCreateReportTable:
    """Tests for the single-module table."""

    def test_plain_table(self):
        table = create_report_table([
            dep("a"),
            dep("left-pad", constraint="~1.2.0", installed="none", status="outdated"),
        ])
        assert table.split("\n") == [
            "a        | needs ^1.0.0 | found 1.0.0",
            "left-pad | needs ~1.2.0 | found none",
        ]

    def test_remote_dependency_marked(self):
        table = create_report_table([dep("widget", constraint="2.0.0", ref="remote-reference")])
        assert "needs 2.0.0 (on github)" in table

    def test_colors_do_not_break_alignment(self):
        """Test colored output matches plain output once escapes are removed."""
        deps = [dep("a"), dep("left-pad", installed="none", status="outdated")]
        colored = create_report_table(deps, use_colors=True)
        plain = create_report_table(deps, use_colors=False)
        assert "\033[31;1m" in colored
        assert "\033[32;1m" in colored
        assert CSI_RE.sub("", colored) == plain

    def test_error_marker(self):
        table = create_report_table([
            dep("widget", constraint="acme/widget", installed="none", status="outdated",
                ref="remote-reference", error="Github returned status 404"),
        ])
        assert "[error: Github returned status 404]" in table

    def test_empty(self):
        assert create_report_table([]) == ""

    def test_format_report_table_realigns_joined_reports(self):
        joined = create_report_table([dep("a")]) + "\n" + create_report_table([dep("much-longer")])
        lines = format_report_table(joined).split("\n")
        assert lines[0].index("|") == lines[1].index("|")


class TestMultiModuleReport:
    """Tests for the directory-of-modules report."""

    def _reports(self):
        return {
            "api": ModuleReport("api", "/x/api", (
                dep("express", installed="none", status="outdated"),
                dep("lodash"),
            )),
            "broken": ModuleReport("broken", "/x/broken", error="malformed manifest"),
            "web": ModuleReport("web", "/x/web", (dep("react"),)),
        }

    def test_outdated_only_by_default(self):
        """Test satisfied rows and fully satisfied modules are hidden."""
        report = generate_multi_module_report(self._reports())
        assert report.split("\n") == [
            "api",
            "  express | needs ^1.0.0 | found none",
            "",
            "broken: malformed manifest",
        ]

    def test_include_satisfied(self):
        report = generate_multi_module_report(self._reports(), include_satisfied=True)
        lines = report.split("\n")
        assert "web" in lines
        assert any(line.strip().startswith("react") for line in lines)
        rows = [line for line in lines if "|" in line]
        assert len({line.index("|") for line in rows}) == 1

    def test_nothing_to_show(self):
        reports = {"web": ModuleReport("web", "/x/web", (dep("react"),))}
        assert generate_multi_module_report(reports) == ""


class TestSummaryAndJson:
    """Tests for the summary line and JSON output."""

    def test_single_module_summary(self):
        reports = {"api": ModuleReport("api", "/x/api", (dep("a"), dep("b", status="outdated")))}
        assert format_summary(reports) == "2 dependencies, 1 outdated"

    def test_multi_module_summary(self):
        reports = {
            "api": ModuleReport("api", "/x/api", (dep("a", status="outdated", error="boom"),)),
            "web": ModuleReport("web", "/x/web", error="bad"),
        }
        assert format_summary(reports) == "2 modules, 1 dependencies, 1 outdated, 1 unresolved, 1 failed"

    def test_render_json(self):
        reports = {"api": ModuleReport("api", "/x/api", (dep("a"),))}
        data = json.loads(render_json(reports))
        assert data["api"]["dependencies"][0]["name"] == "a"
        assert data["api"]["dependencies"][0]["status"] == "satisfied"
        assert data["api"]["error"] is None
