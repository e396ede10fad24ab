import io
import json

import pytest

from cssbaseline.cli import EXIT_CLEAN, EXIT_REPORTED, EXIT_USAGE, main


@pytest.fixture
def stylesheet(tmp_path):
    def write(text, name="style.css"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write


def run(*argv):
    out = io.StringIO()
    code = main([*argv, "--no-color"], out)
    return code, out.getvalue()


class TestExitStatus:
    def test_clean(self, stylesheet):
        code, output = run(stylesheet("a { color: red }"))
        assert code == EXIT_CLEAN
        assert output == ""

    def test_reported(self, stylesheet):
        path = stylesheet("a {\n  accent-color: red;\n}")
        code, output = run(path)
        assert code == EXIT_REPORTED
        assert output.splitlines() == [
            path,
            "  2:3     warning  Property 'accent-color' is not a widely available baseline feature.  notBaselineProperty",
            "",
            "1 problem",
        ]

    def test_missing_file(self, tmp_path):
        code, _ = run(str(tmp_path / "missing.css"))
        assert code == EXIT_USAGE

    def test_bad_option(self, stylesheet):
        code, _ = run(stylesheet("a { color: red }"), "--available", "sometimes")
        assert code == EXIT_USAGE

    def test_strict_parse_error(self, stylesheet):
        path = stylesheet("a { accent-color }\nb { backdrop-filter: none }")
        assert run(path)[0] == EXIT_USAGE
        code, output = run(path, "--tolerant")
        assert code == EXIT_REPORTED
        assert "backdrop-filter" in output
        assert "accent-color" not in output


class TestOptions:
    def test_year(self, stylesheet):
        path = stylesheet(".box { backdrop-filter: blur(10px); }")
        code, output = run(path, "--available", "2021")
        assert code == EXIT_REPORTED
        assert "is not available as of 2021." in output
        assert run(path, "--available", "2024")[0] == EXIT_CLEAN

    def test_allow_lists(self, stylesheet):
        path = stylesheet("h1:has(+ h2) { accent-color: red }\n@view-transition { navigation: auto }")
        code, _ = run(
            path,
            "--allow-selector", "has",
            "--allow-property", "accent-color",
            "--allow-at-rule", "view-transition",
        )
        assert code == EXIT_CLEAN

    def test_config_file(self, stylesheet, tmp_path):
        config = tmp_path / "baseline.json"
        config.write_text(json.dumps({"available": "newly", "allowProperties": ["accent-color"]}))
        path = stylesheet("a { accent-color: red; backdrop-filter: none }")
        assert run(path, "--config", str(config))[0] == EXIT_CLEAN

    def test_command_line_extends_config_file(self, stylesheet, tmp_path):
        config = tmp_path / "baseline.json"
        config.write_text(json.dumps({"allowProperties": ["accent-color"]}))
        path = stylesheet("a { accent-color: red; backdrop-filter: none }")
        assert run(path, "--config", str(config), "--allow-property", "backdrop-filter")[0] == EXIT_CLEAN

    @pytest.mark.parametrize("text", ["[]", "{", '{"available": "never"}', '{"allowFunctions": []}'])
    def test_bad_config_file(self, stylesheet, tmp_path, text):
        config = tmp_path / "baseline.json"
        config.write_text(text)
        assert run(stylesheet("a { color: red }"), "--config", str(config))[0] == EXIT_USAGE

    def test_database(self, stylesheet, tmp_path):
        database = tmp_path / "data.json"
        database.write_text(json.dumps({"properties": {"color": {"status": "newly", "since": 2025}}}))
        path = stylesheet("a { color: red; accent-color: red }")
        code, output = run(path, "--database", str(database))
        assert code == EXIT_REPORTED
        assert "'color'" in output
        assert "accent-color" not in output

    def test_bad_database(self, stylesheet, tmp_path):
        database = tmp_path / "data.json"
        database.write_text(json.dumps({"properties": {"color": {"status": "maybe"}}}))
        assert run(stylesheet("a { color: red }"), "--database", str(database))[0] == EXIT_USAGE


class TestJson:
    def test_every_file_listed(self, stylesheet):
        clean = stylesheet("a { color: red }", "clean.css")
        dirty = stylesheet("a { width: abs(1px) }", "dirty.css")
        code, output = run(clean, dirty, "--format", "json")
        assert code == EXIT_REPORTED
        assert json.loads(output) == [
            {"filePath": clean, "messages": []},
            {
                "filePath": dirty,
                "messages": [{
                    "messageId": "notBaselineFunction",
                    "message": "Function 'abs' is not a widely available baseline feature.",
                    "data": {"function": "abs", "availability": "widely"},
                    "line": 1,
                    "column": 12,
                    "endLine": 1,
                    "endColumn": 20,
                }],
            },
        ]
