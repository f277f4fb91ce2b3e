"""
End-to-end loading tests

Tests the CLI pipeline: .vue component → env_check → component_load →
output_write → results_report, driven with a ProgramState as the
@chris_plugin entry point would build it.
"""

import json

import pytest

from vuegister.__main__ import (
    component_load,
    config_read,
    env_check,
    output_write,
    results_report,
)
from vuegister.models import ProgramState, pipeline


COMPONENT = (
    "<template>\n"
    "  <div class=\"hello\">{{ msg }}</div>\n"
    "</template>\n"
    "\n"
    "<script>\n"
    "module.exports = {\n"
    "  data: function () { return { msg: 'Hello' } }\n"
    "}\n"
    "</script>\n"
)


@pytest.fixture
def workspace(tmp_path):
    inputdir = tmp_path / "in"
    outputdir = tmp_path / "out"
    inputdir.mkdir()
    (inputdir / "Hello.vue").write_text(COMPONENT, encoding="utf-8")
    return inputdir, outputdir


def state_make(workspace, **options):
    inputdir, outputdir = workspace
    return ProgramState(
        inputdir=inputdir,
        outputdir=outputdir,
        inputFile=options.pop("inputFile", "Hello.vue"),
        **options,
    )


class TestPipeline:
    """Test complete runs of the pipeline"""

    def test_script_written(self, workspace):
        final = pipeline(
            state_make(workspace),
            env_check,
            component_load,
            output_write,
            results_report,
        )

        output_file = workspace[1] / "Hello.js"
        assert final.writtenFiles == [output_file]

        script = output_file.read_text(encoding="utf-8")
        assert script.startswith("\nmodule.exports = {\n")
        assert '__vue__options__.template = "\\n  <div class=\\"hello\\">{{ msg }}</div>\\n";' in script
        assert "sourceMappingURL" not in script

    def test_script_and_map_written(self, workspace):
        final = pipeline(
            state_make(workspace, maps=True),
            env_check,
            component_load,
            output_write,
            results_report,
        )

        output_file = workspace[1] / "Hello.js"
        map_file = workspace[1] / "Hello.js.map"
        assert final.writtenFiles == [output_file, map_file]

        script = output_file.read_text(encoding="utf-8")
        assert script.endswith("\n//# sourceMappingURL=Hello.js.map\n")

        sourcemap = json.loads(map_file.read_text(encoding="utf-8"))
        assert sourcemap["version"] == 3
        assert sourcemap["sources"] == [str(final.inputSourceFile)]
        assert "module" in sourcemap["names"]


class TestEnvCheck:
    """Test environment validation"""

    def test_resolves_paths(self, workspace):
        state = env_check(state_make(workspace))

        assert state.envOK
        assert state.inputSourceFile == (workspace[0] / "Hello.vue").resolve()
        assert state.outputFile == workspace[1] / "Hello.js"
        assert workspace[1].is_dir()
        assert state.loadOptions == {}

    def test_maps_flag(self, workspace):
        state = env_check(state_make(workspace, maps=True))
        assert state.loadOptions == {"maps": True}

    def test_input_state_not_modified(self, workspace):
        initial = state_make(workspace)
        env_check(initial)
        assert initial.envOK is False

    def test_missing_input(self, workspace):
        with pytest.raises(SystemExit) as excinfo:
            env_check(state_make(workspace, inputFile="Nope.vue"))
        assert excinfo.value.code == 1

    def test_config_file(self, workspace, tmp_path):
        config = tmp_path / "vuegister.yaml"
        config.write_text("lang:\n  script: coffee\nplugins:\n  coffee:\n    bare: true\n")

        state = env_check(state_make(workspace, configFile=str(config), maps=True))

        assert state.loadOptions == {
            "lang": {"script": "coffee"},
            "plugins": {"coffee": {"bare": True}},
            "maps": True,
        }

    def test_config_file_not_a_mapping(self, workspace, tmp_path):
        config = tmp_path / "vuegister.yaml"
        config.write_text("- maps\n")

        with pytest.raises(SystemExit):
            env_check(state_make(workspace, configFile=str(config)))

    def test_empty_config_file(self, tmp_path):
        config = tmp_path / "empty.yaml"
        config.write_text("")
        assert config_read(config) == {}


class TestComponentLoad:
    """Test the loading stage"""

    def test_missing_plugin_exits(self, workspace, tmp_path):
        config = tmp_path / "vuegister.yaml"
        config.write_text("lang:\n  script: vuegister-test-missing\n")

        state = env_check(state_make(workspace, configFile=str(config)))

        with pytest.raises(SystemExit) as excinfo:
            component_load(state)
        assert excinfo.value.code == 1

    def test_no_script_exits_on_write(self, workspace):
        state = env_check(state_make(workspace))
        with pytest.raises(SystemExit):
            output_write(state)
