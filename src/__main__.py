#!/usr/bin/env python3
"""
vuegister - Single-file component loader

Loads a *.vue single-file component the way the require hook does and
writes the resulting script (and optionally its source map) to disk, so
the output of the loader can be inspected or fed to other tools.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    vuegister inputdir/ outputdir/ --inputFile Hello.vue

    The script is written to outputdir/ as Hello.js; with --maps a
    Hello.js.map source map is written next to it.

Examples:
    # Basic load
    vuegister components/ build/ --inputFile Hello.vue

    # With source map and plugin options from a YAML file
    vuegister components/ build/ --inputFile Hello.vue --maps --configFile vuegister.yaml

    # Verbose output
    vuegister components/ build/ --inputFile Hello.vue -vv

Config file format (YAML):
    lang:
      script: coffee
    plugins:
      coffee:
        bare: true
"""

import sys
import json
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

import yaml
from chris_plugin import chris_plugin

from .lib import component_load as load_component, PluginError, __version__, LOG, state_connectToLogger
from .lib.log import logger_configure
from .models import ProgramState, pipeline, config_merge


DISPLAY_TITLE = r"""
                              _     _
 __   ___   _  ___  __ _  ___(_)___| |_ ___ _ __
 \ \ / / | | |/ _ \/ _` |/ _ \ / __| __/ _ \ '__|
  \ V /| |_| |  __/ (_| |  __/ \__ \ ||  __/ |
   \_/  \__,_|\___|\__, |\___|_|___/\__\___|_|
                   |___/
  Single-file component loader
"""

# Define CLI arguments
parser = ArgumentParser(
    description="vuegister - load single-file components (*.vue) as script",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input component (.vue) file (relative to inputdir)"
)

parser.add_argument(
    "--maps",
    action="store_true",
    default=False,
    help="Generate a source map next to the script",
)

parser.add_argument(
    "--configFile",
    default=None,
    type=str,
    help="YAML file with load options (lang defaults, plugin configuration)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def config_read(config_file: Path) -> dict:
    """
    Read load options from a YAML file.

    Returns:
        Options mapping, empty for an empty file

    Raises:
        ValueError: If the file does not hold a mapping
    """
    with open(config_file, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{config_file} must contain a mapping of options")
    return config


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the .vue input file
            - loadOptions: Options for load() (config file + CLI flags)
            - outputFile: Path of the script to write
            - envOK: True if environment is valid

    Exits:
        1 if the input file or config file is missing or invalid
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file.resolve()
    LOG(f"Input file: {state.inputSourceFile}", level=2)

    options: dict = {}
    if state.configFile:
        config_file = Path(state.configFile)
        try:
            options = config_read(config_file)
        except (OSError, yaml.YAMLError, ValueError) as e:
            print(f"Error reading config file: {e}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        LOG(f"Config file: {config_file}", level=2)

    state.loadOptions = config_merge(options, {"maps": True} if state.maps else {})

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputFile = state.outputdir / f"{state.inputSourceFile.stem}.js"
    LOG(f"Output file: {state.outputFile}", level=2)

    state.envOK = True
    return state


def component_load(inputstate: ProgramState) -> ProgramState:
    """
    Load the component into script text.

    Args:
        inputstate: Program state with inputSourceFile and loadOptions

    Returns:
        ProgramState with added fields:
            - script: Generated script
            - sourcemaps: Source maps keyed by original file

    Exits:
        1 if reading the component fails or a plugin is missing
    """
    state = inputstate.copy()
    state.sourcemaps = {}

    try:
        state.script = load_component(
            str(state.inputSourceFile), state.loadOptions, state.sourcemaps
        )
    except PluginError as e:
        print(f"Plugin error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error reading component: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Generated {len(state.script)} characters of script", level=2)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the script and its source map.

    The first generated source map is written as <name>.js.map and linked
    from the script with a sourceMappingURL comment.

    Args:
        inputstate: Program state with script and sourcemaps

    Returns:
        ProgramState with added field:
            - writtenFiles: Paths written
    """
    state = inputstate.copy()
    state.writtenFiles = []

    if state.script is None:
        print("Error: No script generated", file=sys.stderr)
        sys.exit(1)

    script = state.script

    if state.sourcemaps:
        map_file = state.outputFile.with_name(state.outputFile.name + ".map")
        source, sourcemap = next(iter(state.sourcemaps.items()))
        if len(state.sourcemaps) > 1:
            LOG(f"Warning: {len(state.sourcemaps)} source maps generated, writing the one for {source}", level=1)

        map_file.write_text(json.dumps(sourcemap), encoding="utf-8")
        state.writtenFiles.append(map_file)
        script += f"\n//# sourceMappingURL={map_file.name}\n"

    state.outputFile.write_text(script, encoding="utf-8")
    state.writtenFiles.insert(0, state.outputFile)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the written files to the user.

    Args:
        inputstate: Program state with writtenFiles populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    LOG("\n✓ Component loaded", level=1)
    for written in state.writtenFiles:
        LOG(f"  Output: {written}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="vuegister - Single-file component loader",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - load a .vue component and write its script.

    Orchestrates the pipeline:
        1. env_check: Validate paths, read config
        2. component_load: Extract, transpile and map the component
        3. output_write: Write script and source map
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    logger_configure()
    state_connectToLogger(state)

    pipeline(state, env_check, component_load, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
