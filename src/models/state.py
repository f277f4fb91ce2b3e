"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the CLI pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, maps, configFile
        - env_check: inputSourceFile, loadOptions, outputFile, envOK
        - component_load: script, sourcemaps
        - output_write: writtenFiles
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source .vue file
        outputdir: Directory for the generated script
        verbosity: Logging verbosity level (1-3)
        inputFile: Input .vue filename (relative to inputdir)
        maps: Generate source maps
        configFile: Optional YAML file with load options (lang, plugins)
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input .vue file
        loadOptions: Options mapping passed to load()
        outputFile: Path of the generated script
        script: Generated script text
        sourcemaps: Generated source maps keyed by original file
        writtenFiles: Paths of every file written
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    maps: bool = field(default=False)
    configFile: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    loadOptions: Dict[str, Any] = field(default_factory=dict)
    outputFile: Path = field(default=Path("/"))
    script: Optional[str] = field(default=None)
    sourcemaps: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    writtenFiles: list[Path] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, maps, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for generated output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Keep only options that are ProgramState fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            component_load,
            output_write,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
