"""
Post-deployment smoke tests for the pipeline.

A ValidationStep is a named list of shell commands plus bindings from
environment variable names to stack output names. The pipeline turns each
step into a CDK Pipelines ShellStep whose environment is filled from the
deployed stage's CloudFormation outputs; the local runner (runner.py) uses
the same steps against an already-deployed stack.

ShellStep documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/ShellStep.html
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Set, Tuple

from aws_cdk import pipelines

from .constants import DEFAULT_VALIDATION_STEPS
from .outputs import ExposesOutputs

# $NAME or ${NAME}; single-quoted text and escaped \$ match without a name
_VARIABLE_PATTERN = re.compile(
    r"'[^']*'|\\\$|\$(?:\{([A-Za-z_][A-Za-z0-9_]*)\}|([A-Za-z_][A-Za-z0-9_]*))"
)


class UnboundVariableError(ValueError):
    """A command references an environment variable the step does not bind."""

    def __init__(self, step_name: str, variables: Iterable[str]) -> None:
        self.step_name = step_name
        self.variables = tuple(sorted(variables))
        super().__init__(
            f"Validation step '{step_name}' references unbound variables: "
            f"{', '.join(self.variables)}"
        )


def referenced_variables(command: str) -> Set[str]:
    """Names of all $VAR / ${VAR} references the shell would expand in a command."""
    return {
        braced or bare
        for braced, bare in _VARIABLE_PATTERN.findall(command)
        if braced or bare
    }


def expand_variables(command: str, env: Mapping[str, str]) -> str:
    """Substitute $VAR / ${VAR} references with values from env, for display."""

    def substitute(match):
        name = match.group(1) or match.group(2)
        return env[name] if name else match.group(0)

    return _VARIABLE_PATTERN.sub(substitute, command)


@dataclass(frozen=True)
class ValidationStep:
    """
    A named post-deploy check.

    env maps environment variable name -> stack output name; commands run in
    order and the step fails on the first non-zero exit. References inside
    single quotes or escaped as \\$ are left to the shell and need no binding.
    """

    name: str
    env: Mapping[str, str] = field(default_factory=dict)
    commands: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Freeze caller-supplied containers
        object.__setattr__(self, "env", dict(self.env))
        object.__setattr__(self, "commands", tuple(self.commands))
        self.check_bindings()

    def check_bindings(self) -> None:
        referenced = set()
        for command in self.commands:
            referenced |= referenced_variables(command)
        unbound = referenced - set(self.env)
        if unbound:
            raise UnboundVariableError(self.name, unbound)

    def to_shell_step(self, stage: ExposesOutputs) -> pipelines.ShellStep:
        """
        Build the pipeline ShellStep, binding outputs through stage.

        Raises:
            UnknownOutputError: if an output name is not exposed by stage
        """
        env_from_outputs = {
            variable: stage.output(output_name)
            for variable, output_name in self.env.items()
        }
        return pipelines.ShellStep(
            self.name,
            env_from_cfn_outputs=env_from_outputs,
            commands=list(self.commands)
        )


def default_validation_steps() -> List[ValidationStep]:
    return [
        ValidationStep(name, env, commands)
        for name, env, commands in DEFAULT_VALIDATION_STEPS
    ]


def build_post_steps(steps: Iterable[ValidationStep], stage: ExposesOutputs) -> List[pipelines.ShellStep]:
    """Resolve every step against stage; nothing is returned if any binding fails."""
    return [step.to_shell_step(stage) for step in steps]
