"""
Run the post-deploy smoke tests locally against an already-deployed stack.

Reads the stack's CloudFormation outputs, binds them to each validation
step's environment variables and runs the step's commands in order, the same
way the pipeline's CodeBuild actions do.

Usage:
    python -m cdk_workshop.runner --stack-name Deploy-WebService
    python -m cdk_workshop.runner --step TestAPIGatewayEndpoint

CloudFormation describe_stacks: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/cloudformation/client/describe_stacks.html
"""

import argparse
import os
import subprocess
import sys

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .constants import APP_STACK_ID, DEPLOY_STAGE_ID
from .outputs import UnknownOutputError
from .validation import default_validation_steps, expand_variables

# Stacks inside a stage are named '<stage>-<stack>'
DEFAULT_STACK_NAME = f"{DEPLOY_STAGE_ID}-{APP_STACK_ID}"


class ValidationCommandError(RuntimeError):
    """A smoke test command exited non-zero."""

    def __init__(self, step_name, command, returncode):
        super().__init__(
            f"Validation step '{step_name}' failed: '{command}' exited with {returncode}"
        )
        self.step_name = step_name
        self.command = command
        self.returncode = returncode


def get_stack_outputs(stack_name, cloudformation=None):
    """Return the deployed stack's outputs as {OutputKey: OutputValue}."""
    if cloudformation is None:
        cloudformation = boto3.client('cloudformation')
    response = cloudformation.describe_stacks(StackName=stack_name)
    outputs = response['Stacks'][0].get('Outputs', [])
    return {output['OutputKey']: output['OutputValue'] for output in outputs}


def resolve_env(step, outputs, stack_name=DEFAULT_STACK_NAME):
    """Map each of the step's variables to its resolved output value."""
    env = {}
    for variable, output_name in step.env.items():
        if output_name not in outputs:
            raise UnknownOutputError(output_name, stack_name, outputs)
        env[variable] = outputs[output_name]
    return env


def run_step(step, outputs, stack_name=DEFAULT_STACK_NAME, run=None):
    """
    Run every command of step in order.

    Output values reach the shell through the environment only, as in
    CodeBuild; the expanded text is used for logging. Stops at the first
    non-zero exit.

    Returns:
        list: the expanded commands that were run

    Raises:
        ValidationCommandError: if a command exits non-zero
    """
    if run is None:
        run = subprocess.run
    env = resolve_env(step, outputs, stack_name)
    process_env = dict(os.environ, **env)
    executed = []

    for command in step.commands:
        expanded = expand_variables(command, env)
        print(f"[{step.name}] {expanded}")
        result = run(command, shell=True, env=process_env)
        executed.append(expanded)
        if result.returncode != 0:
            raise ValidationCommandError(step.name, expanded, result.returncode)

    return executed


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run the pipeline smoke tests against a deployed stack"
    )
    parser.add_argument(
        "--stack-name",
        default=DEFAULT_STACK_NAME,
        help=f"deployed stack to read outputs from (default: {DEFAULT_STACK_NAME})"
    )
    parser.add_argument(
        "--step",
        action="append",
        dest="steps",
        help="only run the named step (repeatable)"
    )
    args = parser.parse_args(argv)

    steps = default_validation_steps()
    if args.steps:
        known = {step.name for step in steps}
        unknown = [name for name in args.steps if name not in known]
        if unknown:
            parser.error(f"unknown step(s): {', '.join(unknown)}")
        steps = [step for step in steps if step.name in args.steps]

    try:
        outputs = get_stack_outputs(args.stack_name)
        for step in steps:
            run_step(step, outputs, args.stack_name)
    except (ValidationCommandError, UnknownOutputError, ClientError, BotoCoreError) as e:
        print(f"Error: {e}")
        return 1

    print(f"All {len(steps)} validation step(s) passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
