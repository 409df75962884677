"""
Unit Tests for the Pipeline Stage
Verifies the stage re-exports its application stack's outputs without changing them
"""

import aws_cdk as cdk
import pytest
from cdk_workshop.outputs import UnknownOutputError
from cdk_workshop.pipeline_stage import WorkshopPipelineStage


@pytest.fixture
def stage():
    app = cdk.App()
    return WorkshopPipelineStage(app, "Deploy")


def test_stage_names_subset_of_stack_names(stage):
    assert set(stage.output_names) <= set(stage._service.output_names)


def test_stage_reexports_same_names(stage):
    assert stage.output_names == ("ViewerURL", "EndpointURL")


def test_reexported_outputs_are_aliases(stage):
    """Re-export introduces no transformation: same CfnOutput objects"""
    assert stage.viewer_url is stage._service.viewer_url
    assert stage.endpoint_url is stage._service.endpoint_url
    for name in stage.output_names:
        assert stage.output(name) is stage._service.output(name)


def test_stage_unknown_output(stage):
    with pytest.raises(UnknownOutputError):
        stage.output("DoesNotExist")


def test_stage_contains_one_stack(stage):
    stacks = [child for child in stage.node.children if isinstance(child, cdk.Stack)]
    assert len(stacks) == 1
    assert stacks[0].node.id == "WebService"


def test_stage_synthesizes_outputs(stage):
    assembly = stage.synth()
    stack_artifact = assembly.get_stack_artifact(stage._service.artifact_id)
    assert set(stack_artifact.template["Outputs"]) == {"ViewerURL", "EndpointURL"}
