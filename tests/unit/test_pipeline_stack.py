"""
Unit Tests for the CI/CD Pipeline Stack
Tests the pipeline wiring: source, synth, deploy stage and post-deploy smoke tests

CDK Pipelines documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.pipelines/README.html
"""

import aws_cdk as cdk
import aws_cdk.assertions as assertions
import pytest
from cdk_workshop.outputs import UnknownOutputError
from cdk_workshop.pipeline_stack import WorkshopPipelineStack
from cdk_workshop.validation import ValidationStep


def make_pipeline(**kwargs):
    app = cdk.App()
    return WorkshopPipelineStack(app, "WorkshopPipelineStack", **kwargs)


@pytest.fixture
def pipeline_stack():
    return make_pipeline()


def test_default_validation_steps(pipeline_stack):
    assert [step.id for step in pipeline_stack.post_steps] == [
        "TestViewerEndpoint",
        "TestAPIGatewayEndpoint"
    ]


def test_each_step_binds_one_distinct_output(pipeline_stack):
    viewer_step, api_step = pipeline_stack.post_steps

    assert list(viewer_step.env_from_cfn_outputs) == ["ENDPOINT_URL"]
    assert list(api_step.env_from_cfn_outputs) == ["ENDPOINT_URL"]
    assert viewer_step.env_from_cfn_outputs["ENDPOINT_URL"].output_name == "ViewerURL"
    assert api_step.env_from_cfn_outputs["ENDPOINT_URL"].output_name == "EndpointURL"


def test_step_commands(pipeline_stack):
    viewer_step, api_step = pipeline_stack.post_steps

    assert viewer_step.commands == ["curl -Ssf $ENDPOINT_URL"]
    assert api_step.commands == [
        "curl -Ssf $ENDPOINT_URL",
        "curl -Ssf $ENDPOINT_URL/hello",
        "curl -Ssf $ENDPOINT_URL/test"
    ]


def test_bindings_resolve_through_stage(pipeline_stack):
    stage = pipeline_stack.deploy_stage
    for step in pipeline_stack.validation_steps:
        for output_name in step.env.values():
            assert output_name in stage.output_names


def test_unknown_output_fails_construction():
    bad_step = ValidationStep(
        "TestMissing",
        {"ENDPOINT_URL": "DoesNotExist"},
        ["curl -Ssf $ENDPOINT_URL"]
    )
    with pytest.raises(UnknownOutputError) as excinfo:
        make_pipeline(validation_steps=[bad_step])
    assert excinfo.value.name == "DoesNotExist"


def test_construction_is_idempotent():
    first = make_pipeline()
    second = make_pipeline()

    assert first.deploy_stage.output_names == second.deploy_stage.output_names
    assert [step.id for step in first.post_steps] == [step.id for step in second.post_steps]
    assert [step.commands for step in first.post_steps] == [step.commands for step in second.post_steps]


def test_custom_validation_steps():
    step = ValidationStep("TestViewerOnly", {"VIEWER": "ViewerURL"}, ["curl -Ssf ${VIEWER}"])
    stack = make_pipeline(validation_steps=[step])

    assert [s.id for s in stack.post_steps] == ["TestViewerOnly"]
    assert stack.post_steps[0].env_from_cfn_outputs["VIEWER"].output_name == "ViewerURL"


def test_pipeline_template():
    """
    Synthesizes the whole pipeline, including the deploy stage and its post steps.

    CloudFormation Resource: AWS::CodePipeline::Pipeline
    Documentation: https://docs.aws.amazon.com/AWSCloudFormation/latest/UserGuide/aws-resource-codepipeline-pipeline.html
    """
    template = assertions.Template.from_stack(make_pipeline())

    template.resource_count_is("AWS::CodeCommit::Repository", 1)
    template.has_resource_properties(
        "AWS::CodeCommit::Repository",
        {"RepositoryName": "WorkshopRepo"}
    )
    template.has_resource_properties(
        "AWS::CodePipeline::Pipeline",
        {
            "Name": "WorkshopPipeline",
            "Stages": assertions.Match.array_with([
                assertions.Match.object_like({
                    "Name": "Deploy",
                    "Actions": assertions.Match.array_with([
                        assertions.Match.object_like({"Name": "TestViewerEndpoint"}),
                        assertions.Match.object_like({"Name": "TestAPIGatewayEndpoint"})
                    ])
                })
            ])
        }
    )


def test_repository_and_branch_overrides():
    template = assertions.Template.from_stack(
        make_pipeline(repository_name="OtherRepo", branch="develop")
    )
    template.has_resource_properties(
        "AWS::CodeCommit::Repository",
        {"RepositoryName": "OtherRepo"}
    )
